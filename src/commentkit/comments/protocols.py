"""Protocol-based collaborator interfaces for the comment resolver.

The built-in discovery, lexer and parser satisfy these protocols
structurally (no inheritance). Test doubles can be plain functions
matching the same signature.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from commentkit.comments.lexer import Token
from commentkit.config import CommentParserConfig
from commentkit.constants import ReflectionKind
from commentkit.models.comment import Comment
from commentkit.models.ranges import CommentRange
from commentkit.source.jsdoc import JSDocCallbackTag
from commentkit.source.symbols import Declaration, Symbol
from commentkit.source.unit import SourceUnit

Discovered = tuple[SourceUnit, CommentRange]


class DiagnosticSink(Protocol):
    def warn(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...


class CommentDiscoverer(Protocol):
    def __call__(
        self,
        symbol: Symbol,
        kind: ReflectionKind,
        diagnostics: DiagnosticSink,
    ) -> Discovered | None: ...


class SignatureDiscoverer(Protocol):
    def __call__(
        self, declaration: Declaration | JSDocCallbackTag
    ) -> Discovered | None: ...


class BlockLexer(Protocol):
    def __call__(
        self, text: str | bytes, start: int, end: int
    ) -> list[Token]: ...


class CommentParser(Protocol):
    def __call__(
        self,
        tokens: list[Token],
        config: CommentParserConfig,
        warn: Callable[[str], None],
    ) -> Comment: ...
