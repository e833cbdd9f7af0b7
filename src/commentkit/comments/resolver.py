"""Comment resolution — which parsed comment belongs to which declaration.

Three entry points share one core:

* ``get_comment``: symbol comments, followed by the module
  applicability filter;
* ``get_signature_comment``: comments on one callable signature;
* ``get_jsdoc_comment``: one named entity out of a shared JSDoc block.

The core parses each raw comment at most once through the cache and
always returns an independent copy.
"""

from __future__ import annotations

from functools import partial

from commentkit.comments.cache import CommentCache
from commentkit.comments.discovery import (
    discover_comment,
    discover_signature_comment,
)
from commentkit.comments.lexer import lex_block_comment
from commentkit.comments.parser import parse_comment
from commentkit.comments.protocols import (
    BlockLexer,
    CommentDiscoverer,
    CommentParser,
    DiagnosticSink,
    Discovered,
    SignatureDiscoverer,
)
from commentkit.config import CommentParserConfig
from commentkit.constants import (
    ENUM_TAG,
    MODULE_MODIFIER,
    MODULE_TAG,
    CommentKind,
    CommentStyle,
    ReflectionKind,
)
from commentkit.errors import MissingSubTagError, UnknownCommentKindError
from commentkit.models.comment import Comment
from commentkit.source.jsdoc import (
    JSDocCallbackTag,
    JSDocEnumTag,
    JSDocTag,
    JSDocTemplateTag,
    enclosing_block,
)
from commentkit.source.symbols import Declaration, Symbol
from commentkit.source.unit import SourceUnit


class CommentResolver:
    """Resolves comments for symbols, signatures and JSDoc sub-tags.

    Owns (or shares) a :class:`CommentCache`; every collaborator can be
    swapped for a test double.
    """

    def __init__(
        self,
        cache: CommentCache | None = None,
        *,
        style: CommentStyle = CommentStyle.JSDOC,
        discoverer: CommentDiscoverer | None = None,
        signature_discoverer: SignatureDiscoverer | None = None,
        lexer: BlockLexer | None = None,
        parser: CommentParser | None = None,
    ) -> None:
        self.cache = cache if cache is not None else CommentCache()
        self._discover = discoverer or partial(discover_comment, style=style)
        self._discover_signature = signature_discoverer or partial(
            discover_signature_comment, style=style
        )
        self._lex = lexer or lex_block_comment
        self._parse = parser or parse_comment

    # ── Entry points ─────────────────────────────────────

    def get_comment(
        self,
        symbol: Symbol,
        kind: ReflectionKind,
        config: CommentParserConfig,
        diagnostics: DiagnosticSink,
    ) -> Comment | None:
        """Comment for ``symbol``, or None if none applies to it."""
        comment = self.resolve_and_parse(
            self._discover(symbol, kind, diagnostics), config, diagnostics
        )
        if comment is None:
            return None
        return _applicable(symbol, comment)

    def get_signature_comment(
        self,
        declaration: Declaration | JSDocCallbackTag,
        config: CommentParserConfig,
        diagnostics: DiagnosticSink,
    ) -> Comment | None:
        """Comment for one signature. Signatures are never module-scoped."""
        return self.resolve_and_parse(
            self._discover_signature(declaration), config, diagnostics
        )

    def get_jsdoc_comment(
        self,
        declaration: JSDocTag,
        config: CommentParserConfig,
        diagnostics: DiagnosticSink,
    ) -> Comment | None:
        """Slice the comment for one sub-entity out of its shared block.

        Raises:
            MissingSubTagError: the parsed block lacks a tag that the
                declaration tree says exists.
        """
        block = enclosing_block(declaration)
        comment = self.resolve_and_parse(
            (block.unit, block.range), config, diagnostics
        )
        if comment is None:
            return None

        if isinstance(declaration, JSDocEnumTag):
            enum_tag = comment.get_tag(ENUM_TAG)
            return Comment.from_content(enum_tag.content if enum_tag else None)

        if (
            isinstance(declaration, JSDocTemplateTag)
            and declaration.comment
            and len(declaration.type_parameters) > 1
        ):
            # No way to tell which listed parameter the text describes.
            diagnostics.warn(
                "commentkit does not support multiple type parameters "
                "defined in a single @template tag with a comment "
                f"at {_location(block.unit, declaration.start)}."
            )
            return None

        name: str | None
        if isinstance(declaration, JSDocTemplateTag):
            name = (
                declaration.type_parameters[0]
                if declaration.type_parameters
                else None
            )
        else:
            name = declaration.name
        if not name:
            return None

        tag_name = f"@{declaration.tag_name}"
        tag = comment.get_identified_tag(name, tag_name)
        if tag is None:
            raise MissingSubTagError(name, tag_name)
        return Comment.from_content(tag.content)

    # ── Shared core ──────────────────────────────────────

    def resolve_and_parse(
        self,
        discovered: Discovered | None,
        config: CommentParserConfig,
        diagnostics: DiagnosticSink,
    ) -> Comment | None:
        """Parse (or fetch) the comment at a discovered range."""
        if discovered is None:
            return None

        unit, comment_range = discovered
        location = _location(unit, comment_range.start)

        def warn(message: str) -> None:
            diagnostics.warn(f"{message} in comment at {location}.")

        match comment_range.kind:
            case CommentKind.BLOCK:
                return self.cache.get_or_parse(
                    unit,
                    comment_range.start,
                    lambda: self._parse(
                        self._lex(
                            unit.source, comment_range.start, comment_range.end
                        ),
                        config,
                        warn,
                    ),
                )
            case CommentKind.LINE:
                diagnostics.warn(
                    "Line comments are not supported, ignoring comment "
                    f"at {location}."
                )
                return None
            case _:
                raise UnknownCommentKindError(
                    "Discovery produced unknown comment kind "
                    f"{comment_range.kind!r} at {location}, "
                    "please file a bug report."
                )


def _applicable(symbol: Symbol, comment: Comment) -> Comment | None:
    """Keep module comments on modules and everything else off them."""
    is_module_comment = comment.has_modifier(MODULE_MODIFIER) or (
        comment.get_tag(MODULE_TAG) is not None
    )
    if any(d.is_source_unit for d in symbol.declarations):
        # Without a marker the comment belongs to the first statement.
        return comment if is_module_comment else None
    return None if is_module_comment else comment


def _location(unit: SourceUnit, offset: int) -> str:
    return f"{unit.file_name}:{unit.line_of(offset)}"
