"""Source units — one parsed file, identified by object identity."""

from __future__ import annotations

import importlib
from bisect import bisect_right
from collections.abc import Iterator
from pathlib import Path

import tree_sitter

from commentkit.config import EXTENSION_MAP, GRAMMAR_MODULES
from commentkit.errors import UnsupportedLanguageError


def language_for_path(path: str) -> str | None:
    """Map a file name to a grammar language, or None if unknown."""
    return EXTENSION_MAP.get(Path(path).suffix)


class SourceUnit:
    """An immutable block of source text plus its tree-sitter tree.

    Units hash by identity so they can key the comment cache; two
    units with the same text are still different partitions.
    """

    def __init__(
        self,
        file_name: str,
        text: str,
        language: str | None = None,
    ) -> None:
        self.file_name = file_name
        self.text = text
        self.source = text.encode("utf-8")
        self.language = language or language_for_path(file_name)
        self._tree: tree_sitter.Tree | None = None
        self._line_starts: list[int] | None = None

    @classmethod
    def from_path(cls, path: Path, language: str | None = None) -> SourceUnit:
        return cls(
            str(path),
            path.read_text(encoding="utf-8"),
            language=language,
        )

    def __repr__(self) -> str:
        return f"SourceUnit({self.file_name!r}, language={self.language!r})"

    @property
    def tree(self) -> tree_sitter.Tree:
        if self._tree is None:
            parser = _get_parser(self.language) if self.language else None
            if parser is None:
                raise UnsupportedLanguageError(
                    f"No tree-sitter grammar for {self.file_name} "
                    f"(language: {self.language or 'unknown'})"
                )
            self._tree = parser.parse(self.source)
        return self._tree

    @property
    def root(self) -> tree_sitter.Node:
        return self.tree.root_node

    def line_of(self, offset: int) -> int:
        """1-based line number of a byte offset."""
        if self._line_starts is None:
            starts = [0]
            pos = self.source.find(b"\n")
            while pos != -1:
                starts.append(pos + 1)
                pos = self.source.find(b"\n", pos + 1)
            self._line_starts = starts
        return bisect_right(self._line_starts, offset)

    def slice(self, start: int, end: int) -> str:
        """Decoded text between two byte offsets."""
        return self.source[start:end].decode("utf-8", errors="replace")

    def node_text(self, node: tree_sitter.Node) -> str:
        return self.slice(node.start_byte, node.end_byte)

    def comment_nodes(self) -> Iterator[tree_sitter.Node]:
        """Every comment node in the tree, in source order."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node.type == "comment":
                yield node
                continue
            stack.extend(reversed(node.children))


# ---------------------------------------------------------------------------
# Parser cache
# ---------------------------------------------------------------------------

_parser_cache: dict[str, tree_sitter.Parser] = {}


def _get_parser(language: str) -> tree_sitter.Parser | None:
    """Get or create a cached tree-sitter parser."""
    if language in _parser_cache:
        return _parser_cache[language]

    grammar = GRAMMAR_MODULES.get(language)
    if grammar is None:
        return None
    module_name, factory = grammar

    try:
        mod = importlib.import_module(module_name)
        capsule: object = getattr(mod, factory)()
        lang = tree_sitter.Language(capsule)
        parser = tree_sitter.Parser(lang)
        _parser_cache[language] = parser
        return parser
    except (ImportError, AttributeError):
        return None
