"""Project — owns source units and resolves every documented entity.

The project is the owner of SourceUnit lifetimes: removing a unit drops
its partition from the comment cache, so re-adding the same file parses
it afresh.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import tree_sitter
from pydantic import BaseModel

from commentkit.comments.resolver import CommentResolver
from commentkit.config import CommentParserConfig, Settings
from commentkit.constants import ItemKind, ReflectionKind
from commentkit.diagnostics import Diagnostics
from commentkit.errors import (
    CommentError,
    InvariantViolation,
    UnsupportedLanguageError,
    is_bug_report,
)
from commentkit.models.comment import Comment
from commentkit.source.jsdoc import (
    JSDocBlock,
    JSDocCallbackTag,
    JSDocEnumTag,
    JSDocTag,
    JSDocTemplateTag,
    collect_jsdoc_blocks,
    enclosing_block,
    is_sub_entity,
)
from commentkit.source.symbols import Declaration, Symbol, bind_unit
from commentkit.source.unit import SourceUnit

__all__ = ["DocumentedItem", "Project"]

logger = logging.getLogger(__name__)


class DocumentedItem(BaseModel):
    """One resolved comment and where it came from."""

    kind: ItemKind
    name: str
    reflection_kind: ReflectionKind | None = None
    file: str
    line: int
    comment: Comment


_Task = Callable[[], DocumentedItem | None]


class Project:
    """A set of source units sharing one resolver and cache."""

    def __init__(
        self,
        settings: Settings | None = None,
        resolver: CommentResolver | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.resolver = resolver or CommentResolver(
            style=self.settings.comment_style
        )
        self._units: dict[str, SourceUnit] = {}

    @property
    def units(self) -> list[SourceUnit]:
        return list(self._units.values())

    def add_file(self, path: Path) -> SourceUnit:
        unit = SourceUnit.from_path(path)
        return self._register(unit)

    def add_source(
        self,
        file_name: str,
        text: str,
        language: str | None = None,
    ) -> SourceUnit:
        return self._register(SourceUnit(file_name, text, language=language))

    def remove(self, unit: SourceUnit) -> None:
        """Forget ``unit`` and every comment parsed from it."""
        if self._units.get(unit.file_name) is unit:
            del self._units[unit.file_name]
        self.resolver.cache.drop(unit)

    def _register(self, unit: SourceUnit) -> SourceUnit:
        previous = self._units.get(unit.file_name)
        if previous is not None:
            self.remove(previous)
        self._units[unit.file_name] = unit
        return unit

    # ── Documentation pass ───────────────────────────────

    def document(self, diagnostics: Diagnostics) -> list[DocumentedItem]:
        """Resolve every symbol, signature and JSDoc sub-entity.

        A failure on one item is reported and skipped; the rest of the
        pass continues.
        """
        config = self.settings.parser_config()
        tasks: list[_Task] = []
        for unit in self.units:
            try:
                module = bind_unit(unit)
            except UnsupportedLanguageError as exc:
                _report(diagnostics, exc, unit.file_name)
                continue
            tasks.extend(self._symbol_tasks(module, config, diagnostics))
            for block in collect_jsdoc_blocks(unit):
                tasks.extend(self._jsdoc_tasks(block, config, diagnostics))

        def run(task: _Task) -> DocumentedItem | None:
            try:
                return task()
            except InvariantViolation as exc:
                _report(diagnostics, exc, "item")
                return None

        if self.settings.max_workers > 1:
            with ThreadPoolExecutor(self.settings.max_workers) as pool:
                results = list(pool.map(run, tasks))
        else:
            results = [run(task) for task in tasks]
        return [item for item in results if item is not None]

    def _symbol_tasks(
        self,
        module: Symbol,
        config: CommentParserConfig,
        diagnostics: Diagnostics,
    ) -> list[_Task]:
        tasks: list[_Task] = []
        for symbol in module.walk():
            tasks.append(
                lambda s=symbol: self._symbol_item(s, config, diagnostics)
            )
            for declaration in symbol.signatures:
                tasks.append(
                    lambda s=symbol, d=declaration: self._signature_item(
                        s.qualified_name, d, config, diagnostics
                    )
                )
        return tasks

    def _jsdoc_tasks(
        self,
        block: JSDocBlock,
        config: CommentParserConfig,
        diagnostics: Diagnostics,
    ) -> list[_Task]:
        tasks: list[_Task] = []
        for tag in block.walk():
            if not is_sub_entity(tag):
                continue
            if isinstance(tag, JSDocEnumTag):
                for member in _enum_members(block):
                    tasks.append(
                        lambda t=tag, m=member: self._sub_tag_item(
                            m, t, config, diagnostics
                        )
                    )
                continue
            tasks.append(
                lambda t=tag: self._sub_tag_item(
                    _sub_tag_name(t), t, config, diagnostics
                )
            )
            if isinstance(tag, JSDocCallbackTag):
                tasks.append(
                    lambda t=tag: self._signature_item(
                        t.name or "callback", t, config, diagnostics
                    )
                )
        return tasks

    # ── Items ────────────────────────────────────────────

    def _symbol_item(
        self,
        symbol: Symbol,
        config: CommentParserConfig,
        diagnostics: Diagnostics,
    ) -> DocumentedItem | None:
        comment = self.resolver.get_comment(
            symbol, symbol.kind, config, diagnostics
        )
        if comment is None:
            return None
        first = symbol.declarations[0]
        return DocumentedItem(
            kind=ItemKind.SYMBOL,
            name=symbol.qualified_name,
            reflection_kind=symbol.kind,
            file=first.unit.file_name,
            line=first.line,
            comment=comment,
        )

    def _signature_item(
        self,
        name: str,
        declaration: Declaration | JSDocCallbackTag,
        config: CommentParserConfig,
        diagnostics: Diagnostics,
    ) -> DocumentedItem | None:
        comment = self.resolver.get_signature_comment(
            declaration, config, diagnostics
        )
        if comment is None:
            return None
        if isinstance(declaration, Declaration):
            file_name, line = declaration.unit.file_name, declaration.line
        else:
            file_name, line = _tag_location(declaration)
        return DocumentedItem(
            kind=ItemKind.SIGNATURE,
            name=name,
            file=file_name,
            line=line,
            comment=comment,
        )

    def _sub_tag_item(
        self,
        name: str,
        tag: JSDocTag,
        config: CommentParserConfig,
        diagnostics: Diagnostics,
    ) -> DocumentedItem | None:
        comment = self.resolver.get_jsdoc_comment(tag, config, diagnostics)
        if comment is None:
            return None
        file_name, line = _tag_location(tag)
        return DocumentedItem(
            kind=ItemKind.SUB_TAG,
            name=name,
            file=file_name,
            line=line,
            comment=comment,
        )


def _report(diagnostics: Diagnostics, exc: CommentError, scope: str) -> None:
    logger.debug(
        "event=skipped scope=%s class=%s bug_report=%s",
        scope,
        diagnostics.report(exc).value,
        is_bug_report(exc),
    )


def _sub_tag_name(tag: JSDocTag) -> str:
    if isinstance(tag, JSDocTemplateTag):
        return ", ".join(tag.type_parameters) or "template"
    return tag.name or f"@{tag.tag_name}"


def _tag_location(tag: JSDocTag) -> tuple[str, int]:
    block = enclosing_block(tag)
    return block.unit.file_name, block.unit.line_of(tag.start)


def _enum_members(block: JSDocBlock) -> list[str]:
    """Keys of the object literal an ``@enum`` comment documents."""
    if block.host is None:
        return []
    literal = _first_object(block.host)
    if literal is None:
        return []
    members: list[str] = []
    for child in literal.named_children:
        if child.type == "pair":
            key = child.child_by_field_name("key")
            if key is not None:
                members.append(block.unit.node_text(key).strip("'\""))
        elif child.type == "shorthand_property_identifier":
            members.append(block.unit.node_text(child))
    return members


def _first_object(node: tree_sitter.Node) -> tree_sitter.Node | None:
    queue = [node]
    while queue:
        current = queue.pop(0)
        if current.type == "object":
            return current
        queue.extend(current.named_children)
    return None

