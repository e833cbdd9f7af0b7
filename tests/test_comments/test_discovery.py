"""Tests for raw comment discovery over tree-sitter trees."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from commentkit.comments.discovery import (
    discover_comment,
    discover_signature_comment,
    leading_comments,
    matches_style,
)
from commentkit.constants import CommentKind, CommentStyle, ReflectionKind
from commentkit.diagnostics import Diagnostics
from commentkit.source.symbols import Symbol, bind_unit
from commentkit.source.unit import SourceUnit

MakeUnit = Callable[..., SourceUnit]


def _find(module: Symbol, qualified_name: str) -> Symbol:
    for symbol in module.walk():
        if symbol.qualified_name == qualified_name:
            return symbol
    raise AssertionError(f"no symbol {qualified_name}")


def _discovered_text(
    unit: SourceUnit,
    symbol: Symbol,
    diagnostics: Diagnostics,
    style: CommentStyle = CommentStyle.JSDOC,
) -> str | None:
    found = discover_comment(symbol, symbol.kind, diagnostics, style=style)
    if found is None:
        return None
    found_unit, rng = found
    assert found_unit is unit
    return unit.slice(rng.start, rng.end)


class TestMatchesStyle:
    @pytest.mark.parametrize(
        ("text", "style", "expected"),
        [
            ("/** doc */", CommentStyle.JSDOC, True),
            ("/*** banner */", CommentStyle.JSDOC, False),
            ("/**/", CommentStyle.JSDOC, False),
            ("/* plain */", CommentStyle.JSDOC, False),
            ("/* plain */", CommentStyle.BLOCK, True),
            ("// line", CommentStyle.BLOCK, False),
            ("// line", CommentStyle.LINE, True),
            ("/** doc */", CommentStyle.LINE, False),
            ("// line", CommentStyle.ALL, True),
        ],
    )
    def test_styles(
        self, text: str, style: CommentStyle, expected: bool
    ) -> None:
        assert matches_style(text, style) is expected


class TestSymbolDiscovery:
    def test_function_comment(
        self, make_unit: MakeUnit, diagnostics: Diagnostics
    ) -> None:
        unit = make_unit("const a = 1;\n\n/** Adds. */\nfunction add() {}\n")
        module = bind_unit(unit)
        assert (
            _discovered_text(unit, _find(module, "add"), diagnostics)
            == "/** Adds. */"
        )

    def test_exported_const_unwraps_statement(
        self, make_unit: MakeUnit, diagnostics: Diagnostics
    ) -> None:
        unit = make_unit("/** The answer. */\nexport const answer = 42;\n")
        module = bind_unit(unit)
        assert (
            _discovered_text(unit, _find(module, "answer"), diagnostics)
            == "/** The answer. */"
        )

    def test_last_leading_comment_wins(
        self, make_unit: MakeUnit, diagnostics: Diagnostics
    ) -> None:
        unit = make_unit("/** Old. */\n/** New. */\nfunction f() {}\n")
        module = bind_unit(unit)
        assert (
            _discovered_text(unit, _find(module, "f"), diagnostics)
            == "/** New. */"
        )

    def test_plain_block_comment_ignored_for_jsdoc_style(
        self, make_unit: MakeUnit, diagnostics: Diagnostics
    ) -> None:
        unit = make_unit("/* not docs */\nfunction f() {}\n")
        module = bind_unit(unit)
        assert _discovered_text(unit, _find(module, "f"), diagnostics) is None
        assert (
            _discovered_text(
                unit, _find(module, "f"), diagnostics, CommentStyle.BLOCK
            )
            == "/* not docs */"
        )

    def test_line_comment_range_kind(
        self, make_unit: MakeUnit, diagnostics: Diagnostics
    ) -> None:
        unit = make_unit("// says hi\nfunction hi() {}\n")
        symbol = _find(bind_unit(unit), "hi")
        found = discover_comment(
            symbol, symbol.kind, diagnostics, style=CommentStyle.LINE
        )
        assert found is not None
        assert found[1].kind == CommentKind.LINE

    def test_class_members(
        self, make_unit: MakeUnit, diagnostics: Diagnostics
    ) -> None:
        unit = make_unit(
            "/** A box. */\n"
            "class Box {\n"
            "  /** Make one. */\n"
            "  constructor() {}\n"
            "  /** Size. */\n"
            "  get size() { return 1; }\n"
            "  /** Open it. */\n"
            "  open() {}\n"
            "}\n"
        )
        module = bind_unit(unit)
        assert _discovered_text(unit, _find(module, "Box"), diagnostics) == (
            "/** A box. */"
        )
        assert _discovered_text(
            unit, _find(module, "Box.constructor"), diagnostics
        ) == ("/** Make one. */")
        assert _discovered_text(
            unit, _find(module, "Box.size"), diagnostics
        ) == ("/** Size. */")
        assert _discovered_text(
            unit, _find(module, "Box.open"), diagnostics
        ) == ("/** Open it. */")

    def test_trailing_comment_belongs_to_previous_statement(
        self, make_unit: MakeUnit, diagnostics: Diagnostics
    ) -> None:
        unit = make_unit("let x = 1; /** about x */\nfunction f() {}\n")
        module = bind_unit(unit)
        assert _discovered_text(unit, _find(module, "f"), diagnostics) is None

    def test_kind_without_matching_node_finds_nothing(
        self, make_unit: MakeUnit, diagnostics: Diagnostics
    ) -> None:
        unit = make_unit("/** Adds. */\nfunction add() {}\n")
        symbol = _find(bind_unit(unit), "add")
        assert (
            discover_comment(symbol, ReflectionKind.INTERFACE, diagnostics)
            is None
        )


class TestModuleDiscovery:
    def test_first_comment_before_first_statement(
        self, make_unit: MakeUnit, diagnostics: Diagnostics
    ) -> None:
        unit = make_unit(
            "/** @packageDocumentation Utilities. */\n"
            "/** Adds. */\n"
            "function add() {}\n"
        )
        module = bind_unit(unit)
        assert _discovered_text(unit, module, diagnostics) == (
            "/** @packageDocumentation Utilities. */"
        )
        assert _discovered_text(unit, _find(module, "add"), diagnostics) == (
            "/** Adds. */"
        )

    def test_hashbang_is_skipped(
        self, make_unit: MakeUnit, diagnostics: Diagnostics
    ) -> None:
        unit = make_unit(
            "#!/usr/bin/env node\n/** @module cli */\nmain();\n"
        )
        assert _discovered_text(unit, bind_unit(unit), diagnostics) == (
            "/** @module cli */"
        )

    def test_comment_only_file(
        self, make_unit: MakeUnit, diagnostics: Diagnostics
    ) -> None:
        unit = make_unit("/** @packageDocumentation Empty. */\n")
        assert _discovered_text(unit, bind_unit(unit), diagnostics) == (
            "/** @packageDocumentation Empty. */"
        )

    def test_no_comment(
        self, make_unit: MakeUnit, diagnostics: Diagnostics
    ) -> None:
        unit = make_unit("function f() {}\n")
        assert _discovered_text(unit, bind_unit(unit), diagnostics) is None


class TestMultipleDeclarations:
    def test_overloads_with_different_comments_warn(
        self, make_unit: MakeUnit, diagnostics: Diagnostics
    ) -> None:
        unit = make_unit(
            "/** First. */\n"
            "export function f(a: string): void;\n"
            "/** Second. */\n"
            "export function f(a: number): void;\n"
            "export function f(a: unknown) {}\n",
            "overloads.ts",
        )
        symbol = _find(bind_unit(unit), "f")
        assert len(symbol.declarations) == 3

        assert _discovered_text(unit, symbol, diagnostics) == "/** First. */"
        assert diagnostics.warning_count == 1
        assert diagnostics.messages[0][1] == (
            "f has multiple declarations with a comment. "
            "An arbitrary comment will be used."
        )

    def test_single_commented_declaration_does_not_warn(
        self, make_unit: MakeUnit, diagnostics: Diagnostics
    ) -> None:
        unit = make_unit(
            "/** Only. */\n"
            "export function g(a: string): void;\n"
            "export function g(a: unknown) {}\n",
            "overloads.ts",
        )
        symbol = _find(bind_unit(unit), "g")
        assert _discovered_text(unit, symbol, diagnostics) == "/** Only. */"
        assert diagnostics.warning_count == 0


class TestSignatureDiscovery:
    def test_overload_signature_comments(self, make_unit: MakeUnit) -> None:
        unit = make_unit(
            "/** Strings. */\n"
            "export function f(a: string): void;\n"
            "export function f(a: unknown) {}\n",
            "sig.ts",
        )
        symbol = _find(bind_unit(unit), "f")
        first, second = symbol.signatures
        found = discover_signature_comment(first)
        assert found is not None
        assert unit.slice(found[1].start, found[1].end) == "/** Strings. */"
        assert discover_signature_comment(second) is None

    def test_arrow_function_const(self, make_unit: MakeUnit) -> None:
        unit = make_unit("/** Doubles. */\nconst double = (n) => n * 2;\n")
        symbol = _find(bind_unit(unit), "double")
        (declaration,) = symbol.signatures
        found = discover_signature_comment(declaration)
        assert found is not None
        assert unit.slice(found[1].start, found[1].end) == "/** Doubles. */"

    def test_non_callable_has_no_signature_comment(
        self, make_unit: MakeUnit
    ) -> None:
        unit = make_unit("/** Answer. */\nconst answer = 42;\n")
        symbol = _find(bind_unit(unit), "answer")
        assert symbol.signatures == []
        assert discover_signature_comment(symbol.declarations[0]) is None


class TestLeadingComments:
    def test_order_is_source_order(self, make_unit: MakeUnit) -> None:
        unit = make_unit("/* a */\n/* b */\nfoo();\n")
        statement = unit.root.named_children[-1]
        texts = [unit.node_text(c) for c in leading_comments(statement)]
        assert texts == ["/* a */", "/* b */"]
