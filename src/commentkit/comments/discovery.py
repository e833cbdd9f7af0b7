"""Locate the raw comment range that documents a symbol or signature."""

from __future__ import annotations

from typing import assert_never

import tree_sitter

from commentkit.comments.protocols import DiagnosticSink, Discovered
from commentkit.constants import CommentKind, CommentStyle, ReflectionKind
from commentkit.models.ranges import CommentRange
from commentkit.source.jsdoc import JSDocCallbackTag, enclosing_block, is_jsdoc
from commentkit.source.symbols import SIGNATURE_NODE_TYPES, Declaration, Symbol

# Node types that may carry the comment for each reflection kind.
DISCOVERY_NODE_TYPES: dict[ReflectionKind, frozenset[str]] = {
    ReflectionKind.MODULE: frozenset({"program"}),
    ReflectionKind.NAMESPACE: frozenset({"internal_module", "module"}),
    ReflectionKind.CLASS: frozenset({
        "class_declaration",
        "abstract_class_declaration",
        "variable_declarator",
    }),
    ReflectionKind.INTERFACE: frozenset({"interface_declaration"}),
    ReflectionKind.TYPE_ALIAS: frozenset({"type_alias_declaration"}),
    ReflectionKind.ENUM: frozenset({"enum_declaration", "variable_declarator"}),
    ReflectionKind.ENUM_MEMBER: frozenset({
        "enum_assignment",
        "property_identifier",
    }),
    ReflectionKind.FUNCTION: frozenset({
        "function_declaration",
        "generator_function_declaration",
        "function_signature",
        "variable_declarator",
    }),
    ReflectionKind.VARIABLE: frozenset({"variable_declarator"}),
    ReflectionKind.METHOD: frozenset({
        "method_definition",
        "method_signature",
        "abstract_method_signature",
    }),
    ReflectionKind.PROPERTY: frozenset({
        "field_definition",
        "public_field_definition",
        "property_signature",
    }),
    ReflectionKind.ACCESSOR: frozenset({"method_definition"}),
    ReflectionKind.CONSTRUCTOR: frozenset({"method_definition"}),
}

# Parents that own the leading comments of the declaration inside them.
_STATEMENT_WRAPPERS = frozenset({
    "export_statement",
    "ambient_declaration",
    "lexical_declaration",
    "variable_declaration",
    "expression_statement",
})


def discover_comment(
    symbol: Symbol,
    kind: ReflectionKind,
    diagnostics: DiagnosticSink,
    *,
    style: CommentStyle = CommentStyle.JSDOC,
) -> Discovered | None:
    """Find the comment for ``symbol`` among its declarations.

    When declarations disagree, the first one wins and a warning names
    the symbol.
    """
    wanted = DISCOVERY_NODE_TYPES.get(kind, frozenset())
    found: list[Discovered] = []

    for declaration in symbol.declarations:
        if declaration.node.type not in wanted:
            continue
        if declaration.is_source_unit:
            node = _module_comment(declaration, style)
        else:
            node = _last_leading_comment(
                declaration, _statement_of(declaration.node), style
            )
        if node is not None:
            found.append((declaration.unit, _range_of(declaration, node)))

    if not found:
        return None
    distinct = {(id(unit), rng.start) for unit, rng in found}
    if len(distinct) > 1:
        diagnostics.warn(
            f"{symbol.name} has multiple declarations with a comment. "
            "An arbitrary comment will be used."
        )
    return found[0]


def discover_signature_comment(
    declaration: Declaration | JSDocCallbackTag,
    *,
    style: CommentStyle = CommentStyle.JSDOC,
) -> Discovered | None:
    """Find the comment for one callable signature."""
    if isinstance(declaration, JSDocCallbackTag):
        block = enclosing_block(declaration)
        return block.unit, block.range

    node = declaration.node
    if node.type not in SIGNATURE_NODE_TYPES and not declaration.is_signature:
        return None
    comment = _last_leading_comment(declaration, _statement_of(node), style)
    if comment is None:
        return None
    return declaration.unit, _range_of(declaration, comment)


def matches_style(text: str, style: CommentStyle) -> bool:
    match style:
        case CommentStyle.JSDOC:
            return is_jsdoc(text)
        case CommentStyle.BLOCK:
            return text.startswith("/*")
        case CommentStyle.LINE:
            return text.startswith("//")
        case CommentStyle.ALL:
            return True
        case _:
            assert_never(style)


def leading_comments(node: tree_sitter.Node) -> list[tree_sitter.Node]:
    """Comments directly before ``node``, in source order.

    A comment on the same line as the end of the previous sibling
    trails that sibling and is not included.
    """
    comments: list[tree_sitter.Node] = []
    sibling = node.prev_sibling
    while sibling is not None and sibling.type == "comment":
        comments.append(sibling)
        sibling = sibling.prev_sibling
    if comments and sibling is not None and _ends_item(sibling):
        if comments[-1].start_point[0] == sibling.end_point[0]:
            comments.pop()
    comments.reverse()
    return comments


def _ends_item(node: tree_sitter.Node) -> bool:
    """True for siblings a same-line comment can trail."""
    return node.is_named or node.type in (",", ";")


def _module_comment(
    declaration: Declaration, style: CommentStyle
) -> tree_sitter.Node | None:
    """First matching comment before the first statement of the file."""
    root = declaration.node
    first_statement = next(
        (
            c
            for c in root.named_children
            if c.type not in ("comment", "hash_bang_line")
        ),
        None,
    )
    if first_statement is not None:
        candidates = leading_comments(first_statement)
    else:
        candidates = [c for c in root.named_children if c.type == "comment"]
    for comment in candidates:
        if matches_style(_text(declaration, comment), style):
            return comment
    return None


def _last_leading_comment(
    declaration: Declaration,
    node: tree_sitter.Node,
    style: CommentStyle,
) -> tree_sitter.Node | None:
    for comment in reversed(leading_comments(node)):
        if matches_style(_text(declaration, comment), style):
            return comment
    return None


def _statement_of(node: tree_sitter.Node) -> tree_sitter.Node:
    """Climb to the node whose leading comments document ``node``."""
    current = node
    parent = current.parent
    while parent is not None and parent.type in _STATEMENT_WRAPPERS:
        current = parent
        parent = current.parent
    return current


def _range_of(
    declaration: Declaration, comment: tree_sitter.Node
) -> CommentRange:
    text = _text(declaration, comment)
    kind = CommentKind.LINE if text.startswith("//") else CommentKind.BLOCK
    return CommentRange(kind, comment.start_byte, comment.end_byte)


def _text(declaration: Declaration, node: tree_sitter.Node) -> str:
    return declaration.unit.node_text(node)
