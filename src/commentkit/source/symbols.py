"""Bind named declarations in a tree-sitter tree to symbols."""

from __future__ import annotations

from dataclasses import dataclass, field

import tree_sitter

from commentkit.constants import ReflectionKind
from commentkit.source.unit import SourceUnit

# Node types that represent named declarations.
_DECLARATION_KINDS: dict[str, ReflectionKind] = {
    "function_declaration": ReflectionKind.FUNCTION,
    "generator_function_declaration": ReflectionKind.FUNCTION,
    "function_signature": ReflectionKind.FUNCTION,
    "class_declaration": ReflectionKind.CLASS,
    "abstract_class_declaration": ReflectionKind.CLASS,
    "interface_declaration": ReflectionKind.INTERFACE,
    "type_alias_declaration": ReflectionKind.TYPE_ALIAS,
    "enum_declaration": ReflectionKind.ENUM,
    "internal_module": ReflectionKind.NAMESPACE,
    "module": ReflectionKind.NAMESPACE,
    "variable_declarator": ReflectionKind.VARIABLE,
    "method_definition": ReflectionKind.METHOD,
    "method_signature": ReflectionKind.METHOD,
    "abstract_method_signature": ReflectionKind.METHOD,
    "field_definition": ReflectionKind.PROPERTY,
    "public_field_definition": ReflectionKind.PROPERTY,
    "property_signature": ReflectionKind.PROPERTY,
    "enum_assignment": ReflectionKind.ENUM_MEMBER,
}

# Wrappers whose inner declaration is bound in the enclosing scope.
_WRAPPERS = frozenset({
    "export_statement",
    "ambient_declaration",
    "lexical_declaration",
    "variable_declaration",
    "expression_statement",
})

# Containers whose members form a child scope.
_BODIES = frozenset({
    "class_body",
    "interface_body",
    "object_type",
    "enum_body",
    "statement_block",
})

# Function-like nodes that carry their own signature comment.
SIGNATURE_NODE_TYPES = frozenset({
    "function_declaration",
    "generator_function_declaration",
    "function_signature",
    "method_definition",
    "method_signature",
    "abstract_method_signature",
})

_FUNCTION_VALUES = frozenset({
    "arrow_function",
    "function_expression",
    "function",
})


@dataclass(eq=False)
class Declaration:
    """One syntax node that declares a symbol."""

    unit: SourceUnit
    node: tree_sitter.Node

    @property
    def is_source_unit(self) -> bool:
        return self.node.type == "program"

    @property
    def is_signature(self) -> bool:
        if self.node.type in SIGNATURE_NODE_TYPES:
            return True
        if self.node.type == "variable_declarator":
            value = self.node.child_by_field_name("value")
            return value is not None and value.type in _FUNCTION_VALUES
        return False

    @property
    def line(self) -> int:
        return self.unit.line_of(self.node.start_byte)


@dataclass(eq=False)
class Symbol:
    """A named binding with every declaration that contributes to it."""

    name: str
    kind: ReflectionKind
    declarations: list[Declaration] = field(
        default_factory=lambda: list[Declaration]()
    )
    parent: Symbol | None = field(default=None, repr=False)
    children: list[Symbol] = field(
        default_factory=lambda: list[Symbol](), repr=False
    )

    @property
    def qualified_name(self) -> str:
        if self.parent is None or self.parent.kind == ReflectionKind.MODULE:
            return self.name
        return f"{self.parent.qualified_name}.{self.name}"

    @property
    def signatures(self) -> list[Declaration]:
        return [d for d in self.declarations if d.is_signature]

    def walk(self) -> list[Symbol]:
        """This symbol followed by all descendants, depth first."""
        found = [self]
        for child in self.children:
            found.extend(child.walk())
        return found


def bind_unit(unit: SourceUnit) -> Symbol:
    """Bind every named declaration of ``unit`` under its module symbol."""
    module = Symbol(
        name=unit.file_name,
        kind=ReflectionKind.MODULE,
        declarations=[Declaration(unit, unit.root)],
    )
    _bind_scope(unit, unit.root, module)
    return module


def _bind_scope(
    unit: SourceUnit,
    container: tree_sitter.Node,
    scope: Symbol,
) -> None:
    by_name: dict[str, Symbol] = {}
    for node in _declarations_in(container):
        kind = _kind_for(unit, node)
        name = _name_of(unit, node)
        if kind is None or name is None:
            continue
        symbol = by_name.get(name)
        if symbol is None:
            symbol = Symbol(name=name, kind=kind, parent=scope)
            by_name[name] = symbol
            scope.children.append(symbol)
        symbol.declarations.append(Declaration(unit, node))

        body = _body_of(node)
        if body is not None:
            _bind_scope(unit, body, symbol)


def _declarations_in(container: tree_sitter.Node) -> list[tree_sitter.Node]:
    """Declaration nodes directly in ``container``, unwrapping wrappers."""
    found: list[tree_sitter.Node] = []
    for child in container.named_children:
        if child.type in _WRAPPERS:
            found.extend(_declarations_in(child))
        elif child.type in _DECLARATION_KINDS:
            found.append(child)
        elif child.type == "property_identifier" and container.type == "enum_body":
            found.append(child)
    return found


def _kind_for(unit: SourceUnit, node: tree_sitter.Node) -> ReflectionKind | None:
    if node.type == "property_identifier":
        return ReflectionKind.ENUM_MEMBER
    kind = _DECLARATION_KINDS.get(node.type)
    if kind == ReflectionKind.METHOD and node.type == "method_definition":
        if _name_of(unit, node) == "constructor":
            return ReflectionKind.CONSTRUCTOR
        if any(c.type in ("get", "set") for c in node.children):
            return ReflectionKind.ACCESSOR
    return kind


def _name_of(unit: SourceUnit, node: tree_sitter.Node) -> str | None:
    """Extract the identifier name from a declaration node."""
    if node.type == "property_identifier":
        return unit.node_text(node)
    name = node.child_by_field_name("name") or node.child_by_field_name(
        "property"
    )
    if name is None or name.type in ("object_pattern", "array_pattern"):
        return None
    return unit.node_text(name).strip("'\"")


def _body_of(node: tree_sitter.Node) -> tree_sitter.Node | None:
    body = node.child_by_field_name("body")
    if body is not None and body.type in _BODIES:
        if node.type in SIGNATURE_NODE_TYPES:
            return None  # function bodies are not documentation scopes
        return body
    return None
