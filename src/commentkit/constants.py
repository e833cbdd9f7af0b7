"""Shared constants — single source of truth for cross-module values.

StrEnum members are str-compatible, so JSON output and settings parsing
work with the plain values.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class CommentKind(StrEnum):
    """Syntactic style of a raw comment range."""

    BLOCK = "block"  # /* ... */ and /** ... */
    LINE = "line"  # // ...


class CommentStyle(StrEnum):
    """Which raw comments discovery is allowed to pick up."""

    JSDOC = "jsdoc"  # /** only
    BLOCK = "block"  # any /* */
    LINE = "line"  # // only
    ALL = "all"


class ReflectionKind(StrEnum):
    """What kind of declaration a symbol represents."""

    MODULE = "module"
    NAMESPACE = "namespace"
    CLASS = "class"
    INTERFACE = "interface"
    TYPE_ALIAS = "type_alias"
    ENUM = "enum"
    ENUM_MEMBER = "enum_member"
    FUNCTION = "function"
    VARIABLE = "variable"
    METHOD = "method"
    PROPERTY = "property"
    ACCESSOR = "accessor"
    CONSTRUCTOR = "constructor"


class DisplayPartKind(StrEnum):
    """Kind of a rendered fragment inside comment content."""

    TEXT = "text"
    CODE = "code"
    INLINE_TAG = "inline-tag"


class TokenKind(StrEnum):
    """Token types produced by the block comment lexer."""

    TEXT = "text"
    CODE = "code"
    TAG = "tag"
    NEWLINE = "newline"
    OPEN_BRACE = "open_brace"
    CLOSE_BRACE = "close_brace"


# ── Tag names ────────────────────────────────────────────

MODULE_MODIFIER = "@packageDocumentation"
MODULE_TAG = "@module"
ENUM_TAG = "@enum"

# Tags whose first word is an identifier naming the documented entity.
NAMED_TAGS = frozenset({
    "@param",
    "@property",
    "@prop",
    "@template",
    "@typeParam",
    "@typedef",
    "@callback",
})

# Tags that may start with a {type} expression which is not content.
TYPED_TAGS = NAMED_TAGS | {"@enum", "@returns", "@return", "@throws", "@type"}


class ItemKind(StrEnum):
    """What a documented item was resolved from."""

    SYMBOL = "symbol"
    SIGNATURE = "signature"
    SUB_TAG = "sub_tag"
