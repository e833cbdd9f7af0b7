"""JSDoc declaration tree — the named entities declared inside a /** */ block.

Several entities can share one comment block: the parameters of a
``@callback``, the properties of a ``@typedef``, the names listed by a
``@template``. Each becomes a tag node whose ``parent`` chain leads back
to the :class:`JSDocBlock` that spans the whole raw comment.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import tree_sitter

from commentkit.constants import (
    NAMED_TAGS,
    TYPED_TAGS,
    CommentKind,
    TokenKind,
)
from commentkit.models.ranges import CommentRange
from commentkit.source.unit import SourceUnit

if TYPE_CHECKING:
    from commentkit.comments.lexer import Token


@dataclass(eq=False)
class JSDocTag:
    """A single ``@tag`` inside a JSDoc block."""

    tag_name: str  # without the leading "@"
    start: int = 0  # byte offset of "@" in the unit
    name: str | None = None
    comment: str = ""  # inline text following the tag header
    parent: JSDocBlock | JSDocTag | None = field(default=None, repr=False)
    children: list[JSDocTag] = field(
        default_factory=lambda: list[JSDocTag](), repr=False
    )

    def add(self, child: JSDocTag) -> None:
        child.parent = self
        self.children.append(child)


@dataclass(eq=False)
class JSDocParameterTag(JSDocTag):
    """``@param``: a parameter of a function or a ``@callback``."""


@dataclass(eq=False)
class JSDocPropertyTag(JSDocTag):
    """``@property`` / ``@prop``: a property of a ``@typedef``."""


@dataclass(eq=False)
class JSDocCallbackTag(JSDocTag):
    """``@callback Name``: a function type with its own ``@param`` tags."""


@dataclass(eq=False)
class JSDocTypedefTag(JSDocTag):
    """``@typedef {Type} Name``: a type with its own ``@property`` tags."""


@dataclass(eq=False)
class JSDocTemplateTag(JSDocTag):
    """``@template T, U``: one or more type parameters."""

    type_parameters: list[str] = field(default_factory=lambda: list[str]())


@dataclass(eq=False)
class JSDocEnumTag(JSDocTag):
    """``@enum {Type}``: shared description for every enum member."""


# Tags documented on their own wherever they appear.
_STANDALONE = (
    JSDocCallbackTag,
    JSDocTypedefTag,
    JSDocTemplateTag,
    JSDocEnumTag,
)
# Containers whose members are documented on their own.
_MEMBER_OWNERS = (JSDocCallbackTag, JSDocTypedefTag)

_TAG_CLASSES: dict[str, type[JSDocTag]] = {
    "param": JSDocParameterTag,
    "property": JSDocPropertyTag,
    "prop": JSDocPropertyTag,
    "callback": JSDocCallbackTag,
    "typedef": JSDocTypedefTag,
    "template": JSDocTemplateTag,
    "enum": JSDocEnumTag,
}

# Which tags a container tag adopts as children.
_CHILD_TAGS: dict[type[JSDocTag], frozenset[str]] = {
    JSDocCallbackTag: frozenset({"param", "returns", "return"}),
    JSDocTypedefTag: frozenset({"property", "prop"}),
}


@dataclass(eq=False)
class JSDocBlock:
    """The entire raw ``/** ... */`` comment."""

    unit: SourceUnit
    start: int
    end: int
    host: tree_sitter.Node | None = field(default=None, repr=False)
    tags: list[JSDocTag] = field(
        default_factory=lambda: list[JSDocTag](), repr=False
    )
    parent: None = None

    @property
    def range(self) -> CommentRange:
        return CommentRange(CommentKind.BLOCK, self.start, self.end)

    def add(self, tag: JSDocTag) -> None:
        tag.parent = self
        self.tags.append(tag)

    def walk(self) -> Iterator[JSDocTag]:
        """Every tag node, depth first, in source order."""
        stack = list(reversed(self.tags))
        while stack:
            tag = stack.pop()
            yield tag
            stack.extend(reversed(tag.children))

    def find(self, tag_type: type[JSDocTag]) -> list[JSDocTag]:
        return [t for t in self.walk() if isinstance(t, tag_type)]


def build_jsdoc_block(
    unit: SourceUnit,
    start: int,
    end: int,
    host: tree_sitter.Node | None = None,
) -> JSDocBlock:
    """Build the declaration tree for the comment between two byte offsets.

    Tags come from the token stream the comment parser reads, so an
    ``@tag`` inside a code span, a fence or an inline tag declares
    nothing. Only tags that open a line start a node.
    """
    # commentkit.comments imports this module.
    from commentkit.comments.lexer import lex_block_comment

    block = JSDocBlock(unit=unit, start=start, end=end, host=host)
    raw = unit.slice(start, end)
    container: JSDocTag | None = None

    tokens = lex_block_comment(unit.source, start, end)
    for header, content in _sections(tokens):
        tag_name = header.text[1:]
        tag_start = start + len(raw[: header.offset].encode("utf-8"))
        tag = _make_tag(tag_name, content, tag_start)

        if container is not None and tag_name in _CHILD_TAGS[type(container)]:
            container.add(tag)
        else:
            block.add(tag)
            container = tag if type(tag) in _CHILD_TAGS else None

    return block


def collect_jsdoc_blocks(unit: SourceUnit) -> list[JSDocBlock]:
    """A declaration tree for every ``/**`` comment in the unit."""
    blocks: list[JSDocBlock] = []
    for node in unit.comment_nodes():
        text = unit.node_text(node)
        if not is_jsdoc(text):
            continue
        host = node.next_named_sibling
        while host is not None and host.type == "comment":
            host = host.next_named_sibling
        blocks.append(
            build_jsdoc_block(unit, node.start_byte, node.end_byte, host)
        )
    return blocks


def enclosing_block(tag: JSDocTag) -> JSDocBlock:
    """Walk ``parent`` links up to the whole comment block."""
    parent = tag.parent
    while not isinstance(parent, JSDocBlock):
        if parent is None:
            raise ValueError(f"@{tag.tag_name} tag is not attached to a block")
        parent = parent.parent
    return parent


def is_sub_entity(tag: JSDocTag) -> bool:
    """Whether ``tag`` is documented as an entity of its own.

    A ``@param`` of a plain function belongs to that function's signature;
    only the members of a ``@callback`` or ``@typedef`` stand alone.
    """
    if isinstance(tag, _STANDALONE):
        return True
    return isinstance(tag, (JSDocParameterTag, JSDocPropertyTag)) and (
        isinstance(tag.parent, _MEMBER_OWNERS)
    )


def is_jsdoc(text: str) -> bool:
    return (
        text.startswith("/**")
        and not text.startswith("/***")
        and not text.startswith("/**/")
    )


def _make_tag(tag_name: str, content: list[Token], start: int) -> JSDocTag:
    from commentkit.comments.tagtext import split_names, strip_type

    head, tail = _split_head(content)
    tag = f"@{tag_name}"
    if tag in TYPED_TAGS:
        untyped = strip_type(head)
        if untyped is not None:
            head = untyped
    names: list[str] = []
    if tag in NAMED_TAGS:
        names, head = split_names(tag, head)

    cls = _TAG_CLASSES.get(tag_name, JSDocTag)
    comment = _clean(head + tail)
    if cls is JSDocTemplateTag:
        return JSDocTemplateTag(
            tag_name, start, comment=comment, type_parameters=names
        )
    return cls(
        tag_name, start, name=names[0] if names else None, comment=comment
    )


def _sections(tokens: list[Token]) -> Iterator[tuple[Token, list[Token]]]:
    """Pair every line-opening tag with the tokens up to the next one."""
    header: Token | None = None
    content: list[Token] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token.kind == TokenKind.TAG and _opens_line(tokens, i):
            if header is not None:
                yield header, content
            header, content = token, []
            i += 1
            continue
        close = _inline_end(tokens, i)
        content.extend(tokens[i:close])
        i = close
    if header is not None:
        yield header, content


def _opens_line(tokens: list[Token], i: int) -> bool:
    previous = tokens[i - 1] if i > 0 else None
    if previous is not None and previous.kind == TokenKind.TEXT:
        if previous.text.strip():
            return False
        i -= 1
    return i == 0 or tokens[i - 1].kind == TokenKind.NEWLINE


def _inline_end(tokens: list[Token], i: int) -> int:
    """Index after ``{@tag ...}`` opening at ``i``, or after token ``i``."""
    if (
        tokens[i].kind != TokenKind.OPEN_BRACE
        or i + 1 == len(tokens)
        or tokens[i + 1].kind != TokenKind.TAG
    ):
        return i + 1
    for j in range(i + 2, len(tokens)):
        if tokens[j].kind == TokenKind.CLOSE_BRACE:
            return j + 1
    return i + 1


def _split_head(content: list[Token]) -> tuple[str, str]:
    """Text the parser reads a tag header from, and the text after it.

    The header ends where the parser's first text part does: at a code
    span, a closed inline tag or another tag.
    """
    i = 0
    while i < len(content):
        token = content[i]
        if (
            token.kind == TokenKind.OPEN_BRACE
            and i + 1 < len(content)
            and content[i + 1].kind == TokenKind.TAG
        ):
            if _inline_end(content, i) > i + 1:
                break
            # An unclosed inline tag stays text.
            i += 2
            continue
        if token.kind in (TokenKind.CODE, TokenKind.TAG):
            break
        i += 1
    return _text(content[:i]), _text(content[i:])


def _text(tokens: list[Token]) -> str:
    return "".join(t.text for t in tokens)


def _clean(text: str) -> str:
    """Trim each line and drop the blank ones."""
    return "\n".join(line.strip() for line in text.split("\n") if line.strip())
