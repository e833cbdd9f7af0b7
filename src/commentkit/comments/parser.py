"""Turn a lexed block comment into a :class:`Comment`."""

from __future__ import annotations

from collections.abc import Callable

from commentkit.comments.lexer import Token
from commentkit.comments.tagtext import split_names, strip_type
from commentkit.config import CommentParserConfig
from commentkit.constants import (
    NAMED_TAGS,
    TYPED_TAGS,
    DisplayPartKind,
    TokenKind,
)
from commentkit.models.comment import Comment, CommentDisplayPart, CommentTag


def parse_comment(
    tokens: list[Token],
    config: CommentParserConfig,
    warn: Callable[[str], None],
) -> Comment:
    """Build a comment from ``tokens``.

    Text before the first block tag is the summary. Modifier tags only
    set a flag; the text after them continues the open section. Unknown
    tags are kept but reported through ``warn``.
    """
    summary: list[CommentDisplayPart] = []
    blocks: list[tuple[str, list[CommentDisplayPart]]] = []
    modifiers: set[str] = set()
    parts = summary

    i = 0
    while i < len(tokens):
        token = tokens[i]
        match token.kind:
            case TokenKind.TAG:
                if token.text in config.modifier_tags:
                    modifiers.add(token.text)
                else:
                    if token.text not in config.block_tags:
                        warn(f"Encountered an unknown block tag {token.text}")
                    parts = []
                    blocks.append((token.text, parts))
                i += 1
            case TokenKind.OPEN_BRACE:
                i = _inline_tag(tokens, i, parts, config, warn)
            case TokenKind.CODE:
                parts.append(
                    CommentDisplayPart(
                        kind=DisplayPartKind.CODE, text=token.text
                    )
                )
                i += 1
            case _:
                _append_text(parts, token.text)
                i += 1

    return Comment(
        summary=_trim(summary),
        block_tags=[_finish_tag(tag, content) for tag, content in blocks],
        modifier_tags=modifiers,
    )


def _inline_tag(
    tokens: list[Token],
    i: int,
    parts: list[CommentDisplayPart],
    config: CommentParserConfig,
    warn: Callable[[str], None],
) -> int:
    """Consume ``{@tag text}`` starting at the open brace; return next index."""
    following = tokens[i + 1] if i + 1 < len(tokens) else None
    if following is None or following.kind != TokenKind.TAG:
        _append_text(parts, "{")
        return i + 1

    j = i + 2
    inner: list[str] = []
    while j < len(tokens) and tokens[j].kind != TokenKind.CLOSE_BRACE:
        inner.append(tokens[j].text)
        j += 1
    if j == len(tokens):
        warn("Unclosed inline tag will be rendered as text")
        _append_text(parts, "{" + following.text)
        return i + 2

    if following.text not in config.inline_tags:
        warn(f"Encountered an unknown inline tag {following.text}")
    parts.append(
        CommentDisplayPart(
            kind=DisplayPartKind.INLINE_TAG,
            text="".join(inner).strip(),
            tag=following.text,
        )
    )
    return j + 1


def _finish_tag(tag: str, parts: list[CommentDisplayPart]) -> CommentTag:
    name: str | None = None
    if not parts or parts[0].kind != DisplayPartKind.TEXT:
        return CommentTag(tag=tag, content=_trim(parts))

    head = parts[0].text
    if tag in TYPED_TAGS:
        untyped = strip_type(head)
        if untyped is not None:
            head = untyped
    if tag in NAMED_TAGS:
        names, head = split_names(tag, head)
        name = names[0] if names else None
    return CommentTag(
        tag=tag, content=_trim(_replace_head(parts, head)), name=name
    )


def _replace_head(
    parts: list[CommentDisplayPart], text: str
) -> list[CommentDisplayPart]:
    head = [CommentDisplayPart(text=text)] if text else []
    return head + parts[1:]


def _append_text(parts: list[CommentDisplayPart], text: str) -> None:
    if parts and parts[-1].kind == DisplayPartKind.TEXT:
        parts[-1] = CommentDisplayPart(text=parts[-1].text + text)
    else:
        parts.append(CommentDisplayPart(text=text))


def _trim(parts: list[CommentDisplayPart]) -> list[CommentDisplayPart]:
    """Strip outer whitespace and drop text parts left empty."""
    trimmed = list(parts)
    if trimmed and trimmed[0].kind == DisplayPartKind.TEXT:
        trimmed[0] = CommentDisplayPart(text=trimmed[0].text.lstrip())
    if trimmed and trimmed[-1].kind == DisplayPartKind.TEXT:
        trimmed[-1] = CommentDisplayPart(text=trimmed[-1].text.rstrip())
    return [
        p for p in trimmed if p.kind != DisplayPartKind.TEXT or p.text
    ]
