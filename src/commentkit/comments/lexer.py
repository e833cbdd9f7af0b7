"""Lex a raw ``/** ... */`` block into a flat token stream."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from commentkit.constants import TokenKind

_LINE_LEAD = re.compile(r"[ \t]*\*(?!/) ?|[ \t]*")
_TAG_NAME = re.compile(r"@[A-Za-z][\w$]*")
_ESCAPABLE = "@{}`\\"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    # Character index of the token's first character in the raw comment.
    offset: int = field(default=0, compare=False)


def lex_block_comment(
    text: str | bytes,
    start: int = 0,
    end: int | None = None,
) -> list[Token]:
    """Tokenize the comment between ``start`` and ``end``.

    Offsets index ``text`` directly, so pass the unit's UTF-8 bytes
    together with byte offsets from the syntax tree. Each token's
    ``offset`` indexes the decoded comment text.
    """
    raw = text[start:end]
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    body, origin = _strip_decoration(raw)
    return _tokenize(body, origin)


def _strip_decoration(raw: str) -> tuple[str, list[int]]:
    """Remove ``/**``, ``*/`` and the leading ``*`` of every line.

    Also returns, for every kept character, its index in ``raw``.
    """
    begin = 3 if raw.startswith("/**") else 2 if raw.startswith("/*") else 0
    stop = len(raw)
    if raw[begin:].endswith("*/"):
        stop -= 2

    lines: list[tuple[str, int]] = []
    position = begin
    for index, line in enumerate(raw[begin:stop].split("\n")):
        if index == 0:
            lead = len(line) - len(line.lstrip())
        else:
            match = _LINE_LEAD.match(line)
            lead = match.end() if match else 0
        lines.append((line[lead:].rstrip(), position + lead))
        position += len(line) + 1

    while lines and not lines[0][0]:
        lines.pop(0)
    while lines and not lines[-1][0]:
        lines.pop()

    origin: list[int] = []
    for line, line_start in lines:
        origin.extend(range(line_start, line_start + len(line) + 1))
    return "\n".join(line for line, _ in lines), origin


def _tokenize(body: str, origin: list[int]) -> list[Token]:
    tokens: list[Token] = []
    text: list[str] = []
    text_start = 0

    def emit(kind: TokenKind, value: str, at: int) -> None:
        tokens.append(Token(kind, value, origin[at]))

    def flush() -> None:
        if text:
            emit(TokenKind.TEXT, "".join(text), text_start)
            text.clear()

    def add_text(value: str, at: int) -> None:
        nonlocal text_start
        if not text:
            text_start = at
        text.append(value)

    i = 0
    at_line_start = True
    while i < len(body):
        ch = body[i]

        if ch == "\n":
            flush()
            emit(TokenKind.NEWLINE, "\n", i)
            at_line_start = True
            i += 1
            continue

        if at_line_start and body.startswith("```", i):
            close = body.find("\n```", i + 3)
            stop = len(body) if close == -1 else close + 4
            flush()
            emit(TokenKind.CODE, body[i:stop], i)
            i = stop
            at_line_start = False
            continue
        at_line_start = False

        if ch == "\\" and i + 1 < len(body) and body[i + 1] in _ESCAPABLE:
            add_text(body[i + 1], i)
            i += 2
        elif ch == "`":
            close = body.find("`", i + 1)
            if close == -1 or "\n\n" in body[i:close]:
                add_text(ch, i)
                i += 1
            else:
                flush()
                emit(TokenKind.CODE, body[i : close + 1], i)
                i = close + 1
        elif ch == "{":
            flush()
            emit(TokenKind.OPEN_BRACE, ch, i)
            i += 1
        elif ch == "}":
            flush()
            emit(TokenKind.CLOSE_BRACE, ch, i)
            i += 1
        elif ch == "@" and (match := _tag_at(body, i)) is not None:
            flush()
            emit(TokenKind.TAG, match.group(0), i)
            i = match.end()
        else:
            add_text(ch, i)
            i += 1

    flush()
    return tokens


def _tag_at(body: str, i: int) -> re.Match[str] | None:
    """``@name`` counts as a tag only at a word boundary (not in emails)."""
    if i > 0 and not (body[i - 1].isspace() or body[i - 1] == "{"):
        return None
    return _TAG_NAME.match(body, i)
