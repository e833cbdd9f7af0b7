"""Split the header of a block tag: ``{type}``, declared names, ``-``.

Both the comment parser and the JSDoc declaration tree read tag headers
through these helpers, so they always agree on which name a tag declares.
"""

from __future__ import annotations

import re

_TEMPLATE_NAMES = re.compile(r"[A-Za-z_$][\w$]*(?:\s*,\s*[A-Za-z_$][\w$]*)*")
_WORD = re.compile(r"\S+")
_SEPARATOR = re.compile(r"-\s+")


def strip_type(text: str) -> str | None:
    """Text after a leading balanced ``{type}``, or None if there is none."""
    text = text.lstrip()
    if not text.startswith("{"):
        return None
    depth = 0
    for index, ch in enumerate(text):
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[index + 1 :]
    return None


def split_names(tag: str, text: str) -> tuple[list[str], str]:
    """Names declared at the front of ``text`` and what follows them.

    ``@template`` lists comma-separated names; every other tag declares
    at most one, with ``[name=default]`` marking an optional one. A
    ``-`` separator after the names is dropped.
    """
    text = text.lstrip()
    names: list[str] = []
    rest = text
    if tag == "@template":
        match = _TEMPLATE_NAMES.match(text)
        if match is not None:
            names = [n.strip() for n in match.group(0).split(",")]
            rest = text[match.end() :]
    elif text.startswith("[") and "]" in text:
        close = text.index("]")
        inner = text[1:close].split("=", 1)[0].strip()
        names = [inner] if inner else []
        rest = text[close + 1 :]
    else:
        match = _WORD.match(text)
        if match is not None:
            names = [match.group(0)]
            rest = text[match.end() :]

    rest = rest.lstrip()
    separator = _SEPARATOR.match(rest)
    if separator is not None:
        rest = rest[separator.end() :]
    return names, rest
