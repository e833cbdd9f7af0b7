"""Location of a raw comment inside a source unit."""

from __future__ import annotations

from dataclasses import dataclass

from commentkit.constants import CommentKind


@dataclass(frozen=True)
class CommentRange:
    """Where a raw comment lives, as byte offsets, not content."""

    kind: CommentKind
    start: int
    end: int
