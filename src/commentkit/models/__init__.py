"""Comment data models."""

from commentkit.models.comment import (
    Comment,
    CommentDisplayPart,
    CommentTag,
    content_text,
)
from commentkit.models.ranges import CommentRange

__all__ = [
    "Comment",
    "CommentDisplayPart",
    "CommentTag",
    "CommentRange",
    "content_text",
]
