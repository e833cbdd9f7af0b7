"""Comment resolution engine — cache, discovery, lexing, parsing."""

from commentkit.comments.cache import CommentCache
from commentkit.comments.discovery import (
    discover_comment,
    discover_signature_comment,
)
from commentkit.comments.lexer import Token, lex_block_comment
from commentkit.comments.parser import parse_comment
from commentkit.comments.resolver import CommentResolver

__all__ = [
    "CommentCache",
    "CommentResolver",
    "Token",
    "discover_comment",
    "discover_signature_comment",
    "lex_block_comment",
    "parse_comment",
]
