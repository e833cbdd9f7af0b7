"""Error types and classification for comment resolution.

Classifies exceptions by category to enable:
- Structured logging (bug-report class vs unsupported input)
- Informative CLI messages
- Scoping failures to a single declaration
"""

from __future__ import annotations

from enum import Enum


class CommentError(Exception):
    """Base class for commentkit errors."""


class InvariantViolation(CommentError):
    """Internal disagreement between collaborators; please file a bug."""


class UnknownCommentKindError(InvariantViolation):
    """Discovery produced a range kind the engine does not know."""


class MissingSubTagError(InvariantViolation):
    """The JSDoc tree implies a tag the comment parser did not produce."""

    def __init__(self, name: str, tag: str) -> None:
        super().__init__(
            f"Failed to find JSDoc tag for {name} after parsing comment, "
            "please file a bug report."
        )
        self.name = name
        self.tag = tag


class UnsupportedLanguageError(CommentError):
    """No tree-sitter grammar is available for a source file."""


class ErrorClass(Enum):
    UNSUPPORTED = "unsupported"  # input the engine cannot handle
    INVARIANT = "invariant"  # bug-report class
    UNKNOWN = "unknown"  # unclassified


def classify_error(error: BaseException) -> ErrorClass:
    """Classify an error to determine how it is reported."""
    if isinstance(error, InvariantViolation):
        return ErrorClass.INVARIANT
    if isinstance(error, UnsupportedLanguageError):
        return ErrorClass.UNSUPPORTED
    return ErrorClass.UNKNOWN


def is_bug_report(error: BaseException) -> bool:
    """Return True if the error should be reported to maintainers."""
    return classify_error(error) is ErrorClass.INVARIANT
