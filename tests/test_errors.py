"""Tests for error classification."""

from __future__ import annotations

import pytest

from commentkit.errors import (
    CommentError,
    ErrorClass,
    InvariantViolation,
    MissingSubTagError,
    UnknownCommentKindError,
    UnsupportedLanguageError,
    classify_error,
    is_bug_report,
)


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (UnknownCommentKindError("kind"), ErrorClass.INVARIANT),
        (MissingSubTagError("x", "@param"), ErrorClass.INVARIANT),
        (InvariantViolation("generic"), ErrorClass.INVARIANT),
        (UnsupportedLanguageError("a.py"), ErrorClass.UNSUPPORTED),
        (CommentError("base"), ErrorClass.UNKNOWN),
        (ValueError("other"), ErrorClass.UNKNOWN),
    ],
)
def test_classify_error(error: BaseException, expected: ErrorClass) -> None:
    assert classify_error(error) is expected


def test_only_invariants_are_bug_reports() -> None:
    assert is_bug_report(MissingSubTagError("x", "@param"))
    assert not is_bug_report(UnsupportedLanguageError("a.py"))
    assert not is_bug_report(RuntimeError("boom"))


def test_missing_sub_tag_message() -> None:
    error = MissingSubTagError("count", "@param")
    assert error.name == "count"
    assert error.tag == "@param"
    assert str(error) == (
        "Failed to find JSDoc tag for count after parsing comment, "
        "please file a bug report."
    )
