"""Tests for the Comment model."""

from __future__ import annotations

from commentkit.constants import DisplayPartKind
from commentkit.models.comment import (
    Comment,
    CommentDisplayPart,
    CommentTag,
    content_text,
)


def _sample() -> Comment:
    return Comment(
        summary=[
            CommentDisplayPart(text="See "),
            CommentDisplayPart(
                kind=DisplayPartKind.INLINE_TAG, text="Foo", tag="@link"
            ),
        ],
        block_tags=[
            CommentTag(
                tag="@param",
                name="a",
                content=[CommentDisplayPart(text="First.")],
            ),
            CommentTag(
                tag="@param",
                name="b",
                content=[CommentDisplayPart(text="Second.")],
            ),
            CommentTag(tag="@returns", content=[CommentDisplayPart(text="X")]),
        ],
        modifier_tags={"@beta"},
    )


def test_clone_is_deep() -> None:
    original = _sample()
    copy = original.clone()
    assert copy == original

    copy.summary[0].text = "changed"
    copy.block_tags[0].content.append(CommentDisplayPart(text="!"))
    copy.modifier_tags.add("@internal")

    assert original.summary[0].text == "See "
    assert content_text(original.block_tags[0].content) == "First."
    assert original.modifier_tags == {"@beta"}


def test_tag_lookup() -> None:
    comment = _sample()
    first = comment.get_tag("@param")
    assert first is not None
    assert first.name == "a"
    assert [t.name for t in comment.get_tags("@param")] == ["a", "b"]
    assert comment.get_tag("@throws") is None

    second = comment.get_identified_tag("b", "@param")
    assert second is not None
    assert content_text(second.content) == "Second."
    assert comment.get_identified_tag("b", "@returns") is None


def test_remove_tags_and_modifiers() -> None:
    comment = _sample()
    comment.remove_tags("@param")
    comment.remove_modifier("@beta")
    comment.remove_modifier("@never-there")
    assert [t.tag for t in comment.block_tags] == ["@returns"]
    assert not comment.has_modifier("@beta")


def test_from_content_copies_parts() -> None:
    parts = [CommentDisplayPart(text="Shared.")]
    comment = Comment.from_content(parts)
    comment.summary[0].text = "mine"
    assert parts[0].text == "Shared."
    assert Comment.from_content(None).summary == []


def test_visible_content() -> None:
    assert not Comment().has_visible_content()
    assert Comment.from_content([CommentDisplayPart(text="x")]).has_visible_content()
    assert Comment(block_tags=[CommentTag(tag="@deprecated")]).has_visible_content()


def test_summary_text_renders_inline_tags() -> None:
    assert _sample().summary_text() == "See {@link Foo}"
    bare = [CommentDisplayPart(kind=DisplayPartKind.INLINE_TAG, text="", tag="@inheritDoc")]
    assert content_text(bare) == "{@inheritDoc}"
