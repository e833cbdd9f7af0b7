"""Pydantic models for parsed documentation comments."""

from __future__ import annotations

from pydantic import BaseModel, Field

from commentkit.constants import DisplayPartKind


class CommentDisplayPart(BaseModel):
    """A fragment of comment content: plain text, code, or an inline tag."""

    kind: DisplayPartKind = DisplayPartKind.TEXT
    text: str
    tag: str | None = None  # "@link" for inline tags


class CommentTag(BaseModel):
    """A block tag such as ``@returns`` or ``@param name``."""

    tag: str  # includes the leading "@"
    content: list[CommentDisplayPart] = Field(
        default_factory=lambda: list[CommentDisplayPart]()
    )
    name: str | None = None  # identifier for named tags

    def clone(self) -> CommentTag:
        return self.model_copy(deep=True)


class Comment(BaseModel):
    """A parsed doc comment: summary, block tags and modifier markers.

    Instances handed out by the resolver are always independent copies;
    mutate them freely.
    """

    summary: list[CommentDisplayPart] = Field(
        default_factory=lambda: list[CommentDisplayPart]()
    )
    block_tags: list[CommentTag] = Field(
        default_factory=lambda: list[CommentTag]()
    )
    modifier_tags: set[str] = Field(default_factory=lambda: set[str]())

    @classmethod
    def from_content(
        cls, content: list[CommentDisplayPart] | None = None
    ) -> Comment:
        """Build a comment whose summary is a copy of ``content``."""
        return cls(
            summary=[part.model_copy() for part in content or []]
        )

    def clone(self) -> Comment:
        """Deep copy. No list, set or part is shared with the original."""
        return self.model_copy(deep=True)

    def has_modifier(self, tag: str) -> bool:
        return tag in self.modifier_tags

    def remove_modifier(self, tag: str) -> None:
        self.modifier_tags.discard(tag)

    def get_tag(self, tag: str) -> CommentTag | None:
        for block in self.block_tags:
            if block.tag == tag:
                return block
        return None

    def get_tags(self, tag: str) -> list[CommentTag]:
        return [block for block in self.block_tags if block.tag == tag]

    def get_identified_tag(self, name: str, tag: str) -> CommentTag | None:
        """The block tag ``tag`` documenting the entity ``name``."""
        for block in self.block_tags:
            if block.tag == tag and block.name == name:
                return block
        return None

    def remove_tags(self, tag: str) -> None:
        self.block_tags = [b for b in self.block_tags if b.tag != tag]

    def has_visible_content(self) -> bool:
        return bool(self.summary) or bool(self.block_tags)

    def summary_text(self) -> str:
        """Summary rendered as plain text."""
        return _join_parts(self.summary)


def _join_parts(parts: list[CommentDisplayPart]) -> str:
    out: list[str] = []
    for part in parts:
        if part.kind == DisplayPartKind.INLINE_TAG:
            body = f"{part.tag} {part.text}" if part.text else part.tag
            out.append(f"{{{body}}}")
        else:
            out.append(part.text)
    return "".join(out)


def content_text(parts: list[CommentDisplayPart]) -> str:
    """Content of a tag rendered as plain text."""
    return _join_parts(parts)
