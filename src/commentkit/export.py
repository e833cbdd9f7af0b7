"""Render documented items as JSON or plain text."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

from commentkit.models.comment import Comment, CommentTag, content_text
from commentkit.project import DocumentedItem


def export_json(items: list[DocumentedItem], warning_count: int = 0) -> str:
    """Export items as a structured JSON envelope."""
    payload: dict[str, Any] = {
        "generated_at": datetime.now(UTC).isoformat(),
        "item_count": len(items),
        "warning_count": warning_count,
        "items": [_item_to_dict(i) for i in items],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def export_text(items: list[DocumentedItem]) -> str:
    """One paragraph per item, headed by its location."""
    blocks: list[str] = []
    for item in items:
        lines = [f"{item.file}:{item.line} {item.kind} {item.name}"]
        if item.comment.summary:
            lines.append(f"  {item.comment.summary_text()}")
        for tag in item.comment.block_tags:
            lines.append(f"  {_tag_line(tag)}")
        if item.comment.modifier_tags:
            lines.append(
                "  " + " ".join(sorted(item.comment.modifier_tags))
            )
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def _item_to_dict(item: DocumentedItem) -> dict[str, Any]:
    return {
        "kind": str(item.kind),
        "name": item.name,
        "reflection_kind": (
            str(item.reflection_kind) if item.reflection_kind else None
        ),
        "file": item.file,
        "line": item.line,
        "comment": _comment_to_dict(item.comment),
    }


def _comment_to_dict(comment: Comment) -> dict[str, Any]:
    return {
        "summary": content_text(comment.summary),
        "block_tags": [
            {
                "tag": t.tag,
                "name": t.name,
                "content": content_text(t.content),
            }
            for t in comment.block_tags
        ],
        "modifier_tags": sorted(comment.modifier_tags),
    }


def _tag_line(tag: CommentTag) -> str:
    head = f"{tag.tag} {tag.name}" if tag.name else tag.tag
    body = content_text(tag.content)
    return f"{head} {body}" if body else head
