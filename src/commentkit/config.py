"""Environment-based configuration and tag vocabularies."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Annotated, Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode

from commentkit.constants import CommentStyle

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_TAGS: tuple[str, ...] = (
    "@deprecated",
    "@param",
    "@remarks",
    "@returns",
    "@return",
    "@throws",
    "@privateRemarks",
    "@defaultValue",
    "@typeParam",
    "@example",
    "@see",
    "@since",
    "@module",
    "@category",
    "@group",
    "@template",
    "@type",
    "@typedef",
    "@callback",
    "@property",
    "@prop",
    "@enum",
    "@author",
    "@license",
)

DEFAULT_INLINE_TAGS: tuple[str, ...] = (
    "@link",
    "@inheritDoc",
    "@label",
    "@linkcode",
    "@linkplain",
)

DEFAULT_MODIFIER_TAGS: tuple[str, ...] = (
    "@public",
    "@private",
    "@protected",
    "@internal",
    "@readonly",
    "@packageDocumentation",
    "@virtual",
    "@override",
    "@sealed",
    "@alpha",
    "@beta",
    "@experimental",
    "@event",
    "@hidden",
    "@ignore",
)


@dataclass(frozen=True)
class CommentParserConfig:
    """Recognized tag vocabularies, passed through to the comment parser."""

    block_tags: frozenset[str]
    inline_tags: frozenset[str]
    modifier_tags: frozenset[str]

    @classmethod
    def default(cls) -> CommentParserConfig:
        return cls(
            block_tags=frozenset(DEFAULT_BLOCK_TAGS),
            inline_tags=frozenset(DEFAULT_INLINE_TAGS),
            modifier_tags=frozenset(DEFAULT_MODIFIER_TAGS),
        )


class Settings(BaseSettings):
    """Reads from .env file and COMMENTKIT_* environment variables."""

    # Tag vocabularies
    block_tags: Annotated[list[str], NoDecode] = list(DEFAULT_BLOCK_TAGS)
    inline_tags: Annotated[list[str], NoDecode] = list(DEFAULT_INLINE_TAGS)
    modifier_tags: Annotated[list[str], NoDecode] = list(
        DEFAULT_MODIFIER_TAGS
    )

    # Discovery
    comment_style: CommentStyle = CommentStyle.JSDOC

    # Logging
    log_level: str = "INFO"

    # Resolution
    max_workers: int = 1

    @field_validator(
        "block_tags", "inline_tags", "modifier_tags", mode="before"
    )
    @classmethod
    def _parse_tags(cls, v: Any) -> Any:
        """Accept comma-separated string or JSON array."""
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("block_tags", "inline_tags", "modifier_tags")
    @classmethod
    def _validate_tags(cls, v: list[str]) -> list[str]:
        bad = [t for t in v if not t.startswith("@") or len(t) < 2]
        if bad:
            raise ValueError(
                f"tag names must start with '@': {', '.join(bad)}"
            )
        seen: set[str] = set()
        dupes: list[str] = []
        for t in v:
            if t in seen:
                dupes.append(t)
            seen.add(t)
        if dupes:
            logger.warning(
                "Duplicate tags in configuration: %s", ", ".join(dupes)
            )
        return v

    @field_validator("max_workers")
    @classmethod
    def _validate_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_workers must be at least 1")
        return v

    def parser_config(self) -> CommentParserConfig:
        """Frozen tag vocabularies for the comment parser."""
        return CommentParserConfig(
            block_tags=frozenset(self.block_tags),
            inline_tags=frozenset(self.inline_tags),
            modifier_tags=frozenset(self.modifier_tags),
        )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "COMMENTKIT_",
        "extra": "ignore",
    }


# File extension → language name mapping
EXTENSION_MAP: dict[str, str] = {
    # JavaScript
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascript",
    # TypeScript
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}

# Language → (grammar module, language factory) for tree-sitter
GRAMMAR_MODULES: dict[str, tuple[str, str]] = {
    "javascript": ("tree_sitter_javascript", "language"),
    "typescript": ("tree_sitter_typescript", "language_typescript"),
    "tsx": ("tree_sitter_typescript", "language_tsx"),
}
