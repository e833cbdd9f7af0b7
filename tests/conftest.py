"""Shared test fixtures — parser config, diagnostics, unit factory."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable

import pytest

from commentkit.config import CommentParserConfig
from commentkit.diagnostics import Diagnostics
from commentkit.source.unit import SourceUnit


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep COMMENTKIT_* variables from the shell out of Settings()."""
    for key in list(os.environ):
        if key.startswith("COMMENTKIT_"):
            monkeypatch.delenv(key)


@pytest.fixture
def config() -> CommentParserConfig:
    return CommentParserConfig.default()


@pytest.fixture
def diagnostics() -> Diagnostics:
    return Diagnostics(logging.getLogger("commentkit.tests"))


@pytest.fixture
def make_unit() -> Callable[..., SourceUnit]:
    """Build a SourceUnit from inline source text."""

    def _make(text: str, file_name: str = "example.js") -> SourceUnit:
        return SourceUnit(file_name, text)

    return _make
