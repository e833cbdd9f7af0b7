"""Diagnostics sink for comment resolution warnings and errors."""

from __future__ import annotations

import logging
import threading
from collections import Counter

from commentkit.errors import ErrorClass, classify_error

__all__ = ["Diagnostics"]

_PREFIXES = {
    ErrorClass.UNSUPPORTED: "Skipped",
    ErrorClass.INVARIANT: "Internal error",
    ErrorClass.UNKNOWN: "Error",
}


class Diagnostics:
    """Non-fatal reporting sink backed by a standard logger.

    Counts what it reports so callers can decide on an exit status
    after a whole pass without re-reading the log.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("commentkit.diagnostics")
        self.warning_count = 0
        self.error_count = 0
        self.messages: list[tuple[str, str]] = []
        self.error_classes: Counter[ErrorClass] = Counter()
        self._lock = threading.Lock()

    def warn(self, message: str) -> None:
        with self._lock:
            self.warning_count += 1
            self.messages.append(("warning", message))
        self._logger.warning(message)

    def error(self, message: str) -> None:
        with self._lock:
            self.error_count += 1
            self.messages.append(("error", message))
        self._logger.error(message)

    def report(self, error: BaseException) -> ErrorClass:
        """Record a caught error as an error message under its class."""
        error_class = classify_error(error)
        with self._lock:
            self.error_classes[error_class] += 1
        self.error(f"{_PREFIXES[error_class]}: {error}")
        return error_class

    def has_errors(self) -> bool:
        return self.error_count > 0
