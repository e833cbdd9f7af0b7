"""Parsed-comment cache keyed by (source unit, comment start offset).

CommentCache guarantees that every raw comment has exactly one
canonical parsed value. Two workers that miss on the same key may both
parse, but the first one to store wins; the other result is discarded
and both callers receive copies of the canonical value.

Partitions are held weakly by unit and can be dropped explicitly by
whatever owns the unit's lifetime.
"""

from __future__ import annotations

import threading
import weakref
from collections.abc import Callable

from commentkit.models.comment import Comment
from commentkit.source.unit import SourceUnit


class CommentCache:
    """Two-level mapping ``SourceUnit → {offset → Comment}``.

    Usage::

        cache = CommentCache()
        comment = cache.get_or_parse(unit, range.start, lambda: parse(...))

    Stored values are canonical and never handed out; readers always
    get a :meth:`Comment.clone`.
    """

    def __init__(self) -> None:
        self._partitions: weakref.WeakKeyDictionary[
            SourceUnit, dict[int, Comment]
        ] = weakref.WeakKeyDictionary()
        self._lock = threading.Lock()
        self.parse_count = 0

    def get(self, unit: SourceUnit, offset: int) -> Comment | None:
        """Clone of the stored comment, or None on a miss."""
        with self._lock:
            stored = self._partitions.get(unit, {}).get(offset)
        return stored.clone() if stored is not None else None

    def put(self, unit: SourceUnit, offset: int, comment: Comment) -> Comment:
        """Store ``comment`` unless a value exists; return the canonical one."""
        with self._lock:
            partition = self._partitions.get(unit)
            if partition is None:
                partition = {}
                self._partitions[unit] = partition
            return partition.setdefault(offset, comment)

    def get_or_parse(
        self,
        unit: SourceUnit,
        offset: int,
        parse: Callable[[], Comment],
    ) -> Comment:
        """Return a clone of the canonical comment, parsing on a miss.

        ``parse`` runs outside the lock so unrelated keys never wait on
        each other; losing a race only costs a discarded parse.
        """
        cached = self.get(unit, offset)
        if cached is not None:
            return cached

        parsed = parse()
        with self._lock:
            self.parse_count += 1
        return self.put(unit, offset, parsed).clone()

    def drop(self, unit: SourceUnit) -> None:
        """Forget every comment parsed from ``unit``."""
        with self._lock:
            self._partitions.pop(unit, None)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        unit, offset = key
        if not isinstance(unit, SourceUnit):
            return False
        with self._lock:
            return offset in self._partitions.get(unit, {})

    def __len__(self) -> int:
        with self._lock:
            return sum(len(p) for p in self._partitions.values())
