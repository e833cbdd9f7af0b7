"""Tests for CommentCache."""

from __future__ import annotations

import gc
import threading
from concurrent.futures import ThreadPoolExecutor

from commentkit.comments.cache import CommentCache
from commentkit.models.comment import Comment, CommentDisplayPart
from commentkit.source.unit import SourceUnit


def _comment(text: str) -> Comment:
    return Comment(summary=[CommentDisplayPart(text=text)])


def _unit(name: str = "a.js") -> SourceUnit:
    return SourceUnit(name, "/** doc */\nfunction f() {}\n")


def test_miss_returns_none() -> None:
    """An empty cache has nothing for any key."""
    cache = CommentCache()
    assert cache.get(_unit(), 0) is None


def test_put_is_first_store_wins() -> None:
    """A second put for the same key keeps the first value."""
    cache = CommentCache()
    unit = _unit()
    first = _comment("first")
    assert cache.put(unit, 0, first) is first
    assert cache.put(unit, 0, _comment("second")) is first
    assert cache.get(unit, 0) == first


def test_get_returns_independent_clone() -> None:
    """Mutating a value read from the cache never reaches the canonical one."""
    cache = CommentCache()
    unit = _unit()
    cache.put(unit, 0, _comment("original"))

    copy = cache.get(unit, 0)
    assert copy is not None
    copy.summary.clear()
    copy.modifier_tags.add("@internal")

    again = cache.get(unit, 0)
    assert again is not None
    assert again.summary_text() == "original"
    assert again.modifier_tags == set()


def test_get_or_parse_parses_once() -> None:
    """Repeated requests for one key run the parser a single time."""
    cache = CommentCache()
    unit = _unit()
    calls = 0

    def parse() -> Comment:
        nonlocal calls
        calls += 1
        return _comment("parsed")

    results = [cache.get_or_parse(unit, 0, parse) for _ in range(3)]
    assert calls == 1
    assert cache.parse_count == 1
    assert all(r.summary_text() == "parsed" for r in results)
    assert results[0] is not results[1]


def test_keys_are_partitioned_by_unit_identity() -> None:
    """Two units with identical text never share entries."""
    cache = CommentCache()
    a, b = _unit(), _unit()
    cache.put(a, 0, _comment("a"))
    assert (a, 0) in cache
    assert (b, 0) not in cache
    assert cache.get(b, 0) is None


def test_concurrent_misses_share_one_canonical_value() -> None:
    """Two workers that both miss end up with the same stored comment."""
    cache = CommentCache()
    unit = _unit()
    barrier = threading.Barrier(2)
    counter = iter(range(2))
    lock = threading.Lock()

    def parse() -> Comment:
        with lock:
            n = next(counter)
        barrier.wait(timeout=5)  # both threads are past the lookup
        return _comment(f"parse-{n}")

    with ThreadPoolExecutor(2) as pool:
        futures = [
            pool.submit(cache.get_or_parse, unit, 0, parse) for _ in range(2)
        ]
        results = [f.result() for f in futures]

    assert cache.parse_count == 2
    assert results[0].summary_text() == results[1].summary_text()
    stored = cache.get(unit, 0)
    assert stored is not None
    assert stored.summary_text() == results[0].summary_text()
    assert len(cache) == 1


def test_drop_forgets_partition() -> None:
    """drop() removes every entry of one unit only."""
    cache = CommentCache()
    a, b = _unit("a.js"), _unit("b.js")
    cache.put(a, 0, _comment("a0"))
    cache.put(a, 10, _comment("a10"))
    cache.put(b, 0, _comment("b0"))

    cache.drop(a)
    assert (a, 0) not in cache
    assert (a, 10) not in cache
    assert (b, 0) in cache
    assert len(cache) == 1


def test_partition_released_with_unit() -> None:
    """Units are held weakly."""
    cache = CommentCache()
    unit = _unit()
    cache.put(unit, 0, _comment("x"))
    assert len(cache) == 1

    del unit
    gc.collect()
    assert len(cache) == 0


def test_contains_rejects_malformed_keys() -> None:
    cache = CommentCache()
    assert "a.js" not in cache
    assert ("a.js", 0) not in cache
