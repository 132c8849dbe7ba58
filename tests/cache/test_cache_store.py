import logging
import random

import pytest

from gradientgen.cache import CacheStore, MemoryBackend
from gradientgen.errors import StorageError


def make_store(clock, budget):
    return CacheStore(MemoryBackend(clock=clock), budget)


def test_lookup_miss_returns_none(clock):
    store = make_store(clock, 100)
    assert store.lookup("nope") is None
    assert store.last_modified("nope") is None


def test_store_then_lookup(clock):
    store = make_store(clock, 100)
    store.store("a", b"hello")
    data, mtime = store.lookup("a")
    assert data == b"hello"
    assert mtime == 1000.0
    assert store.last_modified("a") == 1000.0


def test_lookup_updates_last_access_only(clock):
    store = make_store(clock, 100)
    store.store("a", b"x")
    clock.advance(5)
    store.lookup("a")
    entry = store.backend.stat("a")
    assert entry.last_access == 1005.0
    assert entry.last_modified == 1000.0


def test_oldest_accessed_is_evicted_first(clock):
    store = make_store(clock, 25)
    for key in ("a", "b", "c"):
        store.store(key, b"0123456789")
        clock.advance()
    assert store.lookup("a") is None
    assert store.lookup("b") is not None
    assert store.lookup("c") is not None


def test_reads_protect_entries(clock):
    store = make_store(clock, 25)
    store.store("a", b"0123456789")
    clock.advance()
    store.store("b", b"0123456789")
    clock.advance()
    store.lookup("a")
    clock.advance()
    evicted = store.store("c", b"0123456789")
    assert evicted == ["b"]
    assert {e.key for e in store.entries()} == {"a", "c"}


def test_everything_after_the_overflow_is_deleted(clock):
    """Smaller older entries are not kept once the budget has been crossed."""
    store = make_store(clock, 10)
    store.store("small", b"12")
    clock.advance()
    store.store("big", b"0123456789012")
    assert store.entries() == []


def test_oversized_write_evicts_itself(clock):
    store = make_store(clock, 5)
    evicted = store.store("huge", b"0123456789")
    assert evicted == ["huge"]
    assert store.lookup("huge") is None


def test_exact_budget_is_kept(clock):
    store = make_store(clock, 20)
    store.store("a", b"0123456789")
    clock.advance()
    assert store.store("b", b"0123456789") == []
    assert store.total_size() == 20


def test_budget_invariant_over_random_writes(clock):
    rng = random.Random(42)
    store = make_store(clock, 1000)
    for i in range(300):
        clock.advance(rng.random())
        if rng.random() < 0.3:
            store.lookup(f"k{rng.randrange(i + 1)}")
        store.store(f"k{i}", bytes(rng.randrange(1, 400)))
        entries = store.entries()
        total = sum(e.size for e in entries)
        assert total <= 1000 or len(entries) == 1


def test_rewrite_replaces_entry(clock):
    store = make_store(clock, 100)
    store.store("a", b"one")
    clock.advance()
    store.store("a", b"three")
    assert store.lookup("a") == (b"three", 1001.0)
    assert len(store.entries()) == 1


class FailingDeleteBackend(MemoryBackend):
    def delete(self, key):
        raise StorageError(f"cannot delete {key}")


def test_failed_deletes_are_ignored(clock):
    store = CacheStore(FailingDeleteBackend(clock=clock), 5)
    assert store.store("a", b"0123456789") == []
    assert store.lookup("a") is not None


def test_clear(clock):
    store = make_store(clock, 100)
    store.store("a", b"1")
    store.store("b", b"2")
    assert store.clear() == 2
    assert store.entries() == []


def test_storage_errors_on_write_propagate(clock):
    class BrokenBackend(MemoryBackend):
        def put(self, key, data):
            raise StorageError("disk full")

    store = CacheStore(BrokenBackend(clock=clock), 100)
    with pytest.raises(StorageError):
        store.store("a", b"x")


def _events(caplog):
    return [getattr(r, "event", None) for r in caplog.records if r.name.startswith("gradientgen")]


def test_lookups_and_evictions_log_events(clock, caplog):
    caplog.set_level(logging.DEBUG, logger="gradientgen")
    store = make_store(clock, 5)
    store.lookup("a")
    store.store("a", b"abc")
    store.lookup("a")
    clock.advance()
    store.store("b", b"abc")

    events = _events(caplog)
    assert events[:2] == ["cache_miss", "cache_hit"]
    assert "cache_evicted" in events


def test_failed_delete_logs_event(clock, caplog):
    caplog.set_level(logging.DEBUG, logger="gradientgen")
    store = CacheStore(FailingDeleteBackend(clock=clock), 5)
    store.store("a", b"0123456789")
    assert "cache_delete_failed" in _events(caplog)
