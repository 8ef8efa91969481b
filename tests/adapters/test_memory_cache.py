"""Tests for the in-memory cache."""

from midway.adapters.cache import InMemoryCache, NullCache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_get_set():
    cache = InMemoryCache(name="test")
    assert cache.get("k") is None
    cache.set("k", 1)
    assert cache.get("k") == 1
    assert cache.stats()["hits"] == 1
    assert cache.stats()["misses"] == 1


def test_entries_expire():
    clock = FakeClock()
    cache = InMemoryCache(default_ttl_seconds=10, name="test", clock=clock)
    cache.set("k", "v")
    clock.now = 9.9
    assert cache.get("k") == "v"
    clock.now = 10.1
    assert cache.get("k") is None
    assert cache.size() == 0


def test_per_entry_ttl_override():
    clock = FakeClock()
    cache = InMemoryCache(default_ttl_seconds=10, name="test", clock=clock)
    cache.set("short", 1, ttl=1)
    clock.now = 2
    assert cache.get("short") is None


def test_oldest_entry_evicted_when_full():
    cache = InMemoryCache(max_size=2, name="test")
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("c", 3)
    assert cache.get("a") is None
    assert cache.get("b") == 2
    assert cache.get("c") == 3


def test_overwrite_does_not_evict():
    cache = InMemoryCache(max_size=2, name="test")
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("a", 10)
    assert cache.size() == 2
    assert cache.get("a") == 10


def test_get_or_compute_and_invalidate():
    cache = InMemoryCache(name="test")
    calls = []
    assert cache.get_or_compute("k", lambda: calls.append(1) or "v") == "v"
    assert cache.get_or_compute("k", lambda: calls.append(1) or "w") == "v"
    assert len(calls) == 1
    assert cache.invalidate("k") is True
    assert cache.invalidate("k") is False


def test_clear():
    cache = InMemoryCache(name="test")
    cache.set("a", 1)
    cache.set("b", 2)
    assert cache.clear() == 2
    assert cache.size() == 0


def test_null_cache_never_stores():
    cache = NullCache()
    cache.set("k", 1)
    assert cache.get("k") is None
    assert cache.get_or_compute("k", lambda: 5) == 5
    assert cache.size() == 0
