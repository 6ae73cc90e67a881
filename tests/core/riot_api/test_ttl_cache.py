"""
Tests for cache implementation.
"""

from summoner_sync.core.riot_api.cache import TTLCache


class FakeTimer:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestTTLCache:
    """Test cases for TTLCache."""

    def test_set_and_get(self):
        cache = TTLCache(maxsize=10, ttl=60)

        cache.set("test_key", "test_value")

        assert cache.get("test_key") == "test_value"
        assert len(cache) == 1

    def test_get_nonexistent_key(self):
        cache = TTLCache(maxsize=10, ttl=60)
        assert cache.get("nonexistent_key") is None

    def test_ttl_expiration(self):
        timer = FakeTimer()
        cache = TTLCache(maxsize=10, ttl=120, timer=timer)
        cache.set("test_key", "test_value")

        timer.now = 119.9
        assert cache.get("test_key") == "test_value"

        timer.now = 120.0
        assert cache.get("test_key") is None
        assert len(cache) == 0

    def test_zero_ttl_disables_cache(self):
        cache = TTLCache(ttl=0)

        cache.set("test_key", "test_value")

        assert not cache.enabled
        assert cache.get("test_key") is None

    def test_oldest_entry_evicted_when_full(self):
        cache = TTLCache(maxsize=2, ttl=60)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)

        assert cache.get("a") is None
        assert cache.get("b") == 2
        assert cache.get("c") == 3

    def test_stats_and_clear(self):
        cache = TTLCache(maxsize=10, ttl=60)
        cache.set("a", 1)
        cache.get("a")
        cache.get("missing")

        stats = cache.stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == 0.5

        cache.clear()
        assert len(cache) == 0
        assert cache.stats()["hits"] == 0
