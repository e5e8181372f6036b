"""
Tests for the chart cache.

Tests cover:
- Key building
- TTL expiry on read
- Size bound eviction and periodic cleanup
- Per-pillar invalidation
"""

import asyncio

import pytest

from chart_engine.cache import ChartCache
from chart_engine.config import CacheConfig
from chart_engine.models import ChartType


@pytest.fixture
def cache(clock):
    return ChartCache(CacheConfig(ttl_minutes=5, max_entries=3), clock=clock)


class TestCacheKeys:
    """Test cache key building"""

    def test_build_key(self):
        assert ChartCache.build_key("safety", ChartType.LINE, 5) == "safety-line-5"
        assert ChartCache.build_key("safety", "strategy", "month") == "safety-strategy-month"
        assert ChartCache.build_key("quality", ChartType.PIE, 30, "levels") == "quality-pie-30-levels"


class TestCacheExpiry:
    """Test TTL handling"""

    def test_hit_within_ttl(self, cache, clock):
        cache.set("safety-line-5", [1, 2], "safety")
        clock.advance(minutes=4, seconds=59)

        assert cache.get("safety-line-5") == [1, 2]

    def test_expired_entry_never_returned(self, cache, clock):
        """An entry exactly TTL old is expired and removed on read"""
        cache.set("safety-line-5", [1, 2], "safety")
        clock.advance(minutes=5)

        assert cache.get("safety-line-5") is None
        assert "safety-line-5" not in cache

    def test_missing_key(self, cache):
        assert cache.get("nope") is None


class TestCacheBounds:
    """Test size bounds and cleanup"""

    def test_oldest_evicted_on_set(self, cache, clock):
        for n in range(4):
            cache.set(f"k{n}", n, "safety")
            clock.advance(seconds=1)

        assert len(cache) == 3
        assert "k0" not in cache
        assert cache.get("k3") == 3

    def test_cleanup_removes_expired(self, cache, clock):
        cache.set("old", 1, "safety")
        clock.advance(minutes=3)
        cache.set("new", 2, "safety")
        clock.advance(minutes=3)

        removed = cache.cleanup()

        assert removed == 1
        assert "old" not in cache
        assert "new" in cache

    def test_cleanup_with_nothing_to_do(self, cache):
        cache.set("a", 1, "safety")

        assert cache.cleanup() == 0
        assert len(cache) == 1


class TestCacheInvalidation:
    """Test per-pillar invalidation"""

    def test_invalidate_only_that_pillar(self, clock):
        cache = ChartCache(CacheConfig(), clock=clock)
        cache.set("safety-line-5", [], "safety")
        cache.set("safety-pie-30-levels", [], "safety")
        cache.set("quality-line-5", [], "quality")

        assert cache.invalidate("safety") == 2
        assert "quality-line-5" in cache
        assert "safety-line-5" not in cache

    def test_clear(self, cache):
        cache.set("a", 1, "safety")
        cache.clear()

        assert len(cache) == 0


class TestCleanupTask:
    """Test the periodic cleanup lifecycle"""

    @pytest.mark.asyncio
    async def test_start_and_stop(self, clock):
        cache = ChartCache(CacheConfig(), clock=clock)

        await cache.start()
        assert cache.is_running
        await cache.start()  # second start is a no-op

        await cache.stop()
        assert not cache.is_running
        await cache.stop()

    @pytest.mark.asyncio
    async def test_loop_drops_expired_entries(self, clock):
        """Cleanup runs without any read touching the entry"""
        cache = ChartCache(CacheConfig(ttl_minutes=1, cleanup_interval_minutes=0.0001), clock=clock)
        cache.set("safety-line-5", [1], "safety")
        clock.advance(minutes=2)

        await cache.start()
        try:
            for _ in range(50):
                if len(cache) == 0:
                    break
                await asyncio.sleep(0.01)
        finally:
            await cache.stop()

        assert len(cache) == 0
