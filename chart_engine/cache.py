# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
In-memory TTL cache for computed chart data.

Entries are keyed by ``(category, chart type, parameters)``. Expired entries
are never returned: expiry is checked on every read, and a periodic cleanup
task (started with :meth:`ChartCache.start`) drops expired entries and evicts
the oldest ones when the cache grows past ``max_entries``.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional, Union

from chart_engine.config import CacheConfig
from chart_engine.models import ChartType

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


@dataclass
class CacheEntry:
    """Cached chart data with its creation time"""
    data: Any
    timestamp: datetime
    category_key: str
    cache_key: str


class ChartCache:
    """TTL and size bounded cache for chart results"""

    def __init__(self, config: Optional[CacheConfig] = None, clock: Optional[Clock] = None):
        self.config = config or CacheConfig()
        self._clock = clock or datetime.now
        self._entries: Dict[str, CacheEntry] = {}
        self._cleanup_task: Optional[asyncio.Task] = None

    @property
    def ttl(self) -> timedelta:
        return timedelta(minutes=self.config.ttl_minutes)

    @staticmethod
    def build_key(category: str, chart_type: Union[ChartType, str], *params: Any) -> str:
        """Cache key such as ``safety-line-5`` or ``safety-strategy-month``"""
        chart_type = chart_type.value if isinstance(chart_type, ChartType) else str(chart_type)
        return "-".join([category, chart_type, *(str(param) for param in params)])

    def _is_expired(self, entry: CacheEntry, now: datetime) -> bool:
        return now - entry.timestamp >= self.ttl

    def get(self, key: str) -> Optional[Any]:
        """Get item from cache if not expired"""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._is_expired(entry, self._clock()):
            # Expired, remove from cache
            del self._entries[key]
            logger.debug("Cache entry expired: %s", key)
            return None
        logger.debug("Cache hit: %s", key)
        return entry.data

    def set(self, key: str, data: Any, category: str) -> None:
        """Set item in cache with timestamp"""
        self._entries[key] = CacheEntry(
            data=data,
            timestamp=self._clock(),
            category_key=category,
            cache_key=key,
        )
        self._evict_oldest()

    def invalidate(self, category: str) -> int:
        """Drop every entry of a pillar. Returns the number of entries removed."""
        keys = [key for key, entry in list(self._entries.items()) if entry.category_key == category]
        for key in keys:
            del self._entries[key]
        logger.info("Invalidated %d cache entries for pillar %s", len(keys), category)
        return len(keys)

    def clear(self) -> None:
        """Clear all cached data"""
        self._entries.clear()

    def cleanup(self) -> int:
        """
        Drop expired entries, then evict the oldest above ``max_entries``.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        removed = 0
        for key in list(self._entries.keys()):
            entry = self._entries.get(key)
            if entry is not None and self._is_expired(entry, now):
                del self._entries[key]
                removed += 1
        removed += self._evict_oldest()
        if removed:
            logger.debug("Cache cleanup removed %d entries, %d remain", removed, len(self._entries))
        return removed

    def _evict_oldest(self) -> int:
        overflow = len(self._entries) - self.config.max_entries
        if overflow <= 0:
            return 0
        oldest = sorted(self._entries.values(), key=lambda entry: entry.timestamp)[:overflow]
        for entry in oldest:
            del self._entries[entry.cache_key]
        return overflow

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    # Lifecycle

    @property
    def is_running(self) -> bool:
        return self._cleanup_task is not None and not self._cleanup_task.done()

    async def start(self) -> None:
        """Start the periodic cleanup task on the running event loop"""
        if self.is_running:
            return
        self._cleanup_task = asyncio.create_task(self._run_cleanup())
        logger.debug("Cache cleanup task started (every %s minutes)", self.config.cleanup_interval_minutes)

    async def stop(self) -> None:
        """Cancel the cleanup task and wait for it to finish"""
        task, self._cleanup_task = self._cleanup_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Cache cleanup task stopped")

    async def _run_cleanup(self) -> None:
        interval = self.config.cleanup_interval_minutes * 60
        while True:
            await asyncio.sleep(interval)
            try:
                self.cleanup()
            except Exception as e:
                logger.error("Cache cleanup failed: %s", e, exc_info=True)
