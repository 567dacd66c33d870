"""
In-process TTL cache for dashboard data.

Entries expire a fixed TTL after they were stored (or last refreshed).
When the cache is full the entry with the oldest store time is evicted;
reads do not change eviction order. Expired entries are dropped lazily
on access and proactively by a background sweep started with start().
"""

import asyncio
import re
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from app.core.config import settings
from app.core.logging_config import logger


@dataclass
class CacheEntry:
    value: Any
    stored_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.stored_at > self.ttl


class TTLCache:
    """
    Fixed-TTL map cache with capacity eviction and pattern invalidation.

    TTLs are in seconds. No method raises: a missing key and an expired
    key are both reported as "not found".
    """

    def __init__(
        self,
        default_ttl: Optional[float] = None,
        max_size: Optional[int] = None,
        sweep_interval: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.default_ttl = default_ttl if default_ttl is not None else settings.DASHBOARD_CACHE_DEFAULT_TTL
        self.max_size = max_size if max_size is not None else settings.DASHBOARD_CACHE_MAX_SIZE
        self.sweep_interval = (
            sweep_interval if sweep_interval is not None else settings.DASHBOARD_CACHE_SWEEP_INTERVAL
        )
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._hits = 0
        self._misses = 0
        self._sweep_task: Optional[asyncio.Task] = None

    def __len__(self) -> int:
        return len(self._entries)

    # ========== Basic Operations ==========

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store a value; evicts the oldest entry first when full"""
        ttl = ttl if ttl is not None else self.default_ttl

        if key not in self._entries and len(self._entries) >= self.max_size:
            self._evict_oldest()

        self._entries[key] = CacheEntry(value=value, stored_at=self._clock(), ttl=ttl)
        logger.debug(f"Cached item: {key} (TTL: {ttl}s)")

    def get(self, key: str) -> Optional[Any]:
        """Return the value, or None when absent or expired"""
        entry = self._live_entry(key)
        if entry is None:
            self._misses += 1
            return None

        self._hits += 1
        logger.debug(f"Cache hit: {key}")
        return entry.value

    def has(self, key: str) -> bool:
        return self._live_entry(key) is not None

    def delete(self, key: str) -> bool:
        deleted = self._entries.pop(key, None) is not None
        if deleted:
            logger.debug(f"Removed cache item: {key}")
        return deleted

    def clear(self) -> None:
        self._entries.clear()
        logger.debug("Cache cleared")

    def refresh(self, key: str) -> bool:
        """Reset the store time of a live entry, extending its expiry"""
        entry = self._live_entry(key)
        if entry is None:
            return False

        entry.stored_at = self._clock()
        logger.debug(f"Refreshed cache item: {key}")
        return True

    # ========== Bulk Operations ==========

    def set_multiple(self, items: Iterable[Union[Tuple[str, Any], Tuple[str, Any, Optional[float]]]]) -> None:
        """Store (key, value) or (key, value, ttl) tuples"""
        for item in items:
            self.set(*item)

    def get_multiple(self, keys: Iterable[str]) -> Dict[str, Optional[Any]]:
        return {key: self.get(key) for key in keys}

    def preload(self, category: str, data: Dict[str, Any], ttl: Optional[float] = None) -> None:
        for key, value in data.items():
            self.set(self.generate_key(category, key), value, ttl)
        logger.debug(f"Preloaded {len(data)} items for category: {category}")

    # ========== Invalidation ==========

    def invalidate_pattern(self, pattern: str) -> int:
        """Delete every key matching the regular expression; returns the count"""
        regex = re.compile(pattern)
        matched = [key for key in self._entries if regex.search(key)]
        for key in matched:
            del self._entries[key]

        if matched:
            logger.debug(f"Invalidated {len(matched)} cache items matching pattern: {pattern}")
        return len(matched)

    def invalidate_category(self, category: str) -> int:
        return self.invalidate_pattern(f"^{re.escape(category)}:")

    def cleanup(self) -> int:
        """Remove all expired entries; returns the count"""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]

        if expired:
            logger.debug(f"Cleaned up {len(expired)} expired cache items")
        return len(expired)

    # ========== Keys & Stats ==========

    @staticmethod
    def generate_key(category: str, *params: Any) -> str:
        return ":".join([category, *(str(p) for p in params)])

    def get_keys_by_category(self, category: str) -> List[str]:
        prefix = f"{category}:"
        return [key for key in self._entries if key.startswith(prefix)]

    def get_category_size(self, category: str) -> int:
        return len(self.get_keys_by_category(category))

    @property
    def hit_rate(self) -> float:
        lookups = self._hits + self._misses
        return round(self._hits / lookups, 4) if lookups else 0.0

    def get_stats(self) -> dict:
        return {
            "size": len(self._entries),
            "max_size": self.max_size,
            "hit_rate": self.hit_rate,
            "hits": self._hits,
            "misses": self._misses,
            "keys": list(self._entries.keys()),
        }

    def is_healthy(self) -> bool:
        """Healthy while less than 90% full"""
        return len(self._entries) < self.max_size * 0.9

    # ========== Background Sweep ==========

    @property
    def is_running(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()

    async def start(self) -> None:
        """Start the periodic expiry sweep on the running event loop"""
        if self.is_running:
            return

        async def sweep_loop():
            while True:
                await asyncio.sleep(self.sweep_interval)
                try:
                    self.cleanup()
                except Exception as e:
                    logger.error(f"Cache sweep error: {e}")

        self._sweep_task = asyncio.create_task(sweep_loop())
        logger.info(f"Started cache sweep task (every {self.sweep_interval}s)")

    async def stop(self) -> None:
        """Cancel the sweep task and wait for it to finish"""
        if self._sweep_task is None:
            return

        self._sweep_task.cancel()
        try:
            await self._sweep_task
        except asyncio.CancelledError:
            pass
        self._sweep_task = None
        logger.info("Stopped cache sweep task")

    # ========== Internals ==========

    def _live_entry(self, key: str) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        if entry.is_expired(self._clock()):
            del self._entries[key]
            logger.debug(f"Cache item expired: {key}")
            return None

        return entry

    def _evict_oldest(self) -> None:
        if not self._entries:
            return

        oldest_key = min(self._entries, key=lambda k: self._entries[k].stored_at)
        del self._entries[oldest_key]
        logger.debug(f"Evicted oldest cache item: {oldest_key}")


# Singleton instance
dashboard_cache = TTLCache()
