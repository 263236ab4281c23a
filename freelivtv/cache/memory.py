"""
In-memory LRU cache implementation with TTL support.
"""

import asyncio
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Dict, Generic, Hashable, Optional, TypeVar

from freelivtv.cache.base import CacheConfig, CacheStats

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass
class CacheEntry(Generic[V]):
    """A single cache entry with its insertion time."""
    value: V
    inserted_at: float

    def is_expired(self, now: float, ttl: float) -> bool:
        """An entry stays visible while ``now - inserted_at <= ttl``."""
        return now - self.inserted_at > ttl


class MemoryCache(Generic[K, V]):
    """
    Thread-safe in-memory LRU cache with TTL support.

    Features:
    - LRU eviction when max entries reached (get and set both count as use)
    - Time-based expiration, lazy on access and eager on sweep
    - Background sweep task owned by the cache (start/stop)
    - Hit/miss/set statistics

    The clock is injectable so expiry can be tested without sleeping.
    """

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or CacheConfig()
        self.stats = CacheStats()
        self._clock = clock
        self._cache: "OrderedDict[K, CacheEntry[V]]" = OrderedDict()
        self._lock = Lock()
        self._sweep_task: Optional[asyncio.Task] = None

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def max_entries(self) -> int:
        return self.config.max_entries

    @property
    def ttl(self) -> float:
        return self.config.ttl_seconds

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    async def start(self) -> None:
        """Start background sweep task."""
        if self._sweep_task is None:
            self._sweep_task = asyncio.create_task(self._sweep_loop())

    async def stop(self) -> None:
        """Stop background sweep task."""
        if self._sweep_task:
            self._sweep_task.cancel()
            try:
                await self._sweep_task
            except asyncio.CancelledError:
                pass
            self._sweep_task = None

    @property
    def is_sweeping(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()

    async def _sweep_loop(self) -> None:
        """Periodically remove expired entries."""
        while True:
            await asyncio.sleep(self.config.sweep_interval)
            try:
                await self.sweep()
            except Exception:
                logger.exception(f"[CACHE] Sweep of '{self.name}' failed")

    async def sweep(self) -> int:
        """Remove every expired entry regardless of recency. Returns count removed."""
        now = self._clock()
        with self._lock:
            expired_keys = [
                key for key, entry in self._cache.items()
                if entry.is_expired(now, self.config.ttl_seconds)
            ]
            for key in expired_keys:
                del self._cache[key]
            if self.config.enable_stats:
                self.stats.expirations += len(expired_keys)

        if expired_keys:
            logger.debug(f"[CACHE] Cleaned {len(expired_keys)} expired entries from '{self.name}'")

        return len(expired_keys)

    def _evict_lru(self) -> None:
        """Evict least recently used entries until there is room for one more."""
        while len(self._cache) >= self.config.max_entries:
            key, _ = self._cache.popitem(last=False)
            if self.config.enable_stats:
                self.stats.evictions += 1
            logger.debug(f"[CACHE] Evicted '{key}' from '{self.name}'")

    async def get(self, key: K) -> Optional[V]:
        """Get a value from cache."""
        with self._lock:
            entry = self._cache.get(key)

            if entry is None:
                if self.config.enable_stats:
                    self.stats.misses += 1
                return None

            if entry.is_expired(self._clock(), self.config.ttl_seconds):
                del self._cache[key]
                if self.config.enable_stats:
                    self.stats.misses += 1
                    self.stats.expirations += 1
                return None

            # Move to end (most recently used)
            self._cache.move_to_end(key)

            if self.config.enable_stats:
                self.stats.hits += 1

            return entry.value

    async def set(self, key: K, value: V) -> None:
        """Insert or replace a value, marking it most recently used."""
        entry = CacheEntry(value=value, inserted_at=self._clock())

        with self._lock:
            # Remove old entry so the new one goes to the end
            self._cache.pop(key, None)

            self._evict_lru()

            self._cache[key] = entry

            if self.config.enable_stats:
                self.stats.sets += 1

    async def exists(self, key: K) -> bool:
        """Check if key exists in cache without changing its recency."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return False
            if entry.is_expired(self._clock(), self.config.ttl_seconds):
                del self._cache[key]
                if self.config.enable_stats:
                    self.stats.expirations += 1
                return False
            return True

    async def delete(self, key: K) -> bool:
        """Delete a value from cache."""
        with self._lock:
            if key in self._cache:
                del self._cache[key]
                if self.config.enable_stats:
                    self.stats.deletes += 1
                return True
            return False

    async def clear(self) -> int:
        """Remove every entry and reset statistics. Returns count removed."""
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
            self.stats.reset()
        return count

    async def keys(self) -> list:
        """Current keys, least recently used first."""
        with self._lock:
            return list(self._cache.keys())

    def get_stats(self) -> Dict[str, Any]:
        """Observability snapshot; has no side effects."""
        with self._lock:
            size = len(self._cache)
        return {
            "name": self.name,
            "size": size,
            "max": self.config.max_entries,
            "ttl": self.config.ttl_seconds,
            "hits": self.stats.hits,
            "misses": self.stats.misses,
            "sets": self.stats.sets,
            "hit_rate": round(self.stats.hit_rate, 2),
        }
