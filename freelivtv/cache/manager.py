"""
Cache manager - owns the three independent caches used by the gateway.
"""

import logging
import time
from typing import Any, Callable, Dict, List, Optional

from freelivtv.cache.base import CacheConfig
from freelivtv.cache.memory import MemoryCache
from freelivtv.config import CacheSettings

logger = logging.getLogger(__name__)


class CacheManager:
    """
    Builds and owns the channel, stream and meta caches.

    - ``channels``: whole-playlist snapshot, capacity 1
    - ``streams``: playlist URL -> resolved media URL
    - ``metas``: channel id -> rendered meta document

    The caches share one implementation and differ only in capacity and TTL.
    Each cache runs its own sweep task between ``start()`` and ``stop()``.
    """

    def __init__(
        self,
        settings: Optional[CacheSettings] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = settings or CacheSettings()
        self.channels: MemoryCache = MemoryCache(
            CacheConfig(
                name="channels",
                max_entries=1,
                ttl_seconds=self.settings.channel_ttl,
                sweep_interval=self.settings.sweep_interval,
            ),
            clock=clock,
        )
        self.streams: MemoryCache = MemoryCache(
            CacheConfig(
                name="streams",
                max_entries=self.settings.max_entries,
                ttl_seconds=self.settings.stream_ttl,
                sweep_interval=self.settings.sweep_interval,
            ),
            clock=clock,
        )
        self.metas: MemoryCache = MemoryCache(
            CacheConfig(
                name="metas",
                max_entries=self.settings.max_entries,
                ttl_seconds=self.settings.meta_ttl,
                sweep_interval=self.settings.sweep_interval,
            ),
            clock=clock,
        )

    @property
    def caches(self) -> List[MemoryCache]:
        return [self.channels, self.streams, self.metas]

    async def start(self) -> None:
        """Start the background sweep of every cache."""
        for cache in self.caches:
            await cache.start()
        logger.info(f"[CACHE] Sweeping every {self.settings.sweep_interval}s")

    async def stop(self) -> None:
        """Stop the background sweeps."""
        for cache in self.caches:
            await cache.stop()

    async def sweep(self) -> Dict[str, int]:
        """Run one sweep over every cache now."""
        return {cache.name: await cache.sweep() for cache in self.caches}

    async def clear(self) -> Dict[str, int]:
        """Empty every cache and reset their counters."""
        cleared = {cache.name: await cache.clear() for cache in self.caches}
        logger.info(f"[CACHE] Cleared {cleared}")
        return cleared

    def get_stats(self) -> Dict[str, Any]:
        """Statistics for each cache, keyed by cache name."""
        return {cache.name: cache.get_stats() for cache in self.caches}
