"""
Channel registry built from the upstream M3U playlist.

The registry holds one snapshot (the full ordered channel list) in a
capacity-1 cache. Upstream failures never propagate: the registry serves the
last good list even after it has expired, or an empty list if there never
was one or it was explicitly cleared.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from freelivtv.cache.memory import MemoryCache
from freelivtv.config import PlaylistConfig
from freelivtv.errors import FetchError
from freelivtv.importers.classification import (
    Category,
    Quality,
    classify_category,
    classify_quality,
    clean_channel_name,
    is_included,
)
from freelivtv.importers.m3u_parser import M3UEntry, M3UParser
from freelivtv.utils.http import fetch_text

logger = logging.getLogger(__name__)

SNAPSHOT_KEY = "channels"


@dataclass(frozen=True)
class ChannelRecord:
    """One playable channel. ``source_url`` is its natural key."""

    raw_name: str
    display_name: str
    category: Category
    quality: Quality
    source_url: str
    group: str = ""
    logo_url: Optional[str] = None
    tvg_id: Optional[str] = None

    @property
    def name(self) -> str:
        return self.display_name or self.raw_name


@dataclass
class ChannelSnapshot:
    """Result of a registry load and where it came from."""

    channels: list[ChannelRecord] = field(default_factory=list)
    source: str = "empty"  # cache | upstream | stale | empty
    error: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.source in ("stale", "empty")


def build_channels(entries: list[M3UEntry], max_channels: int) -> list[ChannelRecord]:
    """
    Filter, classify and de-duplicate parsed entries.

    Entries are kept in playlist order. A repeated source URL replaces the
    earlier record in place. Building stops once ``max_channels`` records exist.
    """
    records: dict[str, ChannelRecord] = {}

    for entry in entries:
        name = entry.name
        if not name or not entry.url:
            continue

        group = entry.group_title or ""
        if not is_included(name, group):
            continue

        records[entry.url] = ChannelRecord(
            raw_name=name,
            display_name=clean_channel_name(name),
            category=classify_category(name, group),
            quality=classify_quality(name),
            source_url=entry.url,
            group=group,
            logo_url=entry.tvg_logo,
            tvg_id=entry.tvg_id,
        )

        if len(records) >= max_channels:
            break

    return list(records.values())


class ChannelRegistry:
    """
    Loads and caches the channel list.

    Usage:
        registry = ChannelRegistry(client, cache_manager.channels, config.playlist)
        channels = await registry.load_channels()
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: MemoryCache,
        settings: Optional[PlaylistConfig] = None,
    ):
        self._client = client
        self._cache = cache
        self.settings = settings or PlaylistConfig()
        # Last successfully built list, kept past cache expiry and sweeps.
        # Dropped only by clear().
        self._last_good: Optional[list[ChannelRecord]] = None

    @property
    def headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.settings.user_agent,
            "Accept": "*/*",
        }

    async def load_channels(self) -> list[ChannelRecord]:
        """Ordered channel list; never raises."""
        snapshot = await self.load_snapshot()
        return snapshot.channels

    async def load_snapshot(self) -> ChannelSnapshot:
        """Load the channel list, reporting whether it is fresh, stale or empty."""
        cached = await self._cache.get(SNAPSHOT_KEY)
        if cached is not None:
            logger.debug(f"[M3U] Returning {len(cached)} cached channels")
            return ChannelSnapshot(channels=cached, source="cache")

        logger.info("[M3U] Fetching channels from playlist...")

        try:
            text = await fetch_text(
                self._client,
                self.settings.url,
                headers=self.headers,
                timeout=self.settings.timeout,
            )
            channels = build_channels(M3UParser.parse_text(text), self.settings.max_channels)
        except FetchError as e:
            logger.error(f"[M3U] Failed to load channels: {e}")
            return self._fallback(str(e))
        except Exception as e:
            logger.exception("[M3U] Unexpected error while building channel list")
            return self._fallback(str(e))

        logger.info(f"[M3U] Loaded {len(channels)} channels")
        logger.debug(f"[M3U] Categories: {dict(Counter(ch.category.value for ch in channels))}")

        await self._cache.set(SNAPSHOT_KEY, channels)
        self._last_good = channels
        return ChannelSnapshot(channels=channels, source="upstream")

    def clear(self) -> None:
        """Forget the last good list so a failed reload serves nothing stale."""
        self._last_good = None

    def _fallback(self, error: str) -> ChannelSnapshot:
        if self._last_good is not None:
            logger.warning("[M3U] Returning stale cache due to error")
            return ChannelSnapshot(channels=self._last_good, source="stale", error=error)
        return ChannelSnapshot(channels=[], source="empty", error=error)

    async def get_channels_by_category(self, category: Optional[str]) -> list[ChannelRecord]:
        channels = await self.load_channels()
        if not category or category.lower() == "all":
            return channels
        wanted = category.lower()
        return [ch for ch in channels if ch.category.value.lower() == wanted]

    async def get_channel_by_url(self, url: str) -> Optional[ChannelRecord]:
        for channel in await self.load_channels():
            if channel.source_url == url:
                return channel
        return None

    async def get_categories(self) -> list[dict[str, Any]]:
        """Categories in first-seen order with their channel counts."""
        counts = Counter(ch.category.value for ch in await self.load_channels())
        return [{"name": name, "count": count} for name, count in counts.items()]
