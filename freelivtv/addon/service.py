"""
Catalog, meta and stream lookups.

Maps addon requests onto the channel registry and the stream resolver and
shapes the results into protocol documents. Every lookup degrades instead of
failing: an empty catalog, a null or generic meta, or the original playlist
URL as the stream.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import unquote

from freelivtv.addon.ids import make_channel_id, parse_channel_id
from freelivtv.addon.manifest import build_manifest, catalog_category
from freelivtv.addon.schemas import (
    MetaBehaviorHints,
    MetaDetail,
    MetaPreview,
    Stream,
    Video,
)
from freelivtv.cache.memory import MemoryCache
from freelivtv.config import AddonConfig
from freelivtv.errors import DecodeError
from freelivtv.importers.channel_registry import ChannelRecord, ChannelRegistry
from freelivtv.importers.classification import Category, get_category_icon
from freelivtv.streaming.resolvers.hls import HLSResolver

logger = logging.getLogger(__name__)

CONTENT_TYPE = "tv"
LIVE_TITLE = "🔴 Live Stream"
FALLBACK_TITLE = "🔴 Live Stream (Fallback)"


def parse_extra(extra: Optional[str]) -> dict[str, str]:
    """
    Decode the raw catalog "extra" path segment, e.g. ``genre=Cricket&skip=100``.

    The segment must still be percent-encoded: it is split on ``&`` and ``=``
    first and each part is unquoted once, so ``%26`` stays inside a value and
    ``+`` stays a plus sign. A segment encoded as a whole (``search%3Dsun``)
    is unquoted once before splitting. Later keys win. Blank values are kept
    so ``search=`` reads as no search.
    """
    if not extra:
        return {}

    decode = unquote
    if "=" not in extra:
        extra, decode = unquote(extra), str

    params = {}
    for pair in extra.split("&"):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        params[decode(key)] = decode(value)
    return params


def parse_skip(value: Any) -> int:
    """Pagination offset; anything unparsable or negative means 0."""
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0


def filter_channels(
    channels: list[ChannelRecord],
    category: Optional[Category] = None,
    search: Optional[str] = None,
    genre: Optional[str] = None,
) -> list[ChannelRecord]:
    """Apply catalog category, free-text search and genre filters, keeping order."""
    if category is not None:
        channels = [ch for ch in channels if ch.category is category]

    if search:
        term = search.lower()
        channels = [
            ch for ch in channels
            if term in ch.raw_name.lower()
            or term in ch.display_name.lower()
            or term in ch.category.value.lower()
        ]

    if genre:
        wanted = genre.lower()
        channels = [ch for ch in channels if ch.category.value.lower() == wanted]

    return channels


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class AddonService:
    """
    Lookup façade over the registry and resolver.

    Usage:
        service = AddonService(registry, resolver, cache_manager.metas, config.addon)
        await service.catalog("tv", "tamil-all", {"search": "sun"})
    """

    def __init__(
        self,
        registry: ChannelRegistry,
        resolver: HLSResolver,
        meta_cache: MemoryCache,
        settings: Optional[AddonConfig] = None,
    ):
        self.registry = registry
        self.resolver = resolver
        self._meta_cache = meta_cache
        self.settings = settings or AddonConfig()

    @property
    def prefix(self) -> str:
        return self.settings.id_prefix

    def manifest(self) -> dict[str, Any]:
        return build_manifest(self.settings).to_wire()

    def channel_id(self, channel: ChannelRecord) -> str:
        return make_channel_id(self.prefix, channel.source_url)

    def _owns(self, content_type: str, channel_id: str) -> bool:
        return content_type == CONTENT_TYPE and channel_id.startswith(f"{self.prefix}:")

    def _logo(self, channel: Optional[ChannelRecord]) -> Optional[str]:
        if channel is not None and self.settings.enable_logos and channel.logo_url:
            return channel.logo_url
        return None

    def to_preview(self, channel: ChannelRecord) -> MetaPreview:
        channel_id = self.channel_id(channel)
        logo = self._logo(channel)
        return MetaPreview(
            id=channel_id,
            name=channel.name,
            poster=logo,
            background=logo,
            description=(
                f"{get_category_icon(channel.category.value)} "
                f"{channel.category.value} • {channel.quality.value}"
            ),
            genres=[channel.category.value],
            behavior_hints=MetaBehaviorHints(default_video_id=channel_id),
        )

    def to_detail(self, channel_id: str, channel: Optional[ChannelRecord]) -> MetaDetail:
        """Full meta; a channel missing from the registry gets a generic entry."""
        logo = self._logo(channel)
        if channel is not None:
            name = channel.name
            description = (
                f"{get_category_icon(channel.category.value)} "
                f"{channel.category.value} • {channel.quality.value}\n\n"
                f"{channel.group or 'Tamil Live TV'}"
            )
            genres = [channel.category.value]
        else:
            name = "Live Channel"
            description = "Live TV Channel"
            genres = [Category.ENTERTAINMENT.value]

        return MetaDetail(
            id=channel_id,
            name=name,
            poster=logo,
            background=logo,
            description=description,
            genres=genres,
            videos=[Video(id=channel_id, title="🔴 Watch Live", released=_now_iso())],
            behavior_hints=MetaBehaviorHints(default_video_id=channel_id),
        )

    async def catalog(
        self,
        content_type: str,
        catalog_id: str,
        extra: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        logger.debug(f"[CATALOG] type={content_type}, id={catalog_id}, extra={extra}")

        if content_type != CONTENT_TYPE:
            return {"metas": []}

        extra = extra or {}
        try:
            channels = filter_channels(
                await self.registry.load_channels(),
                category=catalog_category(self.prefix, catalog_id),
                search=extra.get("search"),
                genre=extra.get("genre"),
            )
            skip = parse_skip(extra.get("skip"))
            page = channels[skip:skip + self.settings.page_size]
            metas = [self.to_preview(ch).to_wire() for ch in page]
        except Exception:
            logger.exception("[CATALOG] Error")
            return {"metas": []}

        logger.info(f"[CATALOG] Returning {len(metas)} channels for {catalog_id}")
        return {"metas": metas}

    async def meta(self, content_type: str, channel_id: str) -> dict[str, Any]:
        logger.debug(f"[META] type={content_type}, id={channel_id}")

        if not self._owns(content_type, channel_id):
            return {"meta": None}

        cached = await self._meta_cache.get(channel_id)
        if cached is not None:
            logger.debug("[META] Cache hit")
            return {"meta": cached}

        try:
            source_url = parse_channel_id(self.prefix, channel_id)
        except DecodeError as e:
            logger.warning(f"[META] {e}")
            return {"meta": None}

        try:
            channel = await self.registry.get_channel_by_url(source_url)
            meta = self.to_detail(channel_id, channel).to_wire()
        except Exception:
            logger.exception("[META] Error")
            return {"meta": None}

        # Generic entries are not cached so the real one shows up once the
        # registry has the channel again.
        if channel is not None:
            await self._meta_cache.set(channel_id, meta)

        return {"meta": meta}

    async def stream(self, content_type: str, channel_id: str) -> dict[str, Any]:
        logger.debug(f"[STREAM] type={content_type}, id={channel_id}")

        if not self._owns(content_type, channel_id):
            return {"streams": []}

        try:
            playlist_url = parse_channel_id(self.prefix, channel_id)
        except DecodeError as e:
            logger.warning(f"[STREAM] {e}")
            return {"streams": []}

        try:
            resolved = await self.resolver.resolve(playlist_url)
            url, degraded = resolved.url, resolved.degraded
        except Exception:
            logger.exception("[STREAM] Error")
            url, degraded = playlist_url, True

        stream = Stream(
            url=url,
            title=FALLBACK_TITLE if degraded else LIVE_TITLE,
            name=self.settings.name,
        )
        return {"streams": [stream.to_wire()]}
