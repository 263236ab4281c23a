"""
Unit tests for the catalog/meta/stream lookup service.
"""

import pytest

from freelivtv.addon.ids import make_channel_id
from freelivtv.addon.manifest import catalog_category
from freelivtv.addon.service import (
    FALLBACK_TITLE,
    LIVE_TITLE,
    AddonService,
    filter_channels,
    parse_extra,
    parse_skip,
)
from freelivtv.config import AddonConfig, PlaylistConfig, ResolverConfig
from freelivtv.importers.channel_registry import ChannelRecord, ChannelRegistry
from freelivtv.importers.classification import Category, Quality
from freelivtv.streaming.resolvers.hls import HLSResolver

SUN_URL = "http://streams.test/live/sun/index.m3u8"


def make_service(http_client, cache_manager, playlist_url, **addon) -> AddonService:
    registry = ChannelRegistry(http_client, cache_manager.channels, PlaylistConfig(url=playlist_url))
    resolver = HLSResolver(http_client, cache_manager.streams, ResolverConfig())
    return AddonService(registry, resolver, cache_manager.metas, AddonConfig(**addon))


@pytest.fixture
def service(http_client, cache_manager, playlist_url, upstream, sample_playlist) -> AddonService:
    upstream.add(playlist_url, sample_playlist)
    return make_service(http_client, cache_manager, playlist_url)


def record(name: str, category: Category, url: str) -> ChannelRecord:
    return ChannelRecord(
        raw_name=name,
        display_name=name,
        category=category,
        quality=Quality.SD,
        source_url=url,
    )


@pytest.mark.unit
class TestHelpers:
    """Tests for filter and request parsing helpers."""

    def test_category_filter_preserves_order(self):
        channels = [
            record("C1", Category.CRICKET, "u1"),
            record("M1", Category.MOVIES, "u2"),
            record("C2", Category.CRICKET, "u3"),
            record("N1", Category.NEWS, "u4"),
            record("C3", Category.CRICKET, "u5"),
        ]

        result = filter_channels(channels, category=Category.CRICKET)

        assert [ch.raw_name for ch in result] == ["C1", "C2", "C3"]

    def test_search_matches_name_and_category(self):
        channels = [
            record("Sun TV", Category.ENTERTAINMENT, "u1"),
            record("Polimer", Category.NEWS, "u2"),
        ]

        assert [ch.raw_name for ch in filter_channels(channels, search="SUN")] == ["Sun TV"]
        assert [ch.raw_name for ch in filter_channels(channels, search="news")] == ["Polimer"]

    def test_genre_filter(self):
        channels = [
            record("A", Category.MUSIC, "u1"),
            record("B", Category.NEWS, "u2"),
        ]
        assert [ch.raw_name for ch in filter_channels(channels, genre="Music")] == ["A"]

    @pytest.mark.parametrize("value,expected", [
        ("100", 100),
        (None, 0),
        ("abc", 0),
        ("-5", 0),
    ])
    def test_parse_skip(self, value, expected):
        assert parse_skip(value) == expected

    def test_parse_extra(self):
        assert parse_extra("genre=Cricket&skip=100") == {"genre": "Cricket", "skip": "100"}
        assert parse_extra("search=sun%20tv") == {"search": "sun tv"}
        assert parse_extra(None) == {}

    @pytest.mark.parametrize("extra, expected", [
        ("search=c%2Bc", {"search": "c+c"}),
        ("search=c+c", {"search": "c+c"}),
        ("search=a%26b&skip=10", {"search": "a&b", "skip": "10"}),
        ("search%3Dsun%20tv", {"search": "sun tv"}),
        ("search=", {"search": ""}),
    ])
    def test_parse_extra_decodes_once(self, extra, expected):
        assert parse_extra(extra) == expected

    def test_catalog_category(self):
        assert catalog_category("tamil", "tamil-cricket") is Category.CRICKET
        assert catalog_category("tamil", "tamil-all") is None
        assert catalog_category("tamil", "other-cricket") is None


@pytest.mark.unit
class TestCatalog:
    """Tests for catalog lookups."""

    @pytest.mark.asyncio
    async def test_all_channels(self, service):
        result = await service.catalog("tv", "tamil-all")

        metas = result["metas"]
        assert len(metas) == 5
        first = metas[0]
        assert first["id"] == make_channel_id("tamil", SUN_URL)
        assert first["type"] == "tv"
        assert first["name"] == "Sun TV HD"
        assert first["posterShape"] == "square"
        assert first["releaseInfo"] == "LIVE"
        assert first["genres"] == ["Entertainment"]
        assert first["description"] == "📺 Entertainment • HD"
        assert first["poster"] == "http://logos.test/sun.png"
        assert first["behaviorHints"]["defaultVideoId"] == first["id"]

    @pytest.mark.asyncio
    async def test_missing_logo_is_omitted(self, service):
        metas = (await service.catalog("tv", "tamil-all"))["metas"]
        assert "poster" not in metas[1]
        assert "background" not in metas[1]

    @pytest.mark.asyncio
    async def test_logos_disabled(self, http_client, cache_manager, playlist_url, upstream, sample_playlist):
        upstream.add(playlist_url, sample_playlist)
        service = make_service(http_client, cache_manager, playlist_url, enable_logos=False)

        metas = (await service.catalog("tv", "tamil-all"))["metas"]

        assert all("poster" not in meta for meta in metas)

    @pytest.mark.asyncio
    async def test_category_catalog(self, service):
        metas = (await service.catalog("tv", "tamil-cricket"))["metas"]
        assert [m["name"] for m in metas] == ["🏏 Star Sports 1 HD"]

    @pytest.mark.asyncio
    async def test_search(self, service):
        metas = (await service.catalog("tv", "tamil-all", {"search": "sun"}))["metas"]
        assert [m["name"] for m in metas] == ["Sun TV HD", "Sun News"]

    @pytest.mark.asyncio
    async def test_genre(self, service):
        metas = (await service.catalog("tv", "tamil-all", {"genre": "Movies"}))["metas"]
        assert [m["name"] for m in metas] == ["KTV Movies FHD"]

    @pytest.mark.asyncio
    async def test_skip_and_page_size(self, http_client, cache_manager, playlist_url, upstream, sample_playlist):
        upstream.add(playlist_url, sample_playlist)
        service = make_service(http_client, cache_manager, playlist_url, page_size=2)

        page1 = (await service.catalog("tv", "tamil-all"))["metas"]
        page3 = (await service.catalog("tv", "tamil-all", {"skip": "4"}))["metas"]
        beyond = (await service.catalog("tv", "tamil-all", {"skip": "50"}))["metas"]

        assert [m["name"] for m in page1] == ["Sun TV HD", "Sun News"]
        assert [m["name"] for m in page3] == ["Isai Music"]
        assert beyond == []

    @pytest.mark.asyncio
    async def test_other_type_is_empty(self, service, upstream):
        assert await service.catalog("movie", "tamil-all") == {"metas": []}
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_upstream_down_is_empty(self, http_client, cache_manager, playlist_url, upstream):
        upstream.fail(playlist_url)
        service = make_service(http_client, cache_manager, playlist_url)

        assert await service.catalog("tv", "tamil-all") == {"metas": []}


@pytest.mark.unit
class TestMeta:
    """Tests for meta lookups."""

    @pytest.mark.asyncio
    async def test_known_channel(self, service):
        channel_id = make_channel_id("tamil", SUN_URL)

        meta = (await service.meta("tv", channel_id))["meta"]

        assert meta["id"] == channel_id
        assert meta["name"] == "Sun TV HD"
        assert meta["description"] == "📺 Entertainment • HD\n\nFREE LIV TV || TAMIL"
        assert len(meta["videos"]) == 1
        video = meta["videos"][0]
        assert video["id"] == channel_id
        assert video["title"] == "🔴 Watch Live"
        assert video["released"].endswith("Z")
        assert video["available"] is True

    @pytest.mark.asyncio
    async def test_meta_is_cached(self, service, cache_manager):
        channel_id = make_channel_id("tamil", SUN_URL)

        first = await service.meta("tv", channel_id)
        second = await service.meta("tv", channel_id)

        assert first == second
        assert await cache_manager.metas.exists(channel_id)

    @pytest.mark.asyncio
    async def test_unknown_channel_gets_generic_meta(self, service, cache_manager):
        channel_id = make_channel_id("tamil", "http://gone.test/old.m3u8")

        meta = (await service.meta("tv", channel_id))["meta"]

        assert meta["name"] == "Live Channel"
        assert meta["description"] == "Live TV Channel"
        assert meta["genres"] == ["Entertainment"]
        assert meta["videos"][0]["id"] == channel_id
        assert not await cache_manager.metas.exists(channel_id)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content_type,channel_id", [
        ("tv", "other:abc"),
        ("movie", "tamil:aHR0cDovL3g"),
        ("tv", "tamil:!!!!"),
        ("tv", "tamil:"),
    ])
    async def test_invalid_requests(self, service, content_type, channel_id):
        assert await service.meta(content_type, channel_id) == {"meta": None}


@pytest.mark.unit
class TestStream:
    """Tests for stream lookups."""

    @pytest.mark.asyncio
    async def test_resolved_stream(self, service, upstream, media_manifest):
        upstream.add(SUN_URL, media_manifest)

        streams = (await service.stream("tv", make_channel_id("tamil", SUN_URL)))["streams"]

        assert streams == [{
            "url": "http://streams.test/live/sun/segment1.ts",
            "title": LIVE_TITLE,
            "name": "FREE LIV TV",
            "behaviorHints": {"notWebReady": True},
        }]

    @pytest.mark.asyncio
    async def test_fallback_stream(self, service, upstream):
        upstream.add(SUN_URL, "#EXTM3U\n")

        streams = (await service.stream("tv", make_channel_id("tamil", SUN_URL)))["streams"]

        assert len(streams) == 1
        assert streams[0]["url"] == SUN_URL
        assert streams[0]["title"] == FALLBACK_TITLE

    @pytest.mark.asyncio
    async def test_stream_does_not_need_registry(self, service, upstream, master_manifest):
        """Streams resolve from the id alone, even for channels not in the playlist."""
        url = "http://elsewhere.test/tv/play.m3u8"
        upstream.add(url, master_manifest)

        streams = (await service.stream("tv", make_channel_id("tamil", url)))["streams"]

        assert streams[0]["url"] == "http://elsewhere.test/tv/mid/index.m3u8"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content_type,channel_id", [
        ("tv", "other:abc"),
        ("movie", "tamil:aHR0cDovL3g"),
        ("tv", "tamil:!!!!"),
    ])
    async def test_invalid_requests(self, service, content_type, channel_id):
        assert await service.stream(content_type, channel_id) == {"streams": []}


@pytest.mark.unit
class TestManifest:
    """Tests for the manifest document."""

    def test_manifest(self, service):
        manifest = service.manifest()

        assert manifest["id"] == "org.freelivtv.tamil"
        assert manifest["types"] == ["tv"]
        assert manifest["resources"] == ["catalog", "meta", "stream"]
        assert manifest["idPrefixes"] == ["tamil:"]
        assert manifest["behaviorHints"] == {"adult": False, "p2p": False}

        catalogs = {c["id"]: c for c in manifest["catalogs"]}
        assert set(catalogs) == {
            "tamil-all", "tamil-cricket", "tamil-movies", "tamil-news",
            "tamil-entertainment", "tamil-music", "tamil-kids", "tamil-devotional",
        }
        extras = {e["name"]: e for e in catalogs["tamil-all"]["extra"]}
        assert set(extras) == {"genre", "search", "skip"}
        assert "Cricket" in extras["genre"]["options"]
        assert "extra" not in catalogs["tamil-news"]
