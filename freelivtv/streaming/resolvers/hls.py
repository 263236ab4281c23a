"""
HLS manifest resolver.

Fetches a channel's playlist URL and turns it into a concrete media URL:
- master playlists: pick the middle-bandwidth variant
- media playlists: pick the first segment or sub-manifest reference
Relative references are resolved against the playlist's directory.
"""

import logging
import re
from typing import Optional

import httpx

from freelivtv.cache.memory import MemoryCache
from freelivtv.config import ResolverConfig
from freelivtv.errors import FetchError, ParseError
from freelivtv.streaming.resolvers.base import (
    PlaylistKind,
    ResolvedStream,
    ResolverError,
    Variant,
)
from freelivtv.utils.http import fetch_text

logger = logging.getLogger(__name__)

STREAM_INF_TAG = "#EXT-X-STREAM-INF"
BANDWIDTH_PATTERN = re.compile(r"BANDWIDTH=(\d+)")
RESOLUTION_PATTERN = re.compile(r"RESOLUTION=(\d+x\d+)")
SCHEME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")
SEGMENT_MARKERS = (".ts", ".m4s", ".m3u8")


def _manifest_lines(content: str) -> list[str]:
    """Trimmed, non-empty lines."""
    return [line.strip() for line in content.splitlines() if line.strip()]


def detect_playlist_kind(content: str) -> PlaylistKind:
    """Master playlists declare at least one stream variant."""
    if any(STREAM_INF_TAG in line for line in _manifest_lines(content)):
        return PlaylistKind.MASTER
    return PlaylistKind.MEDIA


def make_absolute(url: str, base_url: str) -> str:
    """
    Resolve ``url`` against the directory of ``base_url``.

    The directory is everything up to and including the last ``/``.
    URLs that already carry a scheme are returned unchanged.
    """
    if SCHEME_PATTERN.match(url):
        return url
    return base_url[: base_url.rfind("/") + 1] + url


def parse_variants(content: str) -> list[Variant]:
    """
    Every variant of a master playlist in declaration order.

    A variant's URL is the next non-comment line after its tag; a tag with
    no such line is skipped.
    """
    lines = _manifest_lines(content)
    variants = []

    for i, line in enumerate(lines):
        if STREAM_INF_TAG not in line:
            continue

        bandwidth_match = BANDWIDTH_PATTERN.search(line)
        resolution_match = RESOLUTION_PATTERN.search(line)

        for candidate in lines[i + 1:]:
            if not candidate.startswith("#"):
                variants.append(Variant(
                    url=candidate,
                    bandwidth=int(bandwidth_match.group(1)) if bandwidth_match else 0,
                    resolution=resolution_match.group(1) if resolution_match else "unknown",
                ))
                break

    return variants


def select_variant(variants: list[Variant]) -> Variant:
    """Middle variant (index count // 2) after a stable sort by descending bandwidth."""
    if not variants:
        raise ParseError("No variants found")
    ordered = sorted(variants, key=lambda v: v.bandwidth, reverse=True)
    return ordered[len(ordered) // 2]


def find_media_reference(content: str) -> Optional[str]:
    """First non-comment line that looks like a segment or sub-manifest."""
    for line in _manifest_lines(content):
        if line.startswith("#"):
            continue
        if any(marker in line for marker in SEGMENT_MARKERS):
            return line
    return None


def extract_stream_url(content: str, base_url: str) -> tuple[str, PlaylistKind, Optional[Variant]]:
    """
    Derive a concrete media URL from manifest content.

    Returns:
        (absolute URL, manifest kind, chosen variant or None)

    Raises:
        ParseError: If the manifest has no usable variant or segment line
    """
    kind = detect_playlist_kind(content)

    if kind is PlaylistKind.MASTER:
        logger.debug("[EXTRACT] Master playlist detected")
        variants = parse_variants(content)
        if not variants:
            raise ParseError("Master playlist without variant URLs")
        selected = select_variant(variants)
        logger.debug(f"[EXTRACT] Selected: {selected.resolution} ({selected.bandwidth} bps)")
        return make_absolute(selected.url, base_url), kind, selected

    logger.debug("[EXTRACT] Media playlist detected")
    reference = find_media_reference(content)
    if reference is None:
        raise ParseError("No segments found")
    url = make_absolute(reference, base_url)
    logger.debug(f"[EXTRACT] Found URL: {url[:50]}...")
    return url, kind, None


class HLSResolver:
    """
    Resolves channel playlist URLs to concrete media URLs.

    Successful resolutions are cached per playlist URL. Failures are never
    cached and degrade to the playlist URL itself, which most players can
    still open.

    Usage:
        resolver = HLSResolver(client, cache_manager.streams, config.resolver)
        resolved = await resolver.resolve(playlist_url)
        print(resolved.url)
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: MemoryCache,
        settings: Optional[ResolverConfig] = None,
    ):
        self._client = client
        self._cache = cache
        self.settings = settings or ResolverConfig()

    @property
    def headers(self) -> dict[str, str]:
        # Upstream rejects requests without a TV user agent and its referer.
        return {
            "User-Agent": self.settings.user_agent,
            "Accept": "*/*",
            "Referer": self.settings.referer,
        }

    async def resolve(self, playlist_url: str) -> ResolvedStream:
        """Resolve ``playlist_url``; never raises."""
        cached = await self._cache.get(playlist_url)
        if cached is not None:
            logger.info(f"[STREAM] Cache hit: {cached[:50]}...")
            return ResolvedStream(url=cached, playlist_url=playlist_url, from_cache=True)

        try:
            url, kind, variant = await self.extract(playlist_url)
        except ResolverError as e:
            logger.warning(f"[STREAM] No real URL found, using original ({e})")
            return ResolvedStream(
                url=playlist_url,
                playlist_url=playlist_url,
                degraded=True,
                reason=str(e),
            )
        except Exception as e:
            logger.exception(f"[STREAM] Unexpected error resolving {playlist_url}")
            return ResolvedStream(
                url=playlist_url,
                playlist_url=playlist_url,
                degraded=True,
                reason=str(e),
            )

        logger.info(f"[STREAM] Real URL: {url[:60]}...")
        await self._cache.set(playlist_url, url)
        return ResolvedStream(url=url, playlist_url=playlist_url, kind=kind, variant=variant)

    async def extract(self, playlist_url: str) -> tuple[str, PlaylistKind, Optional[Variant]]:
        """
        Fetch and parse ``playlist_url`` without touching the cache.

        Raises:
            ResolverError: On fetch failure or unusable manifest content
        """
        logger.info(f"[STREAM] Fetching: {playlist_url}")
        try:
            content = await fetch_text(
                self._client,
                playlist_url,
                headers=self.headers,
                timeout=self.settings.timeout,
            )
        except FetchError as e:
            raise ResolverError(f"Playlist fetch failed: {e}", url=playlist_url, original_error=e) from e

        logger.debug(f"[STREAM] Playlist fetched ({len(content)} bytes)")

        try:
            return extract_stream_url(content, playlist_url)
        except ParseError as e:
            raise ResolverError(str(e), url=playlist_url, original_error=e) from e

    async def invalidate(self, playlist_url: str) -> bool:
        """Forget a cached resolution."""
        return await self._cache.delete(playlist_url)
