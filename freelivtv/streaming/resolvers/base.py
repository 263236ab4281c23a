"""
Resolver result types and errors.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from freelivtv.errors import FreeLivTVError


class PlaylistKind(str, Enum):
    """HLS manifest kinds."""

    MASTER = "master"
    MEDIA = "media"


class ResolverError(FreeLivTVError):
    """Error during stream URL resolution."""

    def __init__(
        self,
        message: str,
        url: str = "",
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.url = url
        self.original_error = original_error


@dataclass(frozen=True)
class Variant:
    """One bitrate/resolution option read from a master playlist."""

    url: str
    bandwidth: int = 0
    resolution: str = "unknown"


@dataclass(frozen=True)
class ResolvedStream:
    """
    Outcome of resolving a playlist URL.

    Attributes:
        url: URL to hand to the player
        playlist_url: The URL that was resolved
        degraded: True when resolution failed and ``url`` is the playlist itself
        from_cache: True when served from the stream cache
        kind: Manifest kind the URL was extracted from
        variant: Chosen variant for master playlists
        reason: Why resolution degraded
    """

    url: str
    playlist_url: str
    degraded: bool = False
    from_cache: bool = False
    kind: Optional[PlaylistKind] = None
    variant: Optional[Variant] = None
    reason: Optional[str] = None
