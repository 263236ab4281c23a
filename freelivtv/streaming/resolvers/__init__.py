"""
Stream resolvers.

Resolve channel playlist URLs to concrete, currently playable media URLs.
"""

from freelivtv.streaming.resolvers.base import (
    PlaylistKind,
    ResolvedStream,
    ResolverError,
    Variant,
)
from freelivtv.streaming.resolvers.hls import HLSResolver, extract_stream_url

__all__ = [
    # Base
    "PlaylistKind",
    "ResolvedStream",
    "ResolverError",
    "Variant",
    # Resolvers
    "HLSResolver",
    "extract_stream_url",
]
