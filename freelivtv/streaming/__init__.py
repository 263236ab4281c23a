"""Streaming: playlist URL resolution for live channels."""

from freelivtv.streaming.resolvers import HLSResolver, ResolvedStream, ResolverError

__all__ = [
    "HLSResolver",
    "ResolvedStream",
    "ResolverError",
]
