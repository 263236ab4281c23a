"""
FREE LIV TV Caching Layer

Bounded TTL/LRU caching for:
- The channel registry snapshot
- Resolved stream URLs
- Rendered channel metadata
"""

from freelivtv.cache.base import CacheConfig, CacheStats
from freelivtv.cache.memory import MemoryCache
from freelivtv.cache.manager import CacheManager

__all__ = [
    "CacheConfig",
    "CacheStats",
    "MemoryCache",
    "CacheManager",
]
