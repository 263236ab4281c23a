"""
FREE LIV TV - Live TV catalog and stream gateway

Turns a remote M3U playlist into a stable channel catalog:
- M3U ingestion with inclusion, category and quality heuristics
- HLS manifest resolution to a concrete, playable media URL
- Bounded TTL/LRU caching of channels, streams and metadata
- Catalog / meta / stream lookups for media-center addons
"""

__version__ = "2.1.0"
__author__ = "FREE LIV TV Contributors"
__license__ = "MIT"

from freelivtv.config import get_config, load_config

__all__ = [
    "__version__",
    "get_config",
    "load_config",
]
