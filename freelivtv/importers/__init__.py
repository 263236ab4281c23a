"""
Playlist importing: M3U parsing, channel classification and the channel registry.
"""

from freelivtv.importers.channel_registry import (
    ChannelRecord,
    ChannelRegistry,
    ChannelSnapshot,
    build_channels,
)
from freelivtv.importers.classification import (
    Category,
    Quality,
    classify_category,
    classify_quality,
    clean_channel_name,
    get_category_icon,
    is_included,
)
from freelivtv.importers.m3u_parser import M3UEntry, M3UParser

__all__ = [
    "Category",
    "ChannelRecord",
    "ChannelRegistry",
    "ChannelSnapshot",
    "M3UEntry",
    "M3UParser",
    "Quality",
    "build_channels",
    "classify_category",
    "classify_quality",
    "clean_channel_name",
    "get_category_icon",
    "is_included",
]
