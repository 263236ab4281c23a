"""
Addon protocol layer.

Channel ids, manifest, protocol documents and the lookup service behind the
catalog, meta and stream routes.
"""

from freelivtv.addon.ids import decode_id, encode_id, make_channel_id, parse_channel_id
from freelivtv.addon.manifest import CATALOGS, build_manifest, catalog_category
from freelivtv.addon.service import AddonService, filter_channels, parse_extra, parse_skip

__all__ = [
    "AddonService",
    "CATALOGS",
    "build_manifest",
    "catalog_category",
    "decode_id",
    "encode_id",
    "filter_channels",
    "make_channel_id",
    "parse_channel_id",
    "parse_extra",
    "parse_skip",
]
