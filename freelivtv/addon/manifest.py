"""Addon manifest and catalog definitions"""

from typing import Optional

from freelivtv.addon.schemas import CatalogDefinition, CatalogExtra, Manifest
from freelivtv.config import AddonConfig
from freelivtv.importers.classification import Category

ALL_CATALOG = "all"

# catalog suffix -> (display name, category filter)
CATALOGS: dict[str, tuple[str, Optional[Category]]] = {
    ALL_CATALOG: ("📺 All Channels", None),
    "cricket": ("🏏 Cricket", Category.CRICKET),
    "movies": ("🎬 Movies", Category.MOVIES),
    "news": ("📰 News", Category.NEWS),
    "entertainment": ("📺 Entertainment", Category.ENTERTAINMENT),
    "music": ("🎵 Music", Category.MUSIC),
    "kids": ("👶 Kids", Category.KIDS),
    "devotional": ("🙏 Devotional", Category.DEVOTIONAL),
}


def catalog_id(prefix: str, suffix: str) -> str:
    return f"{prefix}-{suffix}"


def catalog_category(prefix: str, requested_id: str) -> Optional[Category]:
    """Category a catalog id restricts to; None for the all-channels or unknown catalogs."""
    head = f"{prefix}-"
    if not requested_id.startswith(head):
        return None
    entry = CATALOGS.get(requested_id[len(head):])
    return entry[1] if entry else None


def build_manifest(settings: AddonConfig) -> Manifest:
    catalogs = []
    for suffix, (name, _) in CATALOGS.items():
        extra = None
        if suffix == ALL_CATALOG:
            extra = [
                CatalogExtra(name="genre", options=[c.value for c in Category]),
                CatalogExtra(name="search"),
                CatalogExtra(name="skip"),
            ]
        catalogs.append(CatalogDefinition(
            id=catalog_id(settings.id_prefix, suffix),
            name=name,
            extra=extra,
        ))

    return Manifest(
        id=settings.id,
        version=settings.version,
        name=settings.name,
        description=settings.description,
        logo=settings.logo or None,
        catalogs=catalogs,
        id_prefixes=[f"{settings.id_prefix}:"],
    )
