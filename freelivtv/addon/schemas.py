"""Pydantic models for the addon protocol documents"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AddonModel(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# Manifest

class CatalogExtra(AddonModel):
    name: str
    options: Optional[list[str]] = None
    is_required: Optional[bool] = None


class CatalogDefinition(AddonModel):
    type: str = "tv"
    id: str
    name: str
    extra: Optional[list[CatalogExtra]] = None


class ManifestBehaviorHints(AddonModel):
    adult: bool = False
    # to_camel would emit "p2P"
    p2p: bool = Field(default=False, alias="p2p")


class Manifest(AddonModel):
    id: str
    version: str
    name: str
    description: str
    logo: Optional[str] = None
    types: list[str] = Field(default_factory=lambda: ["tv"])
    catalogs: list[CatalogDefinition] = Field(default_factory=list)
    resources: list[str] = Field(default_factory=lambda: ["catalog", "meta", "stream"])
    id_prefixes: list[str] = Field(default_factory=list)
    behavior_hints: ManifestBehaviorHints = Field(default_factory=ManifestBehaviorHints)


# Catalog / meta

class MetaBehaviorHints(AddonModel):
    default_video_id: str
    has_scheduled_videos: bool = False


class Video(AddonModel):
    id: str
    title: str
    released: str
    available: bool = True


class MetaPreview(AddonModel):
    id: str
    type: str = "tv"
    name: str
    poster: Optional[str] = None
    poster_shape: str = "square"
    background: Optional[str] = None
    description: Optional[str] = None
    genres: list[str] = Field(default_factory=list)
    release_info: str = "LIVE"
    runtime: str = "LIVE"
    behavior_hints: Optional[MetaBehaviorHints] = None


class MetaDetail(MetaPreview):
    videos: list[Video] = Field(default_factory=list)


# Streams

class StreamBehaviorHints(AddonModel):
    not_web_ready: bool = True


class Stream(AddonModel):
    url: str
    title: str
    name: str
    behavior_hints: StreamBehaviorHints = Field(default_factory=StreamBehaviorHints)
