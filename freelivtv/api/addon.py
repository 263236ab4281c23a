"""Addon protocol routes: manifest, catalogs, metas and streams"""

import logging
from typing import Any
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request

from freelivtv import __version__
from freelivtv.addon.service import AddonService, parse_extra

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Addon"])


def get_addon_service(request: Request) -> AddonService:
    return request.app.state.addon_service


def _raw_extra(request: Request, extra: str) -> str:
    """The extra segment as sent, before the router percent-decoded it."""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        segment = raw_path.decode("latin-1").split("?", 1)[0].rsplit("/", 1)[-1]
        if segment.endswith(".json"):
            return segment[: -len(".json")]
    return quote(extra, safe="=&")


def _base_url(request: Request) -> str:
    public_url = request.app.state.config.server.public_url
    return (public_url or str(request.base_url)).rstrip("/")


@router.get("/")
async def landing(request: Request) -> dict[str, Any]:
    """Addon identity and install links."""
    settings = request.app.state.config.addon
    base_url = _base_url(request)
    host = base_url.split("://", 1)[-1]
    return {
        "name": settings.name,
        "version": __version__,
        "description": settings.description,
        "manifest": f"{base_url}/manifest.json",
        "install": f"stremio://{host}/manifest.json",
    }


@router.get("/manifest.json")
async def manifest(service: AddonService = Depends(get_addon_service)) -> dict[str, Any]:
    return service.manifest()


@router.get("/catalog/{content_type}/{catalog_id}.json")
async def catalog(
    content_type: str,
    catalog_id: str,
    service: AddonService = Depends(get_addon_service),
) -> dict[str, Any]:
    return await service.catalog(content_type, catalog_id)


@router.get("/catalog/{content_type}/{catalog_id}/{extra}.json")
async def catalog_with_extra(
    request: Request,
    content_type: str,
    catalog_id: str,
    extra: str,
    service: AddonService = Depends(get_addon_service),
) -> dict[str, Any]:
    return await service.catalog(content_type, catalog_id, parse_extra(_raw_extra(request, extra)))


@router.get("/meta/{content_type}/{channel_id}.json")
async def meta(
    content_type: str,
    channel_id: str,
    service: AddonService = Depends(get_addon_service),
) -> dict[str, Any]:
    return await service.meta(content_type, channel_id)


@router.get("/stream/{content_type}/{channel_id}.json")
async def stream(
    content_type: str,
    channel_id: str,
    service: AddonService = Depends(get_addon_service),
) -> dict[str, Any]:
    return await service.stream(content_type, channel_id)
