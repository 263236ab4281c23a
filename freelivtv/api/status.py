"""Operational endpoints: status, cache statistics and categories"""

import logging
import time
from typing import Any

from fastapi import APIRouter, Request

from freelivtv import __version__

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Status"])


@router.get("/status")
async def get_status(request: Request) -> dict[str, Any]:
    """Service status including the current channel snapshot and caches."""
    state = request.app.state
    snapshot = await state.registry.load_snapshot()

    return {
        "status": "degraded" if snapshot.degraded else "ok",
        "version": __version__,
        "uptime_seconds": round(time.monotonic() - state.started_at, 1),
        "channels": {
            "count": len(snapshot.channels),
            "source": snapshot.source,
            "error": snapshot.error,
        },
        "categories": await state.registry.get_categories(),
        "playlist_url": state.config.playlist.url,
        "cache": state.cache_manager.get_stats(),
        "keepalive": state.keepalive.get_stats(),
    }


@router.get("/cache/stats")
async def get_cache_stats(request: Request) -> dict[str, Any]:
    return request.app.state.cache_manager.get_stats()


@router.post("/cache/clear")
async def clear_cache(request: Request) -> dict[str, Any]:
    """Drop every cached channel list, stream and meta."""
    cleared = await request.app.state.cache_manager.clear()
    request.app.state.registry.clear()
    logger.info("[CACHE] Cleared via API")
    return {"success": True, "cleared": cleared}


@router.get("/categories")
async def get_categories(request: Request) -> dict[str, Any]:
    categories = await request.app.state.registry.get_categories()
    return {"categories": categories}
