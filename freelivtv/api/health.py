"""Health check endpoint for FREE LIV TV"""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter

from freelivtv import __version__

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict[str, Any]:
    """Liveness probe; does no upstream work."""
    return {
        "status": "healthy",
        "time": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
    }
