"""API routes for FREE LIV TV"""

from fastapi import APIRouter

from .addon import router as addon_router
from .health import router as health_router
from .status import router as status_router

# Operational endpoints live under /api
api_router = APIRouter(prefix="/api")
api_router.include_router(status_router)

__all__ = ["addon_router", "api_router", "health_router"]
