"""
FREE LIV TV Main Application

FastAPI application serving the addon protocol and operational endpoints.
"""

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Callable, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from freelivtv import __version__
from freelivtv.addon.service import AddonService
from freelivtv.cache.manager import CacheManager
from freelivtv.config import FreeLivTVConfig, get_config, load_config
from freelivtv.importers.channel_registry import ChannelRegistry
from freelivtv.middleware.performance import (
    RateLimitConfig,
    RateLimitMiddleware,
    TimingMiddleware,
)
from freelivtv.streaming.resolvers.hls import HLSResolver
from freelivtv.tasks.keepalive import KeepAlive
from freelivtv.utils.logging_setup import log_exception

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Startup:
    - Create the shared HTTP client (unless one was injected)
    - Build caches, registry, resolver and lookup service
    - Start cache sweeps and the keep-alive pinger
    """
    config: FreeLivTVConfig = app.state.config
    logger.info(f"Starting FREE LIV TV v{__version__}")

    client: Optional[httpx.AsyncClient] = app.state.http_client
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(follow_redirects=True)
        app.state.http_client = client

    cache_manager = CacheManager(config.cache, clock=app.state.clock)
    registry = ChannelRegistry(client, cache_manager.channels, config.playlist)
    resolver = HLSResolver(client, cache_manager.streams, config.resolver)
    keepalive = KeepAlive(client, config.keepalive, config.server.public_url)

    app.state.cache_manager = cache_manager
    app.state.registry = registry
    app.state.resolver = resolver
    app.state.addon_service = AddonService(registry, resolver, cache_manager.metas, config.addon)
    app.state.keepalive = keepalive
    app.state.started_at = time.monotonic()

    await cache_manager.start()
    await keepalive.start()

    logger.info(f"Playlist: {config.playlist.url}")
    logger.info(f"Port: {config.server.port}")

    yield

    # Shutdown
    logger.info("Shutting down FREE LIV TV")

    await keepalive.stop()
    await cache_manager.stop()

    if owns_client:
        await client.aclose()
        app.state.http_client = None

    logger.info("FREE LIV TV shutdown complete")


def create_app(
    config: Optional[FreeLivTVConfig] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    clock: Callable[[], float] = time.monotonic,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Configuration to use; defaults to the loaded global configuration.
        http_client: Shared upstream client. Created on startup when omitted.
        clock: Monotonic clock for cache expiry.

    Returns:
        Configured FastAPI application instance.
    """
    config = config or get_config()

    app = FastAPI(
        title="FREE LIV TV",
        description="Live TV catalog and stream gateway",
        version=__version__,
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.state.config = config
    app.state.http_client = http_client
    app.state.clock = clock

    # Media-center clients fetch the manifest cross-origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(TimingMiddleware)
    if config.rate_limit.enabled:
        app.add_middleware(
            RateLimitMiddleware,
            config=RateLimitConfig(
                requests_per_minute=config.rate_limit.requests_per_minute,
                burst_size=config.rate_limit.burst_size,
                enabled=True,
            ),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        log_exception(logger, exc, f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    from freelivtv.api import addon_router, api_router, health_router

    app.include_router(health_router)
    app.include_router(api_router)
    app.include_router(addon_router)

    return app


def main() -> None:
    """
    Main entry point for running the server.

    Called via the ``freelivtv`` console script or ``python -m freelivtv``.
    """
    import uvicorn

    from freelivtv.utils.logging_setup import parse_size, setup_logging

    config = load_config()

    setup_logging(
        log_level=config.logging.level,
        log_file_name=config.logging.file,
        log_to_console=True,
        log_to_file=True,
        max_bytes=parse_size(config.logging.max_size),
        backup_count=config.logging.backup_count,
        log_format=config.logging.format,
    )

    logger.info(f"Starting FREE LIV TV v{__version__}")

    uvicorn.run(
        create_app(config),
        host=config.server.host,
        port=config.server.port,
        log_level=config.server.log_level.lower(),
    )


if __name__ == "__main__":
    main()
