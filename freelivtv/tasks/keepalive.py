"""
Keep-alive pinger.

Free hosting tiers put idle services to sleep. When enabled, this task
requests the service's own health endpoint on a fixed interval.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

import httpx

from freelivtv.config import KeepAliveConfig

logger = logging.getLogger(__name__)

LOCAL_HOSTS = ("localhost", "127.0.0.1", "0.0.0.0")


@dataclass
class PingStats:
    """Outcome counters for the pinger."""

    pings: int = 0
    failures: int = 0
    consecutive_errors: int = 0
    last_ping: Optional[datetime] = None
    last_status: Optional[int] = None
    last_error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "pings": self.pings,
            "failures": self.failures,
            "consecutive_errors": self.consecutive_errors,
            "last_ping": self.last_ping.isoformat() if self.last_ping else None,
            "last_status": self.last_status,
            "last_error": self.last_error,
        }


def resolve_target(settings: KeepAliveConfig, public_url: Optional[str]) -> Optional[str]:
    """
    URL to ping, or None when pinging makes no sense.

    An explicit keep-alive URL wins; otherwise the public URL's health
    endpoint is used. Local addresses are never pinged.
    """
    target = settings.url
    if not target and public_url:
        target = f"{public_url.rstrip('/')}/health"
    if not target:
        return None
    if any(host in target for host in LOCAL_HOSTS):
        return None
    return target


class KeepAlive:
    """
    Periodic self-ping.

    Usage:
        keepalive = KeepAlive(client, config.keepalive, config.server.public_url)
        await keepalive.start()
        ...
        await keepalive.stop()
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: Optional[KeepAliveConfig] = None,
        public_url: Optional[str] = None,
    ):
        self._client = client
        self.settings = settings or KeepAliveConfig()
        self.target = resolve_target(self.settings, public_url)
        self.stats = PingStats()
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> bool:
        """Start pinging; returns False when disabled or no usable target exists."""
        if not self.settings.enabled:
            logger.info("[KEEPALIVE] Disabled")
            return False
        if self.target is None:
            logger.info("[KEEPALIVE] No public URL configured, skipping")
            return False
        if self.is_running:
            return True

        self._task = asyncio.create_task(self._run())
        logger.info(f"[KEEPALIVE] Pinging {self.target} every {self.settings.interval}s")
        return True

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("[KEEPALIVE] Stopped")

    async def _run(self) -> None:
        await asyncio.sleep(self.settings.initial_delay)
        while True:
            try:
                await self.ping()
            except Exception as e:
                logger.error(f"[KEEPALIVE] Ping loop error: {e}")
            await asyncio.sleep(self.settings.interval)

    async def ping(self) -> bool:
        """Ping the target once; True on a 2xx response."""
        if self.target is None:
            return False

        self.stats.pings += 1
        self.stats.last_ping = datetime.now()

        try:
            response = await self._client.get(
                self.target,
                timeout=httpx.Timeout(self.settings.timeout),
            )
        except httpx.HTTPError as e:
            self.stats.failures += 1
            self.stats.consecutive_errors += 1
            self.stats.last_status = None
            self.stats.last_error = str(e) or type(e).__name__
            logger.warning(f"[KEEPALIVE] Ping failed: {self.stats.last_error}")
            return False

        self.stats.last_status = response.status_code
        if response.is_success:
            self.stats.last_error = None
            self.stats.consecutive_errors = 0
            logger.debug(f"[KEEPALIVE] Ping OK ({response.status_code})")
            return True

        self.stats.failures += 1
        self.stats.consecutive_errors += 1
        self.stats.last_error = f"HTTP {response.status_code}"
        logger.warning(f"[KEEPALIVE] Ping returned {response.status_code}")
        return False

    def get_stats(self) -> dict[str, Any]:
        return {
            "enabled": self.settings.enabled,
            "running": self.is_running,
            "target": self.target,
            "interval": self.settings.interval,
            **self.stats.to_dict(),
        }
