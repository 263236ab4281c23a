"""
Request middleware.

Provides:
- Request timing and logging
- Per-client rate limiting
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


# ============================================================================
# Timing Middleware
# ============================================================================

class TimingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request with its duration and adds an ``X-Response-Time`` header.

    Requests slower than ``slow_request_threshold_ms`` are logged as warnings.
    """

    def __init__(
        self,
        app: ASGIApp,
        slow_request_threshold_ms: float = 1000,
        enable_header: bool = True,
    ):
        super().__init__(app)
        self.slow_request_threshold_ms = slow_request_threshold_ms
        self.enable_header = enable_header

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000

        if duration_ms > self.slow_request_threshold_ms:
            logger.warning(
                f"Slow request: {request.method} {request.url.path} "
                f"took {duration_ms:.2f}ms"
            )
        else:
            logger.info(
                f"{request.method} {request.url.path} "
                f"{response.status_code} {duration_ms:.0f}ms"
            )

        if self.enable_header:
            response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

        return response


# ============================================================================
# Rate Limiting Middleware
# ============================================================================

@dataclass
class RateLimitConfig:
    """Rate limit configuration."""
    requests_per_minute: int = 120
    burst_size: int = 30
    enabled: bool = False


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Token bucket rate limiting, one bucket per client address.

    Over-limit requests get a 429 with ``Retry-After``.
    """

    def __init__(
        self,
        app: ASGIApp,
        config: Optional[RateLimitConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(app)
        self.config = config or RateLimitConfig()
        self._clock = clock

        # client id -> {"tokens": float, "last_update": float}
        self._buckets: Dict[str, Dict[str, float]] = {}

        # Tokens refill rate (per second)
        self._refill_rate = self.config.requests_per_minute / 60.0

        # A bucket idle this long has refilled completely and can be dropped
        self._idle_after = self.config.burst_size / self._refill_rate
        self._last_prune = clock()

    def _get_client_id(self, request: Request) -> str:
        # Use X-Forwarded-For if behind proxy
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    def _prune(self, now: float) -> int:
        """Drop buckets idle long enough to be full again. Returns count removed."""
        if now - self._last_prune < self._idle_after:
            return 0
        self._last_prune = now

        idle = [
            client_id for client_id, bucket in self._buckets.items()
            if now - bucket["last_update"] >= self._idle_after
        ]
        for client_id in idle:
            del self._buckets[client_id]
        return len(idle)

    def _get_bucket(self, client_id: str) -> Dict[str, float]:
        """Get or create the client's bucket and refill it."""
        now = self._clock()
        self._prune(now)

        bucket = self._buckets.setdefault(
            client_id,
            {"tokens": float(self.config.burst_size), "last_update": now},
        )

        elapsed = now - bucket["last_update"]
        bucket["tokens"] = min(
            float(self.config.burst_size),
            bucket["tokens"] + elapsed * self._refill_rate,
        )
        bucket["last_update"] = now

        return bucket

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not self.config.enabled:
            return await call_next(request)

        client_id = self._get_client_id(request)
        bucket = self._get_bucket(client_id)

        if bucket["tokens"] >= 1:
            bucket["tokens"] -= 1
            response = await call_next(request)
            response.headers["X-RateLimit-Limit"] = str(self.config.requests_per_minute)
            response.headers["X-RateLimit-Remaining"] = str(int(bucket["tokens"]))
            return response

        retry_after = int((1 - bucket["tokens"]) / self._refill_rate) + 1
        logger.warning(f"Rate limit exceeded for {client_id}")

        return Response(
            content=json.dumps({"detail": "Rate limit exceeded"}),
            status_code=429,
            headers={
                "Retry-After": str(retry_after),
                "X-RateLimit-Limit": str(self.config.requests_per_minute),
                "X-RateLimit-Remaining": "0",
            },
            media_type="application/json",
        )
