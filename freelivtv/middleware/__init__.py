"""HTTP middleware."""

from freelivtv.middleware.performance import (
    RateLimitConfig,
    RateLimitMiddleware,
    TimingMiddleware,
)

__all__ = ["RateLimitConfig", "RateLimitMiddleware", "TimingMiddleware"]
