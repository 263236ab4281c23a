"""Background tasks."""

from freelivtv.tasks.keepalive import KeepAlive, PingStats, resolve_target

__all__ = ["KeepAlive", "PingStats", "resolve_target"]
