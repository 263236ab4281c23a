"""Utility helpers for FREE LIV TV."""

from freelivtv.utils.http import fetch_text
from freelivtv.utils.logging_setup import (
    log_exception,
    parse_size,
    setup_logging,
)

__all__ = [
    "fetch_text",
    "log_exception",
    "parse_size",
    "setup_logging",
]
