"""
Error taxonomy for upstream fetches, manifest parsing and id decoding.

None of these reach the addon protocol boundary: the lookup layer converts
them into degraded responses (empty catalog, generic meta, original URL).
"""

from typing import Optional


class FreeLivTVError(Exception):
    """Base class for all gateway errors."""


class FetchError(FreeLivTVError):
    """Network failure, timeout or non-2xx status against an upstream URL."""

    def __init__(
        self,
        message: str,
        url: str = "",
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.original_error = original_error


class ParseError(FreeLivTVError):
    """Manifest content with no usable variant or segment reference."""


class DecodeError(FreeLivTVError):
    """Channel id that does not decode to a source URL."""
