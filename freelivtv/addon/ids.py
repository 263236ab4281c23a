"""
Reversible channel ids.

A channel id is ``<prefix>:<token>`` where the token is the channel's source
URL in URL-safe base64 without padding. Ids persisted by clients stay valid
across restarts because the token depends only on the URL.
"""

import base64
import binascii

from freelivtv.errors import DecodeError


def encode_id(url: str) -> str:
    """Encode a URL into a URL-safe, padding-free token."""
    return base64.urlsafe_b64encode(url.encode("utf-8")).decode("ascii").rstrip("=")


def decode_id(token: str) -> str:
    """
    Decode a token produced by ``encode_id``.

    Raises:
        DecodeError: If the token is not valid base64 or not UTF-8
    """
    padded = token.replace("-", "+").replace("_", "/")
    padded += "=" * (-len(padded) % 4)
    try:
        return base64.b64decode(padded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise DecodeError(f"Invalid channel id token: {token[:32]!r}") from e


def make_channel_id(prefix: str, url: str) -> str:
    return f"{prefix}:{encode_id(url)}"


def parse_channel_id(prefix: str, channel_id: str) -> str:
    """
    Source URL of a prefixed channel id.

    Raises:
        DecodeError: If the prefix is missing or the token is invalid
    """
    head = f"{prefix}:"
    if not channel_id.startswith(head):
        raise DecodeError(f"Channel id without '{head}' prefix")
    token = channel_id[len(head):]
    if not token:
        raise DecodeError("Empty channel id token")
    return decode_id(token)
