"""
Unit tests for channel id encoding.
"""

import base64

import pytest

from freelivtv.addon.ids import decode_id, encode_id, make_channel_id, parse_channel_id
from freelivtv.errors import DecodeError


@pytest.mark.unit
class TestTokenCodec:
    """Tests for encode_id / decode_id."""

    @pytest.mark.parametrize("url", [
        "http://up/stream/play.m3u8",
        "http://a.test/x?y=1&z=2",
        "a",
        "ab",
        "abc",
        "???>>>",
        "தமிழ் தொலைக்காட்சி",
        "",
    ])
    def test_round_trip(self, url):
        """Decoding an encoded string gives the original back."""
        assert decode_id(encode_id(url)) == url

    def test_token_is_url_safe_and_unpadded(self):
        """Tokens never contain '+', '/' or '='."""
        url = "???>>>"
        standard = base64.b64encode(url.encode()).decode()
        assert "+" in standard and "/" in standard

        token = encode_id(url)

        assert "+" not in token
        assert "/" not in token
        assert "=" not in token

    def test_matches_standard_alphabet_substitution(self):
        """Token is standard base64 with -/_ substitution and padding stripped."""
        url = "http://up/stream/play.m3u8"
        expected = base64.b64encode(url.encode()).decode().replace("+", "-").replace("/", "_").rstrip("=")
        assert encode_id(url) == expected

    @pytest.mark.parametrize("token", ["!!!!", "a", "abc$", "_w"])
    def test_invalid_tokens_raise(self, token):
        """Malformed or non-UTF-8 tokens raise DecodeError."""
        with pytest.raises(DecodeError):
            decode_id(token)


@pytest.mark.unit
class TestChannelIds:
    """Tests for prefixed channel ids."""

    def test_make_channel_id(self):
        url = "http://up/stream/play.m3u8"
        assert make_channel_id("tamil", url) == f"tamil:{encode_id(url)}"

    def test_parse_channel_id(self):
        url = "http://up/stream/play.m3u8"
        assert parse_channel_id("tamil", make_channel_id("tamil", url)) == url

    def test_wrong_prefix(self):
        with pytest.raises(DecodeError):
            parse_channel_id("tamil", f"other:{encode_id('http://x/')}")

    def test_empty_token(self):
        with pytest.raises(DecodeError):
            parse_channel_id("tamil", "tamil:")
