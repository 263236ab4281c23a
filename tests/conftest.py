"""
FREE LIV TV Test Configuration

Shared fixtures and configuration for all tests.
"""

import os
from typing import Generator, Optional, Union

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

import freelivtv.config as config_module
from freelivtv.cache.manager import CacheManager
from freelivtv.config import (
    CacheSettings,
    FreeLivTVConfig,
    PlaylistConfig,
)
from freelivtv.main import create_app

PLAYLIST_URL = "http://playlist.test/tamil.m3u"


# ============ Clock ============


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ============ Upstream Fixtures ============


class Upstream:
    """
    Routes for an ``httpx.MockTransport``.

    Each URL maps to ``(status, body)`` or to an exception to raise. Unknown
    URLs answer 404. Every request is recorded.
    """

    def __init__(self):
        self.routes: dict[str, Union[tuple[int, str], Exception]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, url: str, body: str = "", status: int = 200) -> None:
        self.routes[url] = (status, body)

    def fail(self, url: str, error: Optional[Exception] = None) -> None:
        self.routes[url] = error or httpx.ConnectError("connection refused")

    def calls(self, url: str) -> int:
        return sum(1 for request in self.requests if str(request.url) == url)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(str(request.url))
        if route is None:
            return httpx.Response(404, text="not found")
        if isinstance(route, Exception):
            raise route
        status, body = route
        return httpx.Response(status, text=body)


@pytest.fixture
def upstream() -> Upstream:
    return Upstream()


@pytest.fixture
def http_client(upstream: Upstream) -> httpx.AsyncClient:
    """Async client whose requests are answered by ``upstream``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))


@pytest.fixture
def cache_manager(clock: FakeClock) -> CacheManager:
    return CacheManager(CacheSettings(), clock=clock)


# ============ Sample Data Fixtures ============


SAMPLE_PLAYLIST = """#EXTM3U
#EXTINF:-1 tvg-id="sun.tv" tvg-name="TM: Sun TV HD" tvg-logo="http://logos.test/sun.png" group-title="FREE LIV TV || TAMIL",TM: Sun TV HD
http://streams.test/live/sun/index.m3u8
#EXTINF:-1 tvg-name="TM: Sun News" group-title="FREE LIV TV || TAMIL NEWS",TM: Sun News
http://streams.test/live/sunnews/index.m3u8
#EXTINF:-1 tvg-name="CRIC || Star Sports 1 ᴴᴰ" group-title="FREE LIV TV || CRICKET",CRIC || Star Sports 1 ᴴᴰ
http://streams.test/live/star1/index.m3u8
#EXTINF:-1 tvg-name="TM: KTV Movies FHD" group-title="FREE LIV TV || TAMIL",TM: KTV Movies FHD
http://streams.test/live/ktv/index.m3u8
#EXTINF:-1 tvg-name="US: CNN" group-title="USA NEWS",US: CNN
http://streams.test/live/cnn/index.m3u8
#EXTINF:-1 tvg-name="TM: Isai Music" group-title="FREE LIV TV || TAMIL",TM: Isai Music
http://streams.test/live/isai/index.m3u8
"""

MASTER_MANIFEST = """#EXTM3U
#EXT-X-STREAM-INF:BANDWIDTH=100000,RESOLUTION=426x240
low/index.m3u8
#EXT-X-STREAM-INF:BANDWIDTH=500000,RESOLUTION=1280x720
high/index.m3u8
#EXT-X-STREAM-INF:BANDWIDTH=300000,RESOLUTION=854x480
mid/index.m3u8
"""

MEDIA_MANIFEST = """#EXTM3U
#EXT-X-VERSION:3
#EXT-X-TARGETDURATION:6

#EXTINF:6.0,
segment1.ts
#EXTINF:6.0,
segment2.ts
"""


@pytest.fixture
def playlist_url() -> str:
    return PLAYLIST_URL


@pytest.fixture
def sample_playlist() -> str:
    return SAMPLE_PLAYLIST


@pytest.fixture
def master_manifest() -> str:
    return MASTER_MANIFEST


@pytest.fixture
def media_manifest() -> str:
    return MEDIA_MANIFEST


# ============ FastAPI Test Client Fixtures ============


@pytest.fixture
def app_config() -> FreeLivTVConfig:
    return FreeLivTVConfig(playlist=PlaylistConfig(url=PLAYLIST_URL))


@pytest.fixture
def app(
    app_config: FreeLivTVConfig,
    http_client: httpx.AsyncClient,
    clock: FakeClock,
) -> FastAPI:
    """Application wired to the mocked upstream and fake clock."""
    return create_app(app_config, http_client=http_client, clock=clock)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Synchronous test client with the lifespan running."""
    with TestClient(app) as client:
        yield client


# ============ Environment Fixtures ============


@pytest.fixture(autouse=True)
def clean_environment():
    """Clean environment variables and the loaded configuration for each test."""
    original_env = os.environ.copy()

    for key in list(os.environ.keys()):
        if key.startswith("FREELIVTV_"):
            del os.environ[key]
    config_module._config = None

    yield

    os.environ.clear()
    os.environ.update(original_env)
    config_module._config = None


# ============ Markers ============


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")

