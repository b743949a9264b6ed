"""
Image proxy test configuration

Shared pytest fixtures:
- a controllable clock for TTL tests
- an upstream simulator built on httpx.MockTransport
- relay / app factories wired to the simulator

Tests never touch the network.
"""

import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

import httpx
import pytest

# Add backend directory to the import path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from image_proxy import ImageFetcher, ImageMemoryCache, ImageProxyRelay


# ============================================
# Clock
# ============================================

class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


# ============================================
# Upstream simulator
# ============================================

FALLBACK_HOST = "images.weserv.nl"


class Upstream:
    """
    Records outbound requests and answers them from per-host rules.

    Usage:
        upstream.direct = lambda req: httpx.Response(200, content=b"img")
        upstream.fallback = lambda req: httpx.Response(502)
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.direct: Callable[[httpx.Request], httpx.Response] = (
            lambda req: httpx.Response(200, content=b"DIRECT", headers={"content-type": "image/png"})
        )
        self.fallback: Callable[[httpx.Request], httpx.Response] = (
            lambda req: httpx.Response(200, content=b"FALLBACK", headers={"content-type": "image/webp"})
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == FALLBACK_HOST:
            return self.fallback(request)
        return self.direct(request)

    @property
    def direct_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host != FALLBACK_HOST]

    @property
    def fallback_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host == FALLBACK_HOST]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler), follow_redirects=True)


@pytest.fixture
def upstream():
    return Upstream()


def raise_connect_error(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def raise_timeout(request: httpx.Request) -> httpx.Response:
    raise httpx.ReadTimeout("timed out", request=request)


# ============================================
# Relay
# ============================================

@pytest.fixture
def make_fetcher(upstream):
    def _make(**kwargs) -> ImageFetcher:
        return ImageFetcher(
            fallback_url=f"https://{FALLBACK_HOST}/",
            client=upstream.client(),
            **kwargs,
        )
    return _make


@pytest.fixture
def cache(clock):
    return ImageMemoryCache(max_entries=100, ttl_seconds=1800, clock=clock)


@pytest.fixture
def relay(cache, make_fetcher):
    return ImageProxyRelay(cache=cache, fetcher=make_fetcher())


# ============================================
# Parse API simulator
# ============================================

def parse_api_payload(
    video_url: Optional[str] = "https://upos.example.com/v.mp4",
    code: int = 200,
    **overrides,
) -> Dict:
    """A parse API body with one candidate stream."""
    payload = {
        "code": code,
        "title": "Top-level title",
        "imgurl": "http://i0.hdslb.com/bfs/archive/cover.jpg",
        "user": {"name": "Uploader"},
        "data": [
            {
                "video_url": video_url,
                "title": "Part 1",
                "duration": 212,
                "durationFormat": "03:32",
            }
        ],
    }
    payload.update(overrides)
    return payload
