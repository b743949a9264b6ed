"""
Stateless Image Proxy Handler

Per-invocation adapter for serverless hosts. Nothing survives between
invocations, so every request builds its own cache and fetcher: the
cache never produces a hit here (degraded mode, always `X-Cache: MISS`).
Use the long-running routes in `routes_fastapi` when caching matters.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import Response

from . import config
from .fetcher import ImageFetcher
from .memory_cache import ImageMemoryCache
from .relay import PROXY_PATH, ImageProxyRelay
from .routes_fastapi import to_fastapi_response

logger = logging.getLogger(__name__)


def build_relay() -> ImageProxyRelay:
    """Fresh relay with an empty cache and its own HTTP client."""
    cache = ImageMemoryCache(
        max_entries=config.MAX_CACHE_ENTRIES,
        ttl_seconds=config.CACHE_TTL_SECONDS,
    )
    return ImageProxyRelay(cache=cache, fetcher=ImageFetcher())


async def handler(request: Request) -> Response:
    """Serve one image proxy invocation."""
    relay = build_relay()
    try:
        result = await relay.handle(request.method, request.query_params.get("url"))
    finally:
        await relay.fetcher.aclose()
    return to_fastapi_response(result)


app = FastAPI(title="Image Proxy (stateless)")
app.add_api_route(PROXY_PATH, handler, methods=["GET", "OPTIONS"])
