"""
Application entry point

Assembles the long-running server: one process-wide image cache shared
by all requests, plus the video parse relay.

Run:
    python -m server.main
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

import image_proxy
import video_parser
from image_proxy import config as proxy_config
from image_proxy import ImageFetcher, ImageMemoryCache, ImageProxyRelay
from video_parser import VideoParseClient

from .config import APP_HOST, APP_PORT
from .logging_setup import setup_logging

logger = logging.getLogger(__name__)


def create_app(
    relay: Optional[ImageProxyRelay] = None,
    parser: Optional[VideoParseClient] = None,
) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        relay: Image proxy relay; a fresh one with configured limits by default
        parser: Video parse client; the configured API by default
    """
    setup_logging()

    if relay is None:
        cache = ImageMemoryCache(
            max_entries=proxy_config.MAX_CACHE_ENTRIES,
            ttl_seconds=proxy_config.CACHE_TTL_SECONDS,
        )
        relay = ImageProxyRelay(cache=cache, fetcher=ImageFetcher())
    if parser is None:
        parser = VideoParseClient()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"[Server] Image cache: {relay.cache.max_entries} entries, "
            f"TTL {int(relay.cache.ttl_seconds)}s"
        )
        yield
        await relay.fetcher.aclose()
        await parser.aclose()
        logger.info("[Server] HTTP clients closed")

    app = FastAPI(
        title="Video Playlist Backend",
        description="Image proxy cache and video parse relay for the playlist player.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.relay = relay
    app.state.parser = parser

    app.include_router(image_proxy.create_router(relay))
    app.include_router(video_parser.create_router(parser))
    return app


def main() -> None:
    uvicorn.run(create_app(), host=APP_HOST, port=APP_PORT, log_config=None)


if __name__ == "__main__":
    main()
