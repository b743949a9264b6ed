"""
Image Proxy Relay

The request/response core shared by every hosting adapter:

    RECEIVED -> VALIDATED -> CACHE_HIT | CACHE_MISS -> [RESOLVING] -> RESPONDED

It is framework-neutral: adapters pass in the method and the `url`
query value and translate the returned ProxyResponse for their host.
"""

import json
import logging
from typing import Dict, Optional
from urllib.parse import quote
from dataclasses import dataclass, field

from .errors import BadRequest, FetchFailure
from .fetcher import ImageFetcher
from .memory_cache import ImageMemoryCache

logger = logging.getLogger(__name__)

PROXY_PATH = "/api/image-proxy"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

JSON_MEDIA_TYPE = "application/json"


@dataclass
class ProxyResponse:
    """Response produced by the relay, independent of any web framework."""
    status_code: int
    body: bytes = b""
    media_type: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def json(cls, status_code: int, content: dict) -> "ProxyResponse":
        return cls(
            status_code=status_code,
            body=json.dumps(content, ensure_ascii=False).encode("utf-8"),
            media_type=JSON_MEDIA_TYPE,
            headers=dict(CORS_HEADERS),
        )


def proxied_image_url(url: str) -> str:
    """
    Build the relative proxy URL for an image.

    Example:
        proxied_image_url("http://i0.hdslb.com/a.jpg")
        -> "/api/image-proxy?url=http%3A%2F%2Fi0.hdslb.com%2Fa.jpg"
    """
    if not url:
        return ""
    return f"{PROXY_PATH}?url={quote(url, safe='')}"


class ImageProxyRelay:
    """
    Serves images from the cache, resolving and storing them on a miss.

    The cache is injected so a long-running server shares one instance
    across requests while tests (or a stateless host) use a fresh one.
    """

    def __init__(self, cache: ImageMemoryCache, fetcher: ImageFetcher):
        self.cache = cache
        self.fetcher = fetcher

    @property
    def cache_control(self) -> str:
        return f"public, max-age={int(self.cache.ttl_seconds)}"

    async def handle(self, method: str, url: Optional[str]) -> ProxyResponse:
        """
        Handle one proxy request.

        Args:
            method: HTTP method of the inbound request
            url: Value of the `url` query parameter, if any

        Returns:
            ProxyResponse. Never raises.
        """
        if method.upper() == "OPTIONS":
            return ProxyResponse(status_code=200, headers=dict(CORS_HEADERS))

        try:
            target = self._validate(url)
        except BadRequest as e:
            logger.info(f"[ImageProxy] Bad request: {e.message}")
            return ProxyResponse.json(400, {"error": e.message})

        try:
            return await self._serve(target)
        except FetchFailure as e:
            logger.error(f"[ImageProxy] Failed to fetch image: {e.message}")
            return self._failure(target, e.message)
        except Exception as e:
            logger.exception(f"[ImageProxy] Unexpected error for {target[:60]}...")
            return self._failure(target, str(e) or type(e).__name__)

    @staticmethod
    def _validate(url: Optional[str]) -> str:
        if url is None or not url.strip():
            raise BadRequest("Missing url parameter")
        return url

    async def _serve(self, target: str) -> ProxyResponse:
        cached = self.cache.get(target)
        if cached is not None:
            logger.info(f"[ImageProxy] Cache hit: {target[:60]}...")
            return self._image_response(cached.payload, cached.content_type, "HIT")

        image = await self.fetcher.resolve(target)
        self.cache.put(target, image.payload, image.content_type)

        logger.info(
            f"[ImageProxy] Proxied via {image.source}: {target[:60]}... "
            f"({len(image.payload)} bytes, cache {len(self.cache)}/{self.cache.max_entries})"
        )
        return self._image_response(image.payload, image.content_type, "MISS")

    def _image_response(self, payload: bytes, content_type: str, cache_status: str) -> ProxyResponse:
        return ProxyResponse(
            status_code=200,
            body=payload,
            media_type=content_type,
            headers={
                **CORS_HEADERS,
                "X-Cache": cache_status,
                "Cache-Control": self.cache_control,
            },
        )

    @staticmethod
    def _failure(target: str, message: str) -> ProxyResponse:
        return ProxyResponse.json(500, {
            "error": "Failed to fetch image",
            "message": message,
            "url": target,
        })
