"""
Image Fetcher

Resolves a remote image URL to its bytes:
1. Direct fetch over HTTPS with browser-like headers (passes most
   hotlink protection)
2. On any failure, one request through a public image proxy that
   fetches the original URL for us
"""

import logging
from typing import Optional
from dataclasses import dataclass

import httpx

from . import config
from .errors import FetchFailure
from .memory_cache import DEFAULT_CONTENT_TYPE

logger = logging.getLogger(__name__)


@dataclass
class FetchedImage:
    """Result of a successful fetch."""
    payload: bytes
    content_type: str
    source: str  # "direct" or "fallback"


def to_https(url: str) -> str:
    """Rewrite an http:// URL to https://, leave anything else unchanged."""
    if url[:7].lower() == "http://":
        return "https://" + url[7:]
    return url


class ImageFetcher:
    """
    Fetches images directly, falling back to a public proxy.

    Usage:
        fetcher = ImageFetcher()
        image = await fetcher.resolve("http://i0.hdslb.com/bfs/archive/x.jpg")
        await fetcher.aclose()
    """

    def __init__(
        self,
        timeout: float = config.FETCH_TIMEOUT_SECONDS,
        referer: str = config.REFERER,
        user_agent: str = config.USER_AGENT,
        fallback_url: str = config.FALLBACK_PROXY_URL,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.timeout = timeout
        self.fallback_url = fallback_url
        self.direct_headers = {
            "User-Agent": user_agent,
            "Referer": referer,
        }

        # Timeouts are enforced by httpx on every request
        self.http_client = client or httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
        )

    async def aclose(self) -> None:
        """Close HTTP client."""
        await self.http_client.aclose()

    async def resolve(self, target_url: str) -> FetchedImage:
        """
        Fetch an image, direct first, then through the fallback proxy.

        Args:
            target_url: Image URL exactly as the caller supplied it

        Returns:
            FetchedImage with the full body and its content type

        Raises:
            FetchFailure: both paths failed
        """
        response = await self._fetch_direct(target_url)
        source = "direct"

        if response is None:
            response = await self._fetch_fallback(target_url)
            source = "fallback"

        content_type = response.headers.get("content-type") or DEFAULT_CONTENT_TYPE
        return FetchedImage(
            payload=response.content,
            content_type=content_type,
            source=source,
        )

    async def _fetch_direct(self, target_url: str) -> Optional[httpx.Response]:
        """Direct attempt. Returns None on any failure."""
        https_url = to_https(target_url)
        logger.info(f"[ImageFetch] Fetching: {https_url[:80]}...")

        try:
            response = await self.http_client.get(
                https_url,
                headers=self.direct_headers,
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            logger.warning(f"[ImageFetch] Direct fetch failed ({type(e).__name__}), using fallback proxy")
            return None

        if not response.is_success:
            logger.warning(f"[ImageFetch] Direct fetch HTTP {response.status_code}, using fallback proxy")
            return None

        logger.debug(f"[ImageFetch] Direct fetch ok: {https_url[:60]}...")
        return response

    async def _fetch_fallback(self, target_url: str) -> httpx.Response:
        """Fallback attempt through the public proxy, with the un-rewritten URL."""
        try:
            response = await self.http_client.get(
                self.fallback_url,
                params={"url": target_url},
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            logger.error(f"[ImageFetch] Fallback proxy error: {e}")
            raise FetchFailure(target_url, detail=str(e) or type(e).__name__) from e

        if not response.is_success:
            logger.error(f"[ImageFetch] Fallback proxy HTTP {response.status_code}: {target_url[:60]}...")
            raise FetchFailure(target_url, status_code=response.status_code)

        logger.info("[ImageFetch] Fallback proxy ok")
        return response
