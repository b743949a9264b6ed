"""
Image Proxy Module

Relays remote cover images to the browser, bypassing CORS and hotlink
protection.

Features:
- Direct fetch with browser-like headers, public proxy fallback
- Bounded in-memory cache with TTL and FIFO eviction
- Long-running router and a stateless per-invocation handler
"""

from .errors import ImageProxyError, BadRequest, FetchFailure
from .memory_cache import ImageMemoryCache, CacheEntry
from .fetcher import ImageFetcher, FetchedImage, to_https
from .relay import ImageProxyRelay, ProxyResponse, proxied_image_url
from .routes_fastapi import create_router

__all__ = [
    "ImageProxyError",
    "BadRequest",
    "FetchFailure",
    "ImageMemoryCache",
    "CacheEntry",
    "ImageFetcher",
    "FetchedImage",
    "to_https",
    "ImageProxyRelay",
    "ProxyResponse",
    "proxied_image_url",
    "create_router",
]
