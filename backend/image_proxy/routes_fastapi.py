"""
Image Proxy API Routes

Long-running adapter: one relay (and its cache) lives for the whole
process and is shared by every request.

Provides endpoints for:
- Proxying external images (bypasses CORS and hotlink protection)
- Cache statistics and cleanup
- Health check
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import Response, JSONResponse

from .relay import CORS_HEADERS, PROXY_PATH, ImageProxyRelay, ProxyResponse

logger = logging.getLogger(__name__)


def to_fastapi_response(result: ProxyResponse) -> Response:
    """Translate a relay response into a FastAPI response."""
    return Response(
        content=result.body,
        status_code=result.status_code,
        media_type=result.media_type,
        headers=result.headers,
    )


def create_router(relay: ImageProxyRelay) -> APIRouter:
    """
    Build the image proxy router around an injected relay.

    Example:
        relay = ImageProxyRelay(ImageMemoryCache(), ImageFetcher())
        app.include_router(create_router(relay))
    """
    router = APIRouter(tags=["Image Proxy"])

    # ============================================
    # Proxy
    # ============================================

    @router.api_route(PROXY_PATH, methods=["GET", "OPTIONS"])
    async def proxy_image(
        request: Request,
        url: Optional[str] = Query(None, description="URL of the image to proxy"),
    ):
        """
        Proxy an external image.

        Example:
            GET /api/image-proxy?url=https%3A%2F%2Fi0.hdslb.com%2Fbfs%2Farchive%2Fx.jpg
        """
        result = await relay.handle(request.method, url)
        return to_fastapi_response(result)

    # ============================================
    # Cache management
    # ============================================

    @router.get(f"{PROXY_PATH}/stats")
    async def get_cache_stats():
        """Get cache statistics."""
        return JSONResponse(
            content={"success": True, "stats": relay.cache.stats()},
            headers=CORS_HEADERS,
        )

    @router.post(f"{PROXY_PATH}/cleanup")
    async def cleanup_cache():
        """Remove expired entries now instead of on the next lookup."""
        removed = relay.cache.cleanup_expired()
        return JSONResponse(
            content={
                "success": True,
                "removed_entries": removed,
                "current_stats": relay.cache.stats(),
            },
            headers=CORS_HEADERS,
        )

    @router.post("/api/clear-cache")
    async def clear_cache():
        """Clear all cached images."""
        removed = relay.cache.clear()
        return JSONResponse(
            content={
                "success": True,
                "removed_entries": removed,
                "message": "Cache cleared successfully",
            },
            headers=CORS_HEADERS,
        )

    @router.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return JSONResponse(
            content={
                "status": "healthy",
                "service": "image-proxy",
                "cache_stats": relay.cache.stats(),
            },
            headers=CORS_HEADERS,
        )

    return router
