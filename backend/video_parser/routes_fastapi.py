"""
Video Parse API Routes

Server-side relay to the external parse API, so the browser does not
need its own CORS workaround.
"""

import logging
from typing import Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError
from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from image_proxy.relay import CORS_HEADERS, proxied_image_url
from .client import ParsedVideo, VideoParseClient, VideoParseError, ValidationError

logger = logging.getLogger(__name__)


# ============================================
# Response Models
# ============================================

class ParsedVideoResponse(BaseModel):
    """Response model for a resolved video."""
    success: bool = True
    source_url: str
    video_url: str
    title: str
    author: str = ""
    cover: str = ""
    cover_proxy_url: str = Field("", description="Cover routed through the image proxy")
    duration: float = 0
    duration_format: str = ""


def _build_response(video: ParsedVideo) -> ParsedVideoResponse:
    """Response body for a parsed video; malformed upstream fields count as a parse failure."""
    try:
        return ParsedVideoResponse(
            cover_proxy_url=proxied_image_url(video.cover),
            **video.to_dict(),
        )
    except PydanticValidationError as e:
        raise VideoParseError(video.source_url, "Parse API returned malformed fields") from e


# ============================================
# Router
# ============================================

def create_router(parser: VideoParseClient) -> APIRouter:
    """Build the video parse router around an injected client."""
    router = APIRouter(prefix="/api/video", tags=["Video Parser"])

    @router.get("/parse", response_model=ParsedVideoResponse)
    async def parse_video(
        url: Optional[str] = Query(None, description="Shareable video page URL"),
    ):
        """
        Resolve a video page URL to a playable stream.

        Example:
            GET /api/video/parse?url=https%3A%2F%2Fwww.bilibili.com%2Fvideo%2FBV1xx411c7mD
        """
        try:
            video = await parser.parse(url or "")
            body = _build_response(video)
        except ValidationError as e:
            return JSONResponse(status_code=400, content={"error": e.message}, headers=CORS_HEADERS)
        except VideoParseError as e:
            logger.warning(f"[VideoParse] Failed: {e.message}")
            return JSONResponse(
                status_code=502,
                content={"error": "Failed to parse video", "message": e.message, "code": e.code, "url": e.source_url},
                headers=CORS_HEADERS,
            )

        return JSONResponse(content=body.model_dump(), headers=CORS_HEADERS)

    return router
