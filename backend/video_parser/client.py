"""
Video Parse API Client

Resolves a shareable video page URL into a directly playable stream
through the external parsing API. The API is treated as a black box:

    GET <base>/api/<path>?url=<page url>&type=json

    {
      "code": 200,
      "title": "...",
      "imgurl": "<cover>",
      "user": {"name": "<author>"},
      "data": [{"video_url": "...", "title": "...", "duration": 123}, ...]
    }
"""

import logging
import math
from typing import Any, Dict, Optional
from dataclasses import dataclass, asdict

import httpx

from . import config

logger = logging.getLogger(__name__)

UNTITLED = "Untitled video"


def _as_seconds(value: Any) -> float:
    """Numeric duration, 0 when the API sends something else (e.g. "03:32")."""
    if isinstance(value, bool):
        return 0
    try:
        seconds = float(value or 0)
    except (TypeError, ValueError):
        return 0
    return seconds if math.isfinite(seconds) else 0


class VideoParseError(Exception):
    """Raised when the parse API cannot resolve a video."""

    def __init__(self, source_url: str, message: str, code: Optional[int] = None):
        self.source_url = source_url
        self.code = code
        self.message = message
        super().__init__(self.message)


class ValidationError(VideoParseError):
    """Raised when the input URL is missing."""


@dataclass
class ParsedVideo:
    """A resolved video, built from the first candidate stream."""
    source_url: str
    video_url: str
    title: str
    author: str = ""
    cover: str = ""
    duration: float = 0
    duration_format: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class VideoParseClient:
    """
    Thin async client for the parse API.

    Usage:
        client = VideoParseClient()
        video = await client.parse("https://www.bilibili.com/video/BV1xx411c7mD")
    """

    def __init__(
        self,
        base_url: str = config.PARSE_API_BASE_URL,
        path: str = config.PARSE_API_PATH,
        timeout: float = config.PARSE_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.endpoint = f"{base_url.rstrip('/')}/api/{path.strip('/')}"
        self.http_client = client or httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        """Close HTTP client."""
        await self.http_client.aclose()

    async def parse(self, source_url: str) -> ParsedVideo:
        """
        Resolve a video page URL.

        Raises:
            ValidationError: source_url is empty
            VideoParseError: network/HTTP error or the API reported a failure
        """
        source_url = (source_url or "").strip()
        if not source_url:
            raise ValidationError(source_url, "Missing url parameter")

        logger.info(f"[VideoParse] Resolving: {source_url[:80]}")
        result = await self._request(source_url)
        return self._to_video(source_url, result)

    async def _request(self, source_url: str) -> Dict[str, Any]:
        try:
            response = await self.http_client.get(
                self.endpoint,
                params={"url": source_url, "type": "json"},
                headers={"Accept": "application/json"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"[VideoParse] HTTP error {e.response.status_code}: {source_url[:60]}")
            raise VideoParseError(source_url, f"Network error: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"[VideoParse] Request failed: {e}")
            raise VideoParseError(source_url, f"Network error: {e}") from e

        try:
            result = response.json()
        except ValueError as e:
            raise VideoParseError(source_url, "Parse API returned invalid JSON") from e

        if not isinstance(result, dict):
            raise VideoParseError(source_url, "Parse API returned an unexpected payload")
        return result

    @staticmethod
    def _to_video(source_url: str, result: Dict[str, Any]) -> ParsedVideo:
        code = result.get("code")
        if code != 200:
            raise VideoParseError(source_url, str(result.get("msg") or "Parse failed"), code=code)

        data = result.get("data")
        candidates = data if isinstance(data, list) else []
        if not candidates:
            raise VideoParseError(source_url, "No video stream returned", code=code)

        best = candidates[0] if isinstance(candidates[0], dict) else {}
        video_url = best.get("video_url")
        if not video_url:
            raise VideoParseError(source_url, "API did not return a playable link", code=code)

        user = result.get("user")
        if not isinstance(user, dict):
            user = {}
        return ParsedVideo(
            source_url=source_url,
            video_url=str(video_url),
            title=str(best.get("title") or result.get("title") or UNTITLED),
            author=str(user.get("name") or ""),
            cover=str(result.get("imgurl") or ""),
            duration=_as_seconds(best.get("duration")),
            duration_format=str(best.get("durationFormat") or ""),
        )
