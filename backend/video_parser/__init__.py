"""
Video Parser Module

Client and route for the external video resolution API.
"""

from .client import VideoParseClient, ParsedVideo, VideoParseError, ValidationError
from .routes_fastapi import create_router

__all__ = [
    "VideoParseClient",
    "ParsedVideo",
    "VideoParseError",
    "ValidationError",
    "create_router",
]
