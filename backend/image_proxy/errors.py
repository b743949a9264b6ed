"""
Image Proxy Errors

- BadRequest: required input missing or invalid (HTTP 400)
- FetchFailure: direct and fallback fetches both failed (HTTP 500)
"""

from typing import Optional


class ImageProxyError(Exception):
    """Base class for image proxy errors."""


class BadRequest(ImageProxyError):
    def __init__(self, message: str = "Missing url parameter"):
        self.message = message
        super().__init__(self.message)


class FetchFailure(ImageProxyError):
    """
    Raised when an image could not be fetched by any path.

    Only the final attempt's status is kept; callers are not told which
    stage failed.
    """

    def __init__(self, url: str, status_code: Optional[int] = None, detail: str = ""):
        self.url = url
        self.status_code = status_code
        if status_code is not None:
            self.message = f"Fallback proxy fetch failed: HTTP {status_code}"
        else:
            self.message = f"Fallback proxy fetch failed: {detail or 'network error'}"
        super().__init__(self.message)
