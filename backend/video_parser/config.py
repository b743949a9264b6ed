"""
Video Parser Configuration
"""

import os

from image_proxy.config import env_float

# External resolution API, called as <base>/api/<path>?url=...&type=json
PARSE_API_BASE_URL = os.getenv("VIDEO_PARSE_BASE_URL", "https://api.mir6.com")
PARSE_API_PATH = os.getenv("VIDEO_PARSE_PATH", "bzjiexi")
PARSE_TIMEOUT_SECONDS = env_float("VIDEO_PARSE_TIMEOUT_SECONDS", 15.0)
