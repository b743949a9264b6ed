"""
Image Proxy Configuration

Values are read from environment variables once, at import time.
"""

import os
import logging

logger = logging.getLogger(__name__)


def env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        logger.warning(f"[Config] Invalid integer for {name}: {raw!r}, using {default}")
        return default


def env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        logger.warning(f"[Config] Invalid number for {name}: {raw!r}, using {default}")
        return default


# ============================================
# Cache
# ============================================

MAX_CACHE_ENTRIES = env_int("IMAGE_CACHE_MAX_ENTRIES", 100)
CACHE_TTL_SECONDS = env_int("IMAGE_CACHE_TTL_SECONDS", 1800)  # 30 minutes

# ============================================
# Upstream fetch
# ============================================

FETCH_TIMEOUT_SECONDS = env_float("IMAGE_FETCH_TIMEOUT_SECONDS", 15.0)

# Most covers come from the video site's CDN, which checks the referer
REFERER = os.getenv("IMAGE_PROXY_REFERER", "https://www.bilibili.com/")
USER_AGENT = os.getenv(
    "IMAGE_PROXY_USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)

# Public re-encoding proxy used when the direct fetch is refused
FALLBACK_PROXY_URL = os.getenv("IMAGE_FALLBACK_PROXY_URL", "https://images.weserv.nl/")
