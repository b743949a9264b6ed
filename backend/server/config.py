"""
Server Configuration
"""

import os

from image_proxy.config import env_int

APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
APP_PORT = env_int("APP_PORT", 3001)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
