"""
Server Module

FastAPI application assembly, configuration and logging.
"""

from .main import create_app

__all__ = ["create_app"]
