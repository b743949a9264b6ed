"""
Logging setup

Console handler on the root logger, shared by every module that uses
logging.getLogger(__name__).
"""

import logging

from .config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Console logging for the whole process. Safe to call more than once."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level, logging.INFO))

    # Avoid adding handlers twice (uvicorn reload, repeated create_app)
    if root_logger.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)
