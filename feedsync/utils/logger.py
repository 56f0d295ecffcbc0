"""Logger setup shared by feedsync and feedview.

Usage:
    from feedsync.utils.logger import get_logger
    logger = get_logger(__name__)

The root handler is configured on the first ``get_logger`` call, with the
level taken from ``FEED_LOG_LEVEL``.
"""
import logging
from typing import Optional

from feedsync.config import get_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# httpx/httpcore log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: Optional[str] = None) -> None:
    level_name = (level or get_settings().log_level).upper()
    numeric = logging.getLevelName(level_name)
    if not isinstance(numeric, int):
        numeric = logging.INFO
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)
