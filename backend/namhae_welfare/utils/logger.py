"""
Namhae Welfare — Logging Configuration
Console logging shared by the API, services and storage layer.
The level comes from LOG_LEVEL; unknown names fall back to INFO.
"""

import logging
import sys
from typing import Optional

from namhae_welfare.config import get_settings


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def resolve_level(name: Optional[str]) -> int:
    level = logging.getLevelName((name or "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logger(name: str = "namhae-welfare", level: Optional[str] = None) -> logging.Logger:
    """Return the named logger, attaching a stdout handler the first time."""
    log = logging.getLogger(name)
    if log.handlers:
        return log

    log.setLevel(resolve_level(level or get_settings().log_level))
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    log.addHandler(handler)
    return log


logger = setup_logger()
