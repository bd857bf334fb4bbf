"""
Shared application logger.
"""

import logging
import sys
from typing import Optional

from living_plan.core.config import get_settings

LOGGER_NAME = "living_plan"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logger(name: str = LOGGER_NAME, level: Optional[str] = None) -> logging.Logger:
    """
    Configure and return a named logger.

    Args:
        name: Logger name, usually the calling module's __name__
        level: Log level name; defaults to the LOG_LEVEL setting

    Returns:
        Configured logger (handlers are attached only once)
    """
    named_logger = logging.getLogger(name)
    named_logger.setLevel((level or get_settings().LOG_LEVEL).upper())

    if not named_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        named_logger.addHandler(handler)
        named_logger.propagate = False

    return named_logger


logger = setup_logger()
