"""Logging setup shared by every module."""

import logging
import sys
from typing import Optional

from poker_control.config import config


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger writing to stdout at the configured level.

    Args:
        name: Logger name, usually the calling module's ``__name__``.
    """
    logger = logging.getLogger(name or "poker_control")

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
        logger.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))

    return logger
