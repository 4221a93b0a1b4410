"""Process-wide logging configuration."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Install a single stdout handler on the ``screenplan`` logger.

    Safe to call more than once; the handler is replaced, not duplicated.
    """
    logger = logging.getLogger("screenplan")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger
