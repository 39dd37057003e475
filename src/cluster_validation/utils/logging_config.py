"""Logging setup shared by the package and its scripts."""

import logging
import os
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: Optional[str] = None, fmt: str = DEFAULT_FORMAT) -> None:
    """
    Configure the root logger.

    Level resolution: explicit ``level`` argument, then the ``LOG_LEVEL``
    environment variable, then INFO.
    """
    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    numeric = logging.getLevelName(level_name)
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level_name}")
    logging.basicConfig(level=numeric, format=fmt, force=True)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger."""
    return logging.getLogger(name)
