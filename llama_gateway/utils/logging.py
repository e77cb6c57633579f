"""Logging setup shared by every module of the gateway."""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger with a single stdout handler.

    Safe to call more than once; only the first call installs the handler,
    later calls only adjust the level.

    Args:
        level: Log level name, defaults to the configured LOG_LEVEL
    """
    global _configured

    if level is None:
        from ..config import config

        level = config.LOG_LEVEL

    root = logging.getLogger()
    root.setLevel(level)

    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a module logger."""
    return logging.getLogger(name)
