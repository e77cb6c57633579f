"""Utility functions and classes."""

from .stopping_criteria import StopOnCancel
from .logging import setup_logging, get_logger

__all__ = ["StopOnCancel", "setup_logging", "get_logger"]
