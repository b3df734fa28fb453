"""Utility modules for configuration and logging."""

from .config import Config
from .logger import setup_logger, get_logger

__all__ = ["Config", "setup_logger", "get_logger"]
