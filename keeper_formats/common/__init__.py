"""Common utilities for keeper-formats."""

from .logger import setup_logger, get_logger
from .config import configure_logging, load_config, load_typed_config

__all__ = [
    "configure_logging",
    "get_logger",
    "load_config",
    "load_typed_config",
    "setup_logger",
]
