"""Common utilities for repowatch."""

from .logger import setup_logger, get_logger
from .config import load_config, load_typed_config
from .settings import get_settings

__all__ = [
    "get_logger",
    "get_settings",
    "load_config",
    "load_typed_config",
    "setup_logger",
]
