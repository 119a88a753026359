"""Configuration and logging."""

from hmscreds.core.config import Config, get_config
from hmscreds.core.log import setup_logging

__all__ = ["Config", "get_config", "setup_logging"]
