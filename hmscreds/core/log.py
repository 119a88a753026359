"""
Logging setup for hmscreds.

Library modules only do::

    import logging
    logger = logging.getLogger(__name__)

Applications that want hmscreds output call setup_logging() once.
"""

import logging
import sys
from typing import Optional

from hmscreds.core.config import LoggingConfig


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(config: Optional[LoggingConfig] = None) -> logging.Logger:
    """
    Configure the hmscreds logger.

    Adds a stderr handler and, if config.file is set, a file handler.
    Calling it again replaces the handlers instead of stacking them.

    Args:
        config: Logging settings. If None, uses defaults (INFO, no file).

    Returns:
        The configured package logger.
    """
    config = config or LoggingConfig()

    logger = logging.getLogger("hmscreds")
    logger.setLevel(config.level.upper())

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if config.file:
        config.file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(config.file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
