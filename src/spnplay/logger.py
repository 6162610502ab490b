"""
Logging configuration for spnplay

All package loggers live under the "spnplay" namespace (one per module via
get_logger(__name__)), so configuring that one logger controls the engine,
the renderers and the player without touching the application's root
logger.

Copyright (c) 2026 spnplay contributors

MIT License
"""

import logging
import sys
from typing import Optional, Union

PACKAGE_LOGGER = "spnplay"

DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"

# Marks handlers installed by set_global_logging so later calls replace them
_HANDLER_TAG = "_spnplay_handler"


def set_global_logging(
    level: Union[str, int] = "INFO",
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure logging for an application that uses spnplay.

    Calling it again replaces the handlers from the previous call rather
    than adding more.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
               or a logging module constant
        format_string: Custom format string for log messages
                       (default: DEFAULT_FORMAT, which names the module)
        log_file: Optional file path to also write logs to

    Returns:
        The package logger
    """
    if isinstance(level, str):
        log_level = getattr(logging, level.upper(), logging.INFO)
    else:
        log_level = int(level)

    formatter = logging.Formatter(
        format_string or DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"
    )
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logger = logging.getLogger(PACKAGE_LOGGER)
    for old in [h for h in logger.handlers if getattr(h, _HANDLER_TAG, False)]:
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_TAG, True)
        logger.addHandler(handler)
    logger.setLevel(log_level)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for the given name.

    Args:
        name: Logger name (defaults to 'spnplay')

    Returns:
        Logger instance
    """
    if name is None:
        name = PACKAGE_LOGGER
    return logging.getLogger(name)
