# -*- coding: utf-8 -*-
"""
Logging setup for command line use of the package.

Library modules only create module loggers with `logging.getLogger(__name__)`
and never configure handlers. `setup_logging` attaches the handlers to the
package logger, so every module below `fem_mesh` reports through them.
"""

import logging
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER = "fem_mesh"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"


def _attach(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Sends the records of the package logger to a stream and optionally a file.

    Calling it again replaces the handlers of a previous call.

    Args:
        level: Lowest level that is reported.
        log_file: Path of a log file, overwritten on every call.
        stream: Console stream. Defaults to ``sys.stdout``.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    _attach(logger, logging.StreamHandler(stream or sys.stdout), level)
    if log_file:
        _attach(logger, logging.FileHandler(log_file, mode="w", encoding="utf-8"), level)

    logger.debug(f"Logging to {log_file or 'console'} at level {logging.getLevelName(level)}")
    return logger
