"""Logging setup for scripts that drive plotbridge."""

from __future__ import annotations

import logging
import sys

from . import config

LOGGER_NAME = "plotbridge"
FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(level: str | int | None = None) -> logging.Logger:
    """Attach a stderr handler to the plotbridge logger and return it.

    Safe to call more than once; the handler is only added the first time.
    """
    if level is None:
        level = config.LOG_LEVEL
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(level)

    return logger
