"""Logging setup for nicegrid.

Every module logs through ``get_logger(__name__)``, so all records land under
the ``nicegrid`` logger. The package itself only attaches a ``NullHandler``
(see ``nicegrid/__init__.py``); output is the host application's decision.

Scripts and demos that want console output call::

    from nicegrid.utils.logging import configure_logging
    configure_logging(level="DEBUG")

What the grid logs:
    DEBUG  rejected commands (unknown row key, read-only cell, ...) and projections
    INFO   data reloads (``set_data``)
    ERROR  listener exceptions, with traceback
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

LOGGER_NAME = "nicegrid"
LEVEL_ENV_VAR = "NICEGRID_LOG_LEVEL"

DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d:%(funcName)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: Optional[Union[str, int]] = None) -> int:
    """Turn a level name, number or None into a logging level.

    None reads ``NICEGRID_LOG_LEVEL``; unknown names fall back to INFO.
    """
    if level is None:
        level = os.environ.get(LEVEL_ENV_VAR, "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _console_handler(logger: logging.Logger) -> Optional[logging.Handler]:
    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and handler.stream is sys.stderr:
            return handler
    return None


def configure_logging(
    level: Optional[Union[str, int]] = None,
    *,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> logging.Logger:
    """Send ``nicegrid`` records to stderr. The root logger is never touched.

    Args:
        level: Level name or number; defaults to ``NICEGRID_LOG_LEVEL``, else INFO.
        fmt: Record format, defaults to ``DEFAULT_FMT``.
        datefmt: Timestamp format, defaults to ``DEFAULT_DATEFMT``.
        force: Replace existing handlers. Without it, a second call only
            updates the level of the existing console handler.

    Returns:
        The ``nicegrid`` logger.
    """
    numeric = resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric)

    if force:
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)

    console = _console_handler(logger)
    if console is None:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter(fmt=fmt or DEFAULT_FMT, datefmt=datefmt or DEFAULT_DATEFMT))
        logger.addHandler(console)
    console.setLevel(numeric)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for ``name`` (normally a module's ``__name__``); None gives the package logger."""
    return logging.getLogger(name or LOGGER_NAME)
