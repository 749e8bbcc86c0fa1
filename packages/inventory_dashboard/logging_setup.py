"""Logging configuration for the ``inventory_dashboard`` package.

Entrypoints (the CLI, or a host application embedding the dashboard) call
``configure_logging(...)`` once. Library modules only ever call
``get_logger("inventory_dashboard.<module>")`` and never attach handlers of
their own; until configuration runs, records are discarded by a
``NullHandler`` on the package logger.

The level resolves, in order, from the explicit argument, the
``INVENTORY_DASHBOARD_LOG_LEVEL`` environment variable, and finally
``logging.INFO``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "inventory_dashboard"
LEVEL_ENV_VAR = "INVENTORY_DASHBOARD_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_handler: logging.Handler | None = None


def resolve_level(level: int | str | None) -> int:
    """Translate ``level`` (int, numeric string or level name) to an int."""

    if level is None:
        level = os.getenv(LEVEL_ENV_VAR) or logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    value = logging.getLevelName(name)
    # getLevelName returns "Level X" for unknown names
    return value if isinstance(value, int) else logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Attach a single ``StreamHandler`` to the package logger.

    Repeated calls are no-ops so the CLI callback and embedded hosts can both
    call it. Returns the package logger.
    """

    global _handler
    logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is not None:
        return logger

    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = resolve_level(level)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False
    _handler = handler
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the named logger, making the package logger silent by default."""

    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is None and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "resolve_level"]
