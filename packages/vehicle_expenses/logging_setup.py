"""Logging for the ``vehicle_expenses`` package.

Library modules log through ``get_logger(__name__)`` and stay silent (the
package logger carries a ``NullHandler``) until the CLI calls
:func:`configure_logging`. Every CLI invocation reconfigures the package
logger, replacing the handler it attached last time, so log lines follow the
invocation's current ``sys.stderr``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "vehicle_expenses"
LOG_LEVEL_ENV = "VEHICLE_EXPENSES_LOG_LEVEL"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


class _CliHandler(logging.StreamHandler):
    """The stderr handler owned by :func:`configure_logging`."""


def resolve_level(level: int | str | None = None) -> int | None:
    """Return a numeric level from ``level`` or ``VEHICLE_EXPENSES_LOG_LEVEL``.

    Level names are case-insensitive; numeric strings are accepted. ``None``
    means nothing usable was given.
    """

    raw = level if level is not None else os.getenv(LOG_LEVEL_ENV)
    if isinstance(raw, int):
        return raw
    if not raw or not raw.strip():
        return None
    name = raw.strip().upper()
    if name.isdigit():
        return int(name)
    return logging.getLevelNamesMapping().get(name)


def configure_logging(
    level: int | str | None = None,
    *,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Attach a single stderr handler to the package logger and return it.

    ``level`` wins over the environment; the default is ``INFO``. An
    unrecognized level is reported as a warning and ``INFO`` is used.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    for h in list(logger.handlers):
        if isinstance(h, (_CliHandler, logging.NullHandler)):
            logger.removeHandler(h)

    resolved = resolve_level(level)
    handler = _CliHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(resolved if resolved is not None else logging.INFO)
    logger.propagate = False

    requested = level if level is not None else os.getenv(LOG_LEVEL_ENV)
    if resolved is None and requested is not None and str(requested).strip():
        logger.warning("unknown log level %r, using INFO", requested)
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["LOG_LEVEL_ENV", "configure_logging", "get_logger", "resolve_level"]
