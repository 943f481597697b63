"""Pytest configuration for test isolation.

Normalization behavior and logging can be switched through
``VEHICLE_EXPENSES_*`` environment variables, and the CLI configures the
package logger on every invocation. Both leak between tests unless reset, so an
autouse fixture clears the variables and restores the logger around every
test.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in list(os.environ):
        if name.startswith("VEHICLE_EXPENSES_"):
            monkeypatch.delenv(name, raising=False)
    # The CLI reads ``.env`` from the working directory; use an empty one.
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger("vehicle_expenses")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    logger.addHandler(logging.NullHandler())
