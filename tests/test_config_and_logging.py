# ruff: noqa: E501
import io
import logging
from datetime import date

import pytest

from vehicle_expenses import normalize_expenses
from vehicle_expenses.config import (
    NormalizationPolicy,
    env_flag,
    policy_from_env,
    resolve_current_year,
)
from vehicle_expenses.logging_setup import configure_logging, get_logger, resolve_level


@pytest.mark.parametrize(
    "value, expected",
    [("1", True), ("yes", True), ("TRUE", True), ("0", False), ("no", False), ("maybe", False)],
)
def test_policy_from_env(monkeypatch, value, expected):
    monkeypatch.setenv("VEHICLE_EXPENSES_BLANK_CATEGORY_IS_FUEL", value)
    assert policy_from_env() == NormalizationPolicy(blank_category_is_fuel=expected)


def test_policy_defaults_off_without_env():
    assert policy_from_env().blank_category_is_fuel is False
    assert env_flag("VEHICLE_EXPENSES_UNSET_FLAG", True) is True


def test_resolve_current_year_precedence(monkeypatch):
    today = date(2026, 3, 1)
    assert resolve_current_year(today=today) == 2026
    monkeypatch.setenv("VEHICLE_EXPENSES_CURRENT_YEAR", "2024")
    assert resolve_current_year(today=today) == 2024
    assert resolve_current_year(2030, today=today) == 2030


def test_configure_logging_emits_pipeline_debug():
    stream = io.StringIO()
    configure_logging("DEBUG", stream=stream)

    normalize_expenses([{"Amount": "1"}, {}], current_year=2024)

    assert "normalized 1 rows (1 empty dropped, 0 with efficiency)" in stream.getvalue()


def test_reconfiguring_replaces_the_previous_handler():
    first, second = io.StringIO(), io.StringIO()
    configure_logging(logging.INFO, stream=first)
    logger = configure_logging(logging.INFO, stream=second)

    get_logger("vehicle_expenses.test").info("hello")

    assert first.getvalue() == ""
    assert "INFO vehicle_expenses.test: hello" in second.getvalue()
    assert not any(isinstance(h, logging.NullHandler) for h in logger.handlers)
    assert len(logger.handlers) == 1


def test_log_level_from_env(monkeypatch):
    monkeypatch.setenv("VEHICLE_EXPENSES_LOG_LEVEL", "WARNING")
    stream = io.StringIO()
    configure_logging(stream=stream)

    log = get_logger("vehicle_expenses.test")
    log.info("quiet")
    log.warning("loud")

    assert "quiet" not in stream.getvalue()
    assert "loud" in stream.getvalue()


@pytest.mark.parametrize(
    "level, expected",
    [("debug", logging.DEBUG), (" Warning ", logging.WARNING), ("15", 15), (logging.ERROR, logging.ERROR), ("", None), ("chatty", None)],
)
def test_resolve_level(level, expected):
    assert resolve_level(level) == expected


def test_argument_level_wins_over_env(monkeypatch):
    monkeypatch.setenv("VEHICLE_EXPENSES_LOG_LEVEL", "ERROR")
    assert configure_logging("DEBUG", stream=io.StringIO()).level == logging.DEBUG


def test_unknown_level_falls_back_to_info_with_warning(monkeypatch):
    monkeypatch.setenv("VEHICLE_EXPENSES_LOG_LEVEL", "chatty")
    stream = io.StringIO()

    logger = configure_logging(stream=stream)

    assert logger.level == logging.INFO
    assert "unknown log level 'chatty'" in stream.getvalue()


def test_library_loggers_are_silent_until_configured(capsys):
    normalize_expenses([{"Amount": "1"}], current_year=2024)
    get_logger("vehicle_expenses.test").info("not shown")

    captured = capsys.readouterr()
    assert captured.out == "" and captured.err == ""
