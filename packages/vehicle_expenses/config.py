"""Normalization policy and environment-driven settings.

The core never reads the environment itself: callers build a
:class:`NormalizationPolicy` (directly or via :func:`policy_from_env`) and pass
the correction year explicitly. Only the CLI consults these helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date

BLANK_CATEGORY_IS_FUEL_ENV = "VEHICLE_EXPENSES_BLANK_CATEGORY_IS_FUEL"
CURRENT_YEAR_ENV = "VEHICLE_EXPENSES_CURRENT_YEAR"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True, slots=True)
class NormalizationPolicy:
    """Switches for data-source specific normalization rules.

    Attributes
    ----------
    blank_category_is_fuel:
        Some sheets leave the category/comment column blank for fuel
        purchases. When enabled, a row without any category-like field is
        categorized as ``"Fuel"`` instead of ``"Other"``.
    """

    blank_category_is_fuel: bool = False


def env_flag(name: str, default: bool) -> bool:
    """Parse a boolean environment variable; unknown values yield ``default``."""

    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in _TRUE_VALUES:
        return True
    if v in _FALSE_VALUES:
        return False
    return default


def policy_from_env() -> NormalizationPolicy:
    return NormalizationPolicy(
        blank_category_is_fuel=env_flag(BLANK_CATEGORY_IS_FUEL_ENV, False),
    )


def resolve_current_year(override: int | None = None, *, today: date | None = None) -> int:
    """Return the year used to correct year-less dates.

    Precedence: explicit ``override``, then ``VEHICLE_EXPENSES_CURRENT_YEAR``,
    then the year of ``today`` (defaults to the system date).
    """

    if override is not None:
        return override
    env_val = os.getenv(CURRENT_YEAR_ENV)
    if env_val and env_val.strip().isdigit():
        return int(env_val.strip())
    return (today or date.today()).year


__all__ = [
    "BLANK_CATEGORY_IS_FUEL_ENV",
    "CURRENT_YEAR_ENV",
    "NormalizationPolicy",
    "env_flag",
    "policy_from_env",
    "resolve_current_year",
]
