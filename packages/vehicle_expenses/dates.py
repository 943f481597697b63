"""Date canonicalization for free-form spreadsheet date cells.

Sheets often hold year-less dates such as ``"27 Nov"``. A generic parser fills
the missing year from a placeholder, so any parsed year before
:data:`YEAR_CUTOFF` is read as "year omitted" and replaced with the caller's
current year. The display form is built from a fixed month table so it does
not depend on the process locale.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, NamedTuple

from dateutil import parser as date_parser

YEAR_CUTOFF = 2010
# Leap year, so "29 Feb" without a year still parses.
PLACEHOLDER_DEFAULT = datetime(2000, 1, 1)
EPOCH = date(1970, 1, 1)

MONTH_ABBREVIATIONS: tuple[str, ...] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


class CanonicalDate(NamedTuple):
    display: str
    value: date | None


def parse_date(raw: str) -> date | None:
    """Best-effort parse of ``raw``; ``None`` when it is not a date."""

    s = raw.strip()
    if not s:
        return None
    try:
        return date_parser.parse(s, default=PLACEHOLDER_DEFAULT).date()
    except (ValueError, OverflowError):
        return None


def correct_year(d: date, current_year: int) -> date:
    """Replace a placeholder year (< ``YEAR_CUTOFF``) with ``current_year``."""

    if d.year >= YEAR_CUTOFF:
        return d
    try:
        return d.replace(year=current_year)
    except ValueError:
        # 29 Feb moved into a non-leap year
        return d.replace(year=current_year, day=28)


def format_display(d: date) -> str:
    return f"{d.day} {MONTH_ABBREVIATIONS[d.month - 1]} {d.year:04d}"


def month_key(d: date) -> str:
    """Locale-independent month bucket label, e.g. ``"Jan 24"``."""

    return f"{MONTH_ABBREVIATIONS[d.month - 1]} {d.year % 100:02d}"


def canonicalize_date(raw: Any, *, current_year: int) -> CanonicalDate:
    """Map a raw date cell to its display string and parsed value.

    - missing/blank -> ``("", None)``
    - unparseable -> original text, ``None``
    - parsed -> ``"<day> <Mon> <YYYY>"`` with the year corrected
    """

    if raw is None:
        return CanonicalDate("", None)
    text = raw if isinstance(raw, str) else str(raw)
    parsed = parse_date(text)
    if parsed is None:
        return CanonicalDate(text, None)
    fixed = correct_year(parsed, current_year)
    return CanonicalDate(format_display(fixed), fixed)


__all__ = [
    "EPOCH",
    "MONTH_ABBREVIATIONS",
    "YEAR_CUTOFF",
    "CanonicalDate",
    "canonicalize_date",
    "correct_year",
    "format_display",
    "month_key",
    "parse_date",
]
