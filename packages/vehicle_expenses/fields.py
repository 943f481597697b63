"""Field reconciliation: map loosely keyed sheet rows onto canonical fields.

Each concept has an ordered tuple of candidate header names. Lookup takes the
first candidate holding a populated value, first by exact key and then
ignoring case and surrounding whitespace, so the priority order stays visible
in one place.

No field is fatal: missing or malformed values degrade to documented
defaults (``0.0`` for amount, ``None`` for the optional readings).
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from typing import Any

from .config import NormalizationPolicy
from .dates import canonicalize_date
from .records import CanonicalExpense

# ---------------------------------------------------------------------------
# Candidate keys (priority order)
# ---------------------------------------------------------------------------

DATE_KEYS: tuple[str, ...] = ("Date", "date", "Timestamp", "timestamp")
CATEGORY_KEYS: tuple[str, ...] = ("comment", "Comment", "type", "Type", "Category", "category")
DESCRIPTION_KEYS: tuple[str, ...] = (
    "Description",
    "description",
    "Note",
    "note",
    "comment",
    "Comment",
)
AMOUNT_KEYS: tuple[str, ...] = ("Amount", "amount", "Price", "price")
ODOMETER_KEYS: tuple[str, ...] = ("odometer reading", "Odometer Reading", "Odometer", "odometer")
VOLUME_KEYS: tuple[str, ...] = ("volume in ltr", "Volume in ltr", "Volume", "volume")
RATE_KEYS: tuple[str, ...] = ("rate", "Rate", "rate per ltr", "Rate per ltr")

DEFAULT_CATEGORY = "Other"
FUEL_CATEGORY = "Fuel"

# Thousands separators, currency glyphs and any whitespace.
_NUMERIC_NOISE_RE = re.compile(r"[,\s$€£₹¥]")


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------


def is_populated(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, float):
        return not math.isnan(value)
    return isinstance(value, int)


def is_empty_row(raw: Mapping[str, Any]) -> bool:
    return not any(is_populated(v) for v in raw.values())


def _fold(key: str) -> str:
    return key.strip().casefold()


def first_populated(raw: Mapping[str, Any], candidates: Sequence[str]) -> Any | None:
    """Return the first populated value among ``candidates`` (or ``None``)."""

    for name in candidates:
        value = raw.get(name)
        if is_populated(value):
            return value

    folded: dict[str, Any] = {}
    for k, v in raw.items():
        if isinstance(k, str) and is_populated(v):
            folded.setdefault(_fold(k), v)
    for name in candidates:
        value = folded.get(_fold(name))
        if value is not None:
            return value
    return None


def first_text(raw: Mapping[str, Any], candidates: Sequence[str]) -> str | None:
    value = first_populated(raw, candidates)
    if value is None:
        return None
    return value.strip() if isinstance(value, str) else str(value)


# ---------------------------------------------------------------------------
# Numeric coercion
# ---------------------------------------------------------------------------


def coerce_number(value: Any) -> float | None:
    """Parse ``value`` as a float after stripping separators and currency glyphs.

    Returns ``None`` for missing, blank, or unparseable input, and for
    non-finite results.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        cleaned = _NUMERIC_NOISE_RE.sub("", str(value))
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


# ---------------------------------------------------------------------------
# Category / description rules
# ---------------------------------------------------------------------------


def resolve_category(label: str | None, policy: NormalizationPolicy) -> str:
    if label is None:
        return FUEL_CATEGORY if policy.blank_category_is_fuel else DEFAULT_CATEGORY
    if "fuel" in label.casefold():
        return FUEL_CATEGORY
    return label


def resolve_description(explicit: str | None, category: str) -> str:
    if explicit:
        return explicit
    return FUEL_CATEGORY if category == FUEL_CATEGORY else category


# ---------------------------------------------------------------------------
# Row mapping
# ---------------------------------------------------------------------------


def reconcile_record(
    raw: Mapping[str, Any],
    *,
    current_year: int,
    policy: NormalizationPolicy | None = None,
) -> CanonicalExpense:
    """Map one non-empty raw row to a :class:`CanonicalExpense`.

    ``efficiency`` is left unset; it is derived over the whole sequence.
    """

    policy = policy or NormalizationPolicy()
    canonical_date = canonicalize_date(first_populated(raw, DATE_KEYS), current_year=current_year)

    category = resolve_category(first_text(raw, CATEGORY_KEYS), policy)
    description = resolve_description(first_text(raw, DESCRIPTION_KEYS), category)

    amount = coerce_number(first_populated(raw, AMOUNT_KEYS))
    odometer = coerce_number(first_populated(raw, ODOMETER_KEYS))
    volume = coerce_number(first_populated(raw, VOLUME_KEYS))
    rate = coerce_number(first_populated(raw, RATE_KEYS))
    if rate is None and amount is not None and volume is not None and volume > 0:
        rate = amount / volume

    return CanonicalExpense(
        date=canonical_date.display,
        category=category,
        description=description,
        amount=amount if amount is not None else 0.0,
        odometer=odometer,
        volume=volume,
        rate=rate,
        parsed_date=canonical_date.value,
    )


__all__ = [
    "AMOUNT_KEYS",
    "CATEGORY_KEYS",
    "DATE_KEYS",
    "DEFAULT_CATEGORY",
    "DESCRIPTION_KEYS",
    "FUEL_CATEGORY",
    "ODOMETER_KEYS",
    "RATE_KEYS",
    "VOLUME_KEYS",
    "coerce_number",
    "first_populated",
    "first_text",
    "is_empty_row",
    "is_populated",
    "reconcile_record",
    "resolve_category",
    "resolve_description",
]
