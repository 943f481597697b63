"""Data models and type aliases for ``vehicle_expenses``.

Raw spreadsheet rows are kept opaque (``RawRecord``); the only validated
structure is the snapshot envelope produced by the export step.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .logging_setup import get_logger
from .records import CanonicalExpense

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# Raw input
# ---------------------------------------------------------------------------

RawRecord: TypeAlias = Mapping[str, Any]
"""One spreadsheet row: arbitrary header names mapped to untyped cell values.

Header names and casing vary between sheets; values may be strings, numbers,
or missing entirely.
"""


class SnapshotShapeError(ValueError):
    """Raised when the raw snapshot is not a list of row objects.

    This is the only error that crosses the normalization boundary; field-level
    defects are absorbed into defaults.
    """


# ---------------------------------------------------------------------------
# Snapshot envelope
# ---------------------------------------------------------------------------


class Snapshot(BaseModel):
    """Top-level schema of ``data.json``: ``{"lastUpdated", "expenses"}``."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    last_updated: datetime | None = Field(default=None, alias="lastUpdated")
    expenses: list[dict[str, Any]] = Field(default_factory=list)

    @field_validator("last_updated", mode="before")
    @classmethod
    def _lenient_timestamp(cls, v: Any) -> Any:
        # A bad timestamp only affects the "last updated" label, never the rows.
        # Naive values are taken to be UTC.
        if v is None:
            return None
        if isinstance(v, str):
            s = v.strip()
            if not s:
                return None
            try:
                v = datetime.fromisoformat(s)
            except ValueError:
                logger.warning("ignoring unparseable lastUpdated value %r", v)
                return None
        if not isinstance(v, datetime):
            logger.warning("ignoring non-timestamp lastUpdated value %r", v)
            return None
        if v.tzinfo is None:
            v = v.replace(tzinfo=UTC)
        return v

    @field_validator("expenses", mode="before")
    @classmethod
    def _missing_expenses_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v


# ---------------------------------------------------------------------------
# Aggregates handed to the presentation layer
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ExpenseSummary:
    """Derived aggregates over a display-ordered record list.

    ``monthly_totals`` keys are ``"<Mon> <YY>"`` labels in chronological
    order; ``last_expense`` is the newest record (``None`` for no records).
    """

    count: int
    total_spent: float
    last_expense: CanonicalExpense | None
    category_totals: dict[str, float] = field(default_factory=dict)
    monthly_totals: dict[str, float] = field(default_factory=dict)
    average_efficiency: float | None = None
    latest_odometer: float | None = None


__all__ = [
    "ExpenseSummary",
    "RawRecord",
    "Snapshot",
    "SnapshotShapeError",
]
