"""Canonical expense record.

``CanonicalExpense`` is a frozen ``dataclass`` with explicit field order. The
derivation step produces modified copies via :func:`dataclasses.replace`;
records are never mutated after creation.

Field order (exact):
    - date: display string ``"<day> <Mon> <YYYY>"``, the raw text when it did
      not parse, or ``""`` when the row had no date
    - category: non-empty string
    - description: non-empty string
    - amount: float (``0.0`` when missing or malformed)
    - odometer: float | None (cumulative distance reading)
    - volume: float | None (fuel volume of the transaction)
    - rate: float | None (informational price per unit volume)
    - efficiency: float | None (distance per unit volume, fuel entries only)
    - parsed_date: date | None (sort/bucket key; serialized as ``iso_date``)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any


@dataclass(frozen=True, slots=True)
class CanonicalExpense:
    """A single normalized expense row."""

    date: str
    category: str
    description: str
    amount: float
    odometer: float | None = None
    volume: float | None = None
    rate: float | None = None
    efficiency: float | None = None
    parsed_date: date | None = None

    @property
    def is_fuel_point(self) -> bool:
        """True when the row carries a usable odometer/volume pairing."""

        return self.odometer is not None and self.volume is not None and self.volume > 0

    def as_dict(self) -> dict[str, Any]:
        """JSON-friendly view; keys are accepted back as raw row keys."""

        return {
            "date": self.date,
            "iso_date": self.parsed_date.isoformat() if self.parsed_date else None,
            "category": self.category,
            "description": self.description,
            "amount": self.amount,
            "odometer": self.odometer,
            "volume": self.volume,
            "rate": self.rate,
            "efficiency": self.efficiency,
        }


__all__ = ["CanonicalExpense"]
