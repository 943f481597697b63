"""Chronological orderings used for display and for efficiency derivation."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from .dates import EPOCH
from .records import CanonicalExpense


def _chronological_key(record: CanonicalExpense) -> tuple[date, float]:
    # Unparseable dates sort as the epoch, i.e. oldest; a missing odometer as 0.
    return (
        record.parsed_date or EPOCH,
        record.odometer if record.odometer is not None else 0.0,
    )


def display_order(records: Iterable[CanonicalExpense]) -> list[CanonicalExpense]:
    """Newest first; undated records last.

    Same-day records put the higher odometer reading first, so the head of
    the list is the latest entry.
    """

    return sorted(records, key=_chronological_key, reverse=True)


def derivation_order(records: Iterable[CanonicalExpense]) -> list[CanonicalExpense]:
    """Oldest first; same-day ties broken by ascending odometer (missing = 0)."""

    return sorted(records, key=_chronological_key)


__all__ = ["derivation_order", "display_order"]
