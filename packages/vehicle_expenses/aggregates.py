"""Aggregates over normalized records for the presentation layer.

All helpers expect records in display order (newest first), as returned by
:func:`vehicle_expenses.normalizers.normalize_expenses`.
"""

from __future__ import annotations

from collections.abc import Sequence

from .dates import month_key
from .models import ExpenseSummary
from .records import CanonicalExpense


def total_amount(records: Sequence[CanonicalExpense]) -> float:
    return sum((r.amount for r in records), 0.0)


def category_totals(records: Sequence[CanonicalExpense]) -> dict[str, float]:
    """Sum of amounts per category, in first-seen order."""

    totals: dict[str, float] = {}
    for r in records:
        totals[r.category] = totals.get(r.category, 0.0) + r.amount
    return totals


def monthly_totals(records: Sequence[CanonicalExpense]) -> dict[str, float]:
    """Sum of amounts per ``"<Mon> <YY>"`` bucket, oldest month first.

    Records without a parsed date are left out.
    """

    buckets: dict[tuple[int, int], float] = {}
    labels: dict[tuple[int, int], str] = {}
    for r in records:
        if r.parsed_date is None:
            continue
        k = (r.parsed_date.year, r.parsed_date.month)
        buckets[k] = buckets.get(k, 0.0) + r.amount
        labels.setdefault(k, month_key(r.parsed_date))
    return {labels[k]: buckets[k] for k in sorted(buckets)}


def average_efficiency(records: Sequence[CanonicalExpense]) -> float | None:
    values = [r.efficiency for r in records if r.efficiency is not None]
    if not values:
        return None
    return sum(values) / len(values)


def latest_odometer(records: Sequence[CanonicalExpense]) -> float | None:
    """First present odometer reading scanning newest to oldest."""

    for r in records:
        if r.odometer is not None:
            return r.odometer
    return None


def summarize(records: Sequence[CanonicalExpense]) -> ExpenseSummary:
    return ExpenseSummary(
        count=len(records),
        total_spent=total_amount(records),
        last_expense=records[0] if records else None,
        category_totals=category_totals(records),
        monthly_totals=monthly_totals(records),
        average_efficiency=average_efficiency(records),
        latest_odometer=latest_odometer(records),
    )


__all__ = [
    "average_efficiency",
    "category_totals",
    "latest_odometer",
    "monthly_totals",
    "summarize",
    "total_amount",
]
