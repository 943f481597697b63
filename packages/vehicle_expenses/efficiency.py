"""Fuel-efficiency derivation over a chronologically ordered record stream.

The scan is a fold whose only state is the odometer reading of the most
recent fuel point (a record with an odometer and a positive volume). Each
fuel point after the first gets ``(odometer - previous) / volume`` when the
distance is positive; a rollback or duplicate reading leaves the efficiency
unset but still becomes the new reference. Other records pass through
untouched.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from typing import TypeAlias, cast

from .records import CanonicalExpense

FuelState: TypeAlias = float | None
"""Odometer reading of the last fuel point seen, or ``None`` before the first."""


def fold_step(state: FuelState, record: CanonicalExpense) -> tuple[FuelState, CanonicalExpense]:
    """Apply one record to the carried state; return ``(new_state, record)``."""

    if not record.is_fuel_point:
        return state, record
    odometer = cast(float, record.odometer)
    volume = cast(float, record.volume)

    efficiency: float | None = None
    if state is not None:
        distance = odometer - state
        if distance > 0:
            efficiency = distance / volume

    if efficiency != record.efficiency:
        record = replace(record, efficiency=efficiency)
    return odometer, record


def derive_efficiency(records: Iterable[CanonicalExpense]) -> list[CanonicalExpense]:
    """Return ``records`` (ascending chronological order) with efficiency set."""

    state: FuelState = None
    out: list[CanonicalExpense] = []
    for record in records:
        state, record = fold_step(state, record)
        out.append(record)
    return out


__all__ = ["FuelState", "derive_efficiency", "fold_step"]
