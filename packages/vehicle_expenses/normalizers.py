"""Raw sheet rows -> canonical expense records.

Pipeline (pure, single pass):

1. shape check (a list of row mappings, else :class:`SnapshotShapeError`)
2. drop rows without a single populated value
3. field reconciliation, date canonicalization and numeric coercion
4. ascending chronological order + fuel-efficiency fold
5. display order (newest first)

The correction year is an explicit argument; nothing here reads the clock or
the environment.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from .config import NormalizationPolicy
from .efficiency import derive_efficiency
from .fields import is_empty_row, reconcile_record
from .logging_setup import get_logger
from .models import RawRecord, SnapshotShapeError
from .ordering import derivation_order, display_order
from .records import CanonicalExpense

logger = get_logger(__name__)


def ensure_row_list(rows: Any) -> list[RawRecord]:
    """Validate the top-level shape and return the rows as a list."""

    if not isinstance(rows, (list, tuple)):
        raise SnapshotShapeError(
            f"expected a list of row objects, got {type(rows).__name__}"
        )
    for pos, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise SnapshotShapeError(
                f"row {pos} is {type(row).__name__}, expected an object of named fields"
            )
    return list(rows)


def normalize_expenses(
    rows: Sequence[RawRecord],
    *,
    current_year: int,
    policy: NormalizationPolicy | None = None,
) -> list[CanonicalExpense]:
    """Normalize raw rows into display-ordered :class:`CanonicalExpense` records.

    Parameters
    ----------
    rows:
        Raw spreadsheet rows. Must be a list (or tuple) of mappings.
    current_year:
        Year substituted into dates parsed with a placeholder year.
    policy:
        Data-source specific switches; defaults to :class:`NormalizationPolicy`.

    Raises
    ------
    SnapshotShapeError
        When ``rows`` is not a list of row mappings.
    """

    policy = policy or NormalizationPolicy()
    raw_rows = ensure_row_list(rows)

    populated = [r for r in raw_rows if not is_empty_row(r)]
    dropped = len(raw_rows) - len(populated)

    records = [reconcile_record(r, current_year=current_year, policy=policy) for r in populated]
    derived = derive_efficiency(derivation_order(records))

    logger.debug(
        "normalized %d rows (%d empty dropped, %d with efficiency)",
        len(derived),
        dropped,
        sum(1 for r in derived if r.efficiency is not None),
    )
    return display_order(derived)


__all__ = ["ensure_row_list", "normalize_expenses"]
