"""Public interface for the ``vehicle_expenses`` package.

Re-exports the normalization entry point, the canonical record, aggregates
and snapshot helpers as the stable import surface. No runtime logic here.
"""

from .aggregates import (
    average_efficiency,
    category_totals,
    latest_odometer,
    monthly_totals,
    summarize,
    total_amount,
)
from .config import NormalizationPolicy, policy_from_env
from .models import ExpenseSummary, RawRecord, Snapshot, SnapshotShapeError
from .normalizers import normalize_expenses
from .records import CanonicalExpense
from .snapshot import export_csv_snapshot, load_snapshot, parse_snapshot

__all__ = [
    # Normalization
    "normalize_expenses",
    "NormalizationPolicy",
    "policy_from_env",
    # Aggregates
    "summarize",
    "total_amount",
    "category_totals",
    "monthly_totals",
    "average_efficiency",
    "latest_odometer",
    # Snapshot I/O
    "load_snapshot",
    "parse_snapshot",
    "export_csv_snapshot",
    # Models / types
    "CanonicalExpense",
    "ExpenseSummary",
    "RawRecord",
    "Snapshot",
    "SnapshotShapeError",
]
