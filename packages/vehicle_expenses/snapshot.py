"""Snapshot file I/O: load ``data.json`` and export a sheet CSV into it.

Snapshot shape::

    {"lastUpdated": "<ISO-8601>", "expenses": [{<header>: <cell>, ...}, ...]}

A bare JSON array of rows is accepted as well (no timestamp). Anything else
is a :class:`SnapshotShapeError`.
"""

from __future__ import annotations

import csv
import json
from datetime import UTC, datetime
from os import PathLike
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .fields import is_empty_row
from .logging_setup import get_logger
from .models import Snapshot, SnapshotShapeError

logger = get_logger(__name__)


def parse_snapshot(data: Any) -> Snapshot:
    """Validate decoded JSON into a :class:`Snapshot`."""

    if isinstance(data, list):
        data = {"expenses": data}
    if not isinstance(data, dict):
        raise SnapshotShapeError(
            f"snapshot must be an object or an array of rows, got {type(data).__name__}"
        )
    try:
        return Snapshot.model_validate(data)
    except ValidationError as exc:
        raise SnapshotShapeError(f"malformed snapshot: {exc}") from exc


def load_snapshot(path: str | PathLike[str]) -> Snapshot:
    """Read and validate a snapshot file.

    ``FileNotFoundError``/``PermissionError`` propagate unchanged; undecodable
    JSON and shape problems raise :class:`SnapshotShapeError`.
    """

    p = Path(path)
    text = p.read_text(encoding="utf-8-sig")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SnapshotShapeError(f"snapshot is not valid JSON: {p}: {exc}") from exc
    snapshot = parse_snapshot(data)
    logger.info("loaded %d raw rows from %s", len(snapshot.expenses), p)
    return snapshot


def _read_sheet_rows(f: Any) -> list[dict[str, str]]:
    reader = csv.DictReader(f)
    if not reader.fieldnames:
        raise csv.Error("CSV appears to have no header row")
    rows: list[dict[str, str]] = []
    for row in reader:
        # DictReader may add a None key collecting surplus cells; drop it.
        rows.append({k: (v if v is not None else "") for k, v in row.items() if k is not None})
    return rows


def export_csv_snapshot(
    csv_path: str | PathLike[str],
    out_path: str | PathLike[str],
    *,
    now: datetime | None = None,
) -> int:
    """Write the rows of a sheet CSV export as a snapshot file.

    Rows whose cells are all blank are skipped. Returns the number of rows
    written. ``now`` stamps ``lastUpdated`` (defaults to the current UTC time).
    """

    with Path(csv_path).open(encoding="utf-8-sig", newline="") as f:
        rows = [r for r in _read_sheet_rows(f) if not is_empty_row(r)]

    snapshot = Snapshot(last_updated=now or datetime.now(UTC), expenses=rows)
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(
        json.dumps(snapshot.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False)
        + "\n",
        encoding="utf-8",
    )
    logger.info("exported %d rows from %s to %s", len(rows), csv_path, out)
    return len(rows)


__all__ = ["export_csv_snapshot", "load_snapshot", "parse_snapshot"]
