"""CLI for the ``vehicle_expenses`` package.

Command handlers (``cmd_*``) hold the logic and return a process exit code;
the Typer commands below only parse options and delegate. Environment
variables are loaded from a local ``.env`` via ``python-dotenv`` before any
command runs.
"""

from __future__ import annotations

import csv
import json
import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from typer.models import OptionInfo

from .aggregates import summarize
from .config import NormalizationPolicy, policy_from_env, resolve_current_year
from .logging_setup import configure_logging, get_logger
from .models import ExpenseSummary, Snapshot, SnapshotShapeError
from .normalizers import normalize_expenses
from .records import CanonicalExpense
from .snapshot import export_csv_snapshot, load_snapshot

logger = get_logger(__name__)


# ---- Helpers -----------------------------------------------------------------


def _resolve_policy(blank_category_is_fuel: bool | None) -> NormalizationPolicy:
    if blank_category_is_fuel is None:
        return policy_from_env()
    return NormalizationPolicy(blank_category_is_fuel=blank_category_is_fuel)


def _load_and_normalize(
    snapshot_path: str,
    *,
    current_year: int | None,
    blank_category_is_fuel: bool | None,
) -> tuple[Snapshot, list[CanonicalExpense]] | None:
    """Load + normalize, reporting failures on stderr (``None`` on failure)."""

    try:
        snapshot = load_snapshot(snapshot_path)
        records = normalize_expenses(
            snapshot.expenses,
            current_year=resolve_current_year(current_year),
            policy=_resolve_policy(blank_category_is_fuel),
        )
        logger.info("normalized %d records from %s", len(records), snapshot_path)
    except FileNotFoundError:
        print(f"Error: File not found: {snapshot_path}", file=sys.stderr)
        return None
    except PermissionError:
        print(f"Error: Permission denied: {snapshot_path}", file=sys.stderr)
        return None
    except UnicodeDecodeError as e:
        print(f"Error: Snapshot is not UTF-8 text: {e}", file=sys.stderr)
        return None
    except SnapshotShapeError as e:
        print(f"Error: Failed to load data: {e}", file=sys.stderr)
        return None
    except OSError as e:
        print(f"Error: Unexpected failure reading '{snapshot_path}': {e}", file=sys.stderr)
        return None
    return snapshot, records


def _money(value: float) -> str:
    return f"{value:,.2f}"


def _render_summary(console: Console, summary: ExpenseSummary, snapshot: Snapshot) -> None:
    stats = Table(title="Vehicle expenses", show_header=False)
    stats.add_column("Stat")
    stats.add_column("Value", justify="right")
    stats.add_row("Total Spent", _money(summary.total_spent))
    stats.add_row("Total Entries", str(summary.count))
    last = summary.last_expense
    stats.add_row("Last Expense", _money(last.amount) if last else "-")
    stats.add_row("Last Service", (last.date or "-") if last else "-")
    stats.add_row(
        "Avg Efficiency",
        f"{summary.average_efficiency:,.2f}" if summary.average_efficiency is not None else "-",
    )
    stats.add_row(
        "Odometer",
        f"{summary.latest_odometer:,.0f}" if summary.latest_odometer is not None else "-",
    )
    stats.add_row(
        "Last Updated",
        snapshot.last_updated.isoformat() if snapshot.last_updated else "-",
    )
    console.print(stats)

    by_category = Table(title="By category")
    by_category.add_column("Category")
    by_category.add_column("Amount", justify="right")
    for category, amount in summary.category_totals.items():
        by_category.add_row(category, _money(amount))
    console.print(by_category)

    by_month = Table(title="By month")
    by_month.add_column("Month")
    by_month.add_column("Amount", justify="right")
    for month, amount in summary.monthly_totals.items():
        by_month.add_row(month, _money(amount))
    console.print(by_month)


# ---- Command handlers --------------------------------------------------------


def cmd_normalize(
    snapshot_path: str,
    *,
    current_year: int | None = None,
    blank_category_is_fuel: bool | None = None,
) -> int:
    """Print normalized records (newest first) as JSON to stdout."""

    loaded = _load_and_normalize(
        snapshot_path,
        current_year=current_year,
        blank_category_is_fuel=blank_category_is_fuel,
    )
    if loaded is None:
        return 1
    snapshot, records = loaded
    payload = {
        "lastUpdated": snapshot.last_updated.isoformat() if snapshot.last_updated else None,
        "expenses": [r.as_dict() for r in records],
    }
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


def cmd_summary(
    snapshot_path: str,
    *,
    current_year: int | None = None,
    blank_category_is_fuel: bool | None = None,
    console: Console | None = None,
) -> int:
    """Render summary statistics and per-category/per-month totals."""

    loaded = _load_and_normalize(
        snapshot_path,
        current_year=current_year,
        blank_category_is_fuel=blank_category_is_fuel,
    )
    if loaded is None:
        return 1
    snapshot, records = loaded
    _render_summary(console or Console(), summarize(records), snapshot)
    return 0


def cmd_export_csv(csv_path: str, out_path: str) -> int:
    """Export a sheet CSV into a snapshot JSON file."""

    try:
        count = export_csv_snapshot(csv_path, out_path)
    except FileNotFoundError:
        print(f"Error: File not found: {csv_path}", file=sys.stderr)
        return 1
    except PermissionError as e:
        print(f"Error: Permission denied: {e.filename or csv_path}", file=sys.stderr)
        return 1
    except (csv.Error, UnicodeDecodeError) as e:
        print(f"Error: Failed to parse CSV: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(
            f"Error: Unexpected failure exporting '{csv_path}' to '{out_path}': {e}",
            file=sys.stderr,
        )
        return 1
    typer.echo(f"Success! {count} rows saved to {out_path}")
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Normalize and summarize vehicle expense snapshots (fuel, service, insurance). "
        "Loads settings from a local .env before running."
    ),
)

# Module-level option object to satisfy ruff B008 (no calls in parameter
# defaults); shared by the commands that read a snapshot.
SNAPSHOT_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--snapshot",
    help="Path to a data.json snapshot",
    dir_okay=False,
    file_okay=True,
    exists=False,  # allow non-existent here; the handler reports missing files
)

_CURRENT_YEAR_HELP = (
    "Year applied to year-less dates (env VEHICLE_EXPENSES_CURRENT_YEAR, else today)."
)
_BLANK_FUEL_HELP = (
    "Treat rows without a category as Fuel (env VEHICLE_EXPENSES_BLANK_CATEGORY_IS_FUEL)."
)


@app.command("normalize")
def normalize_cmd(
    snapshot: Annotated[Path, SNAPSHOT_OPTION],
    *,
    current_year: int | None = typer.Option(None, "--current-year", help=_CURRENT_YEAR_HELP),
    blank_category_is_fuel: bool | None = typer.Option(
        None, "--blank-category-is-fuel/--no-blank-category-is-fuel", help=_BLANK_FUEL_HELP
    ),
) -> None:
    """Print normalized expense records as JSON."""

    raise typer.Exit(
        cmd_normalize(
            str(snapshot),
            current_year=current_year,
            blank_category_is_fuel=blank_category_is_fuel,
        )
    )


@app.command("summary")
def summary_cmd(
    snapshot: Annotated[Path, SNAPSHOT_OPTION],
    *,
    current_year: int | None = typer.Option(None, "--current-year", help=_CURRENT_YEAR_HELP),
    blank_category_is_fuel: bool | None = typer.Option(
        None, "--blank-category-is-fuel/--no-blank-category-is-fuel", help=_BLANK_FUEL_HELP
    ),
) -> None:
    """Show totals, efficiency and odometer statistics."""

    raise typer.Exit(
        cmd_summary(
            str(snapshot),
            current_year=current_year,
            blank_category_is_fuel=blank_category_is_fuel,
        )
    )


@app.command("export-csv")
def export_csv_cmd(
    *,
    csv_path: Path = typer.Option(..., "--csv-path", help="Spreadsheet exported as CSV"),
    out: Path = typer.Option(Path("public/data.json"), "--out", help="Snapshot JSON to write"),
) -> None:
    """Export a spreadsheet CSV into the snapshot JSON file."""

    raise typer.Exit(cmd_export_csv(str(csv_path), str(out)))


@app.callback()
def _root(
    log_level: str | None = typer.Option(
        None, "--log-level", help="Logging level name or number (env VEHICLE_EXPENSES_LOG_LEVEL)"
    ),
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding
    already-set variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)


def main() -> None:  # pragma: no cover - console script entry point
    app()


if __name__ == "__main__":  # pragma: no cover
    # Running as a module: `python -m vehicle_expenses.cli`
    main()
