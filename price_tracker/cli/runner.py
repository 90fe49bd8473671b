# price_tracker/cli/runner.py

"""Headless commands: list, cheapest and export without the menu."""

import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from price_tracker.cli.menu import build_records_table
from price_tracker.models.price_record import PriceRecord
from price_tracker.storage.errors import PriceTrackerError
from price_tracker.storage.ledger import PriceLedger

logger = logging.getLogger("price_tracker.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _records_to_dicts(
    records: list[PriceRecord],
) -> list[dict[str, object]]:
    """Serialise records to plain dicts for JSON output."""
    return [
        {
            "product": r.product,
            "category": r.category,
            "price": r.price,
            "url": r.url,
            "timestamp": r.timestamp,
        }
        for r in records
    ]


def _emit(
    records: list[PriceRecord], output_format: str, title: str
) -> None:
    if output_format == "table":
        Console().print(build_records_table(records, title=title))
    else:
        json.dump(
            _records_to_dicts(records),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")


def run_list(ledger: PriceLedger, output_format: str) -> int:
    """Print every record; 0 on success, 1 on failure."""
    try:
        snapshot = ledger.read()
    except PriceTrackerError as exc:
        _err.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 1

    if snapshot.skipped:
        _err.print(
            f"[yellow]Skipped {len(snapshot.skipped)} unreadable "
            "line(s)[/yellow]"
        )
    if not snapshot.records:
        _err.print("[yellow]No entries.[/yellow]")
    _emit(snapshot.records, output_format, "Prices")
    return 0


def run_cheapest(
    ledger: PriceLedger, category: str | None, output_format: str
) -> int:
    """Print the cheapest record; 1 when nothing matches."""
    try:
        best = ledger.cheapest(category)
    except PriceTrackerError as exc:
        _err.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 1

    if best is None:
        scope = f" in category '{category}'" if category else ""
        _err.print(f"[yellow]No entries{escape(scope)}.[/yellow]")
        return 1
    _emit([best], output_format, "Cheapest option")
    return 0


def run_export(
    ledger: PriceLedger, destination: Path, category: str | None
) -> int:
    """Export to *destination*; 0 on success, 1 on failure."""
    try:
        count = ledger.export(destination, category)
    except PriceTrackerError as exc:
        logger.error("Headless export failed: %s", exc)
        _err.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 1

    _err.print(
        f"[green]✓ Exported {count} row(s) to "
        f"{escape(str(destination))}[/green]"
    )
    return 0
