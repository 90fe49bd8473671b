# price_tracker/cli/menu.py

"""Interactive numbered menu driving the price ledger."""

import logging
from collections.abc import Callable

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table

from price_tracker.config.settings import Settings
from price_tracker.filters.record_validator import parse_price
from price_tracker.models.price_record import PriceRecord, format_price
from price_tracker.storage.errors import PriceTrackerError
from price_tracker.storage.ledger import PriceLedger

logger = logging.getLogger("price_tracker.cli")

AskFn = Callable[[str], str]

MENU_OPTIONS: list[tuple[str, str]] = [
    ("1", "Add product price"),
    ("2", "List all prices"),
    ("3", "Show cheapest option"),
    ("4", "Export data to CSV"),
    ("5", "Delete a product"),
    ("6", "Exit"),
]


def build_records_table(
    records: list[PriceRecord], title: str = "Prices"
) -> Table:
    """Render records as a Rich table with a 1-based ``#`` column."""
    table = Table(title=title, show_lines=True, title_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Product", max_width=40)
    table.add_column("Category", style="magenta")
    table.add_column("Price", justify="right", style="green")
    table.add_column("URL", overflow="fold", style="dim")
    table.add_column("Timestamp", style="dim")

    for idx, r in enumerate(records, 1):
        table.add_row(
            str(idx),
            escape(r.product),
            escape(r.category) or "—",
            format_price(r.price),
            escape(r.url),
            r.timestamp,
        )
    return table


def _is_yes(answer: str) -> bool:
    return answer.strip().lower() in {"y", "yes"}


class MenuSession:
    """One interactive session against a ledger.

    Input comes from *ask* and output goes to *console*, so tests can
    script a whole session without a terminal.
    """

    def __init__(
        self,
        ledger: PriceLedger,
        console: Console | None = None,
        ask: AskFn | None = None,
    ) -> None:
        self.ledger = ledger
        self.console = console or Console()
        self._ask: AskFn = ask or self._rich_ask
        self._handlers: dict[str, Callable[[], None]] = {
            "1": self.add_price,
            "2": self.list_prices,
            "3": self.show_cheapest,
            "4": self.export_csv,
            "5": self.delete_product,
        }

    def _rich_ask(self, prompt: str) -> str:
        return Prompt.ask(
            prompt, console=self.console, default="", show_default=False
        )

    def ask(self, prompt: str) -> str:
        """Prompt for one line of input, trimmed."""
        return self._ask(prompt).strip()

    # ── Loop ─────────────────────────────────────────────

    def run(self) -> None:
        """Show the menu until the user exits or input ends."""
        while True:
            self.console.print("\n[bold]== Price Tracker ==[/bold]")
            for key, label in MENU_OPTIONS:
                self.console.print(f"{key}) {label}")

            try:
                choice = self.ask("Select an option")
                if choice == "6":
                    self.console.print("Goodbye.")
                    return
                handler = self._handlers.get(choice)
                if handler is None:
                    self.console.print("[yellow]Invalid option.[/yellow]")
                    continue
                handler()
            except PriceTrackerError as exc:
                logger.warning("Menu action failed: %s", exc)
                self.console.print(f"[red]Error: {escape(str(exc))}[/red]")
            except (EOFError, KeyboardInterrupt):
                logger.info("Input closed, leaving menu")
                self.console.print("\nGoodbye.")
                return

    # ── Actions ──────────────────────────────────────────

    def add_price(self) -> None:
        """Prompt for the four fields and append a record."""
        product = self.ask("Product name")
        category = self.ask("Category")
        price = parse_price(self.ask("Price"))
        url = self.ask("Product link (URL)")
        self.ledger.add(product, category, price, url)
        self.console.print("[green]Saved.[/green]")

    def list_prices(self) -> None:
        """Print every stored record."""
        snapshot = self.ledger.read()
        self._report_skipped(len(snapshot.skipped))
        if not snapshot.records:
            self.console.print("No entries.")
            return
        self.console.print(build_records_table(snapshot.records))

    def show_cheapest(self) -> None:
        """Print the cheapest record, optionally within one category."""
        if not self.ledger.list_records():
            self.console.print("No entries.")
            return
        category = self.ask("Category to search (leave empty for all)")
        best = self.ledger.cheapest(category or None)
        if best is None:
            self.console.print("No entries for that category.")
            return
        self.console.print(
            build_records_table([best], title="Cheapest option")
        )

    def export_csv(self) -> None:
        """Confirm, then write a filtered copy of the store."""
        if not _is_yes(self.ask("Export data to CSV? (y/N)")):
            self.console.print("Export canceled.")
            return
        destination = self.ask(
            f"Filename (default {Settings.DEFAULT_EXPORT_NAME})"
        ) or Settings.DEFAULT_EXPORT_NAME
        category = self.ask("Category to export (leave empty for all)")
        count = self.ledger.export(destination, category or None)
        self.console.print(
            f"[green]Exported {count} row(s) to {escape(destination)}[/green]"
        )

    def delete_product(self) -> None:
        """Pick a record by number and remove it after confirmation."""
        records = self.ledger.list_records()
        if not records:
            self.console.print("No entries.")
            return
        for idx, r in enumerate(records, 1):
            self.console.print(
                f"{idx}: {r.product} | {format_price(r.price)}",
                markup=False,
            )

        selection = self.ask("Number to delete (or empty to cancel)")
        if not selection:
            self.console.print("Canceled.")
            return
        try:
            index = int(selection)
        except ValueError:
            self.console.print("[yellow]Invalid number.[/yellow]")
            return
        if not 1 <= index <= len(records):
            self.console.print("[yellow]Out of range.[/yellow]")
            return

        chosen = records[index - 1]
        prompt = (
            f"Delete '{chosen.product}' "
            f"({format_price(chosen.price)})? (y/N)"
        )
        if not _is_yes(self.ask(prompt)):
            self.console.print("Canceled.")
            return
        self.ledger.delete(index)
        self.console.print("[green]Deleted.[/green]")

    def _report_skipped(self, count: int) -> None:
        if count:
            self.console.print(
                f"[yellow]Skipped {count} unreadable line(s) "
                f"in {escape(str(self.ledger.db_path))}; see the log.[/yellow]"
            )
