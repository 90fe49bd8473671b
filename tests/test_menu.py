# tests/test_menu.py

"""Scripted sessions against the interactive menu."""

import io
import tempfile
import unittest
from collections.abc import Iterator
from pathlib import Path

from rich.console import Console

from price_tracker.cli.menu import MenuSession
from price_tracker.storage.ledger import PriceLedger


class _ScriptedInput:
    """Answers prompts from a fixed list, then signals end of input."""

    def __init__(self, answers: list[str]) -> None:
        self._answers: Iterator[str] = iter(answers)
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        try:
            return next(self._answers)
        except StopIteration:
            raise EOFError from None


class TestMenuSession(unittest.TestCase):
    """MenuSession end-to-end behaviour with injected I/O."""

    def setUp(self) -> None:
        """Bind a ledger to a temp store."""
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.tmp_dir = Path(self._tmp.name)
        self.ledger = PriceLedger(db_path=self.tmp_dir / "prices.csv")
        self.ledger.initialize()

    def _run(self, answers: list[str]) -> tuple[str, _ScriptedInput]:
        out = io.StringIO()
        console = Console(file=out, width=200, force_terminal=False)
        scripted = _ScriptedInput(answers)
        MenuSession(self.ledger, console=console, ask=scripted).run()
        return out.getvalue(), scripted

    def _seed(self) -> None:
        self.ledger.add("AirPods", "Electronics", 199.99, "https://a.example")
        self.ledger.add("Mouse", "Electronics", 19.99, "https://b.example")

    def test_exit_option(self) -> None:
        """Option 6 ends the loop."""
        output, _ = self._run(["6"])
        self.assertIn("Goodbye.", output)
        self.assertIn("1) Add product price", output)

    def test_end_of_input_exits(self) -> None:
        """Running out of input leaves the loop cleanly."""
        output, _ = self._run([])
        self.assertIn("Goodbye.", output)

    def test_invalid_option(self) -> None:
        """Unknown choices are reported and the menu repeats."""
        output, _ = self._run(["9", "6"])
        self.assertIn("Invalid option.", output)

    def test_add_price(self) -> None:
        """Option 1 stores a record with a decimal-comma price."""
        output, _ = self._run(
            ["1", "Mouse", "Electronics", "19,99", "https://b.example", "6"]
        )
        self.assertIn("Saved.", output)
        records = self.ledger.list_records()
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].price, 19.99)

    def test_add_invalid_price_returns_to_menu(self) -> None:
        """A bad price is reported and nothing is stored."""
        output, _ = self._run(["1", "Mouse", "Electronics", "cheap", "6"])
        self.assertIn("Invalid price", output)
        self.assertIn("Goodbye.", output)
        self.assertEqual(self.ledger.list_records(), [])

    def test_list_empty(self) -> None:
        """Listing an empty store says so."""
        output, _ = self._run(["2", "6"])
        self.assertIn("No entries.", output)

    def test_list_shows_records(self) -> None:
        """Listing renders every product."""
        self._seed()
        output, _ = self._run(["2", "6"])
        self.assertIn("AirPods", output)
        self.assertIn("199.99", output)
        self.assertIn("Mouse", output)

    def test_cheapest_all(self) -> None:
        """An empty category searches everything."""
        self._seed()
        output, _ = self._run(["3", "", "6"])
        self.assertIn("Cheapest option", output)
        self.assertIn("Mouse", output)

    def test_cheapest_unknown_category(self) -> None:
        """A category without records is reported."""
        self._seed()
        output, _ = self._run(["3", "Garden", "6"])
        self.assertIn("No entries for that category.", output)

    def test_export_default_name_canceled(self) -> None:
        """Declining the confirmation writes nothing."""
        self._seed()
        output, _ = self._run(["4", "n", "6"])
        self.assertIn("Export canceled.", output)

    def test_export_to_path(self) -> None:
        """Confirming exports to the given path with the filter."""
        self._seed()
        dest = self.tmp_dir / "out.csv"
        output, _ = self._run(["4", "y", str(dest), "Electronics", "6"])
        self.assertIn("Exported 2 row(s)", output)
        self.assertTrue(dest.exists())

    def test_delete_confirmed(self) -> None:
        """Choosing a number and confirming removes that record."""
        self._seed()
        output, scripted = self._run(["5", "1", "y", "6"])
        self.assertIn("1: AirPods | 199.99", output)
        self.assertIn("Deleted.", output)
        self.assertIn("Delete 'AirPods' (199.99)? (y/N)", scripted.prompts)
        names = [r.product for r in self.ledger.list_records()]
        self.assertEqual(names, ["Mouse"])

    def test_delete_declined(self) -> None:
        """Declining the confirmation keeps the record."""
        self._seed()
        output, _ = self._run(["5", "2", "n", "6"])
        self.assertIn("Canceled.", output)
        self.assertEqual(len(self.ledger.list_records()), 2)

    def test_delete_out_of_range(self) -> None:
        """Numbers outside the listing are rejected."""
        self._seed()
        output, _ = self._run(["5", "3", "6"])
        self.assertIn("Out of range.", output)
        self.assertEqual(len(self.ledger.list_records()), 2)

    def test_delete_not_a_number(self) -> None:
        """Non-numeric selections are rejected."""
        self._seed()
        output, _ = self._run(["5", "first", "6"])
        self.assertIn("Invalid number.", output)

    def test_delete_empty_store(self) -> None:
        """Nothing to delete in an empty store."""
        output, _ = self._run(["5", "6"])
        self.assertIn("No entries.", output)

    def test_storage_error_returns_to_menu(self) -> None:
        """Ledger errors are printed and the loop continues."""
        self._seed()
        output, _ = self._run(
            ["4", "y", str(self.tmp_dir / "nope" / "out.csv"), "", "6"]
        )
        self.assertIn("Error:", output)
        self.assertIn("Goodbye.", output)


if __name__ == "__main__":
    unittest.main()
