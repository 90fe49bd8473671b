# price_tracker/cli/main.py

"""Entry point for the price tracker (interactive menu or headless CLI)."""

import argparse
import logging
import sys
from pathlib import Path

from price_tracker.config.logging_config import setup_logging
from price_tracker.config.settings import Settings
from price_tracker.storage.errors import StorageError
from price_tracker.storage.ledger import PriceLedger

logger = logging.getLogger("price_tracker.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="price_tracker",
        description="Record and compare product prices across shops.",
        epilog="Run without an action to open the interactive menu.",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        dest="db_path",
        help=f"Price store CSV file (default: {Settings.PRICE_DB_PATH}).",
    )
    actions = parser.add_mutually_exclusive_group()
    actions.add_argument(
        "--list",
        action="store_true",
        default=False,
        dest="list_records",
        help="Print every stored price and exit.",
    )
    actions.add_argument(
        "--cheapest",
        action="store_true",
        default=False,
        help="Print the cheapest stored price and exit.",
    )
    actions.add_argument(
        "--export",
        type=Path,
        default=None,
        dest="export_path",
        help="Write the stored prices to this CSV file and exit.",
    )
    parser.add_argument(
        "-c",
        "--category",
        default=None,
        help="Restrict --cheapest / --export to one category.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="table",
        dest="output_format",
        help="Output format for --list / --cheapest (default: table).",
    )
    return parser


def _run_menu(ledger: PriceLedger) -> None:
    """Launch the interactive menu."""
    from price_tracker.cli.menu import MenuSession

    try:
        MenuSession(ledger).run()
    except Exception:
        logger.critical("Fatal error during menu session", exc_info=True)
        raise
    finally:
        logger.info("price_tracker menu shutting down")


def main() -> None:
    """Route to the menu (no action) or a headless command."""
    parser = _build_parser()
    args = parser.parse_args()
    if args.category is not None and not (
        args.cheapest or args.export_path is not None
    ):
        parser.error("--category requires --cheapest or --export")

    try:
        log_file = setup_logging(args.db_path)
    except OSError as exc:
        print(f"Error: cannot set up logging: {exc}", file=sys.stderr)
        sys.exit(1)
    logger.info("price_tracker starting, log file: %s", log_file)

    ledger = PriceLedger(db_path=args.db_path)
    try:
        ledger.initialize()
    except StorageError as exc:
        logger.critical("Cannot open price store: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.list_records:
        from price_tracker.cli.runner import run_list

        sys.exit(run_list(ledger, args.output_format))
    elif args.cheapest:
        from price_tracker.cli.runner import run_cheapest

        sys.exit(run_cheapest(ledger, args.category, args.output_format))
    elif args.export_path is not None:
        from price_tracker.cli.runner import run_export

        sys.exit(run_export(ledger, args.export_path, args.category))
    else:
        _run_menu(ledger)


if __name__ == "__main__":
    main()
