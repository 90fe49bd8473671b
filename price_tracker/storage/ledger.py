# price_tracker/storage/ledger.py

"""CSV-backed price ledger: the single source of truth for records."""

import csv
import io
import logging
import os
import stat
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from price_tracker.config.settings import Settings
from price_tracker.filters.category_filter import filter_by_category
from price_tracker.filters.record_validator import (
    require_text,
    validate_price,
)
from price_tracker.models.price_record import PriceRecord, utc_timestamp
from price_tracker.storage.errors import (
    DataCorruptionError,
    IndexOutOfRangeError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger("price_tracker.storage")


@dataclass
class LedgerReadResult:
    """Records loaded from the store plus the lines that were skipped."""

    records: list[PriceRecord]
    skipped: list[DataCorruptionError] = field(default_factory=list)
    legacy: bool = False


class PriceLedger:
    """Price records persisted in a flat CSV file.

    Every operation reloads the file; nothing is cached between calls.
    Reads skip corrupt lines with a warning, while ``delete`` refuses to
    rewrite a store that holds any, since the rewrite would drop them.
    """

    def __init__(
        self,
        db_path: Path | None = None,
        case_sensitive: bool | None = None,
    ) -> None:
        self.db_path: Path = Path(db_path or Settings.PRICE_DB_PATH)
        self.case_sensitive: bool = (
            Settings.CATEGORY_CASE_SENSITIVE
            if case_sensitive is None
            else case_sensitive
        )
        logger.debug("PriceLedger bound to %s", self.db_path)

    # ── Store lifecycle ──────────────────────────────────

    def initialize(self) -> None:
        """Create the store with its header line if it does not exist."""
        path = self.db_path
        try:
            if path.exists() and path.stat().st_size > 0:
                return
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", newline="", encoding="utf-8") as f:
                csv.writer(f).writerow(Settings.CSV_HEADER)
        except OSError as exc:
            logger.error("Cannot create price store %s", path, exc_info=True)
            msg = f"Cannot create price store {path}: {exc}"
            raise StorageError(msg) from exc
        logger.info("Created price store at %s", path)

    # ── Reading ──────────────────────────────────────────

    def read(self) -> LedgerReadResult:
        """Load every well-formed record in file order."""
        self.initialize()
        records: list[PriceRecord] = []
        skipped: list[DataCorruptionError] = []

        try:
            with open(
                self.db_path, newline="", encoding="utf-8-sig"
            ) as f:
                reader = csv.reader(f)
                legacy = self._check_header(next(reader, None))
                for row in reader:
                    if not row:
                        continue
                    try:
                        records.append(
                            PriceRecord.from_row(
                                row, reader.line_num, legacy
                            )
                        )
                    except DataCorruptionError as exc:
                        logger.warning(
                            "Skipping corrupt line in %s: %s",
                            self.db_path,
                            exc,
                        )
                        skipped.append(exc)
        except csv.Error as exc:
            msg = f"malformed CSV ({exc})"
            raise DataCorruptionError(reader.line_num, msg) from exc
        except (OSError, UnicodeDecodeError) as exc:
            logger.error(
                "Cannot read price store %s", self.db_path, exc_info=True
            )
            msg = f"Cannot read price store {self.db_path}: {exc}"
            raise StorageError(msg) from exc

        logger.debug(
            "Loaded %d records from %s (%d skipped)",
            len(records),
            self.db_path,
            len(skipped),
        )
        return LedgerReadResult(
            records=records, skipped=skipped, legacy=legacy
        )

    def list_records(self) -> list[PriceRecord]:
        """Return all records in insertion order."""
        return self.read().records

    def cheapest(self, category: str | None = None) -> PriceRecord | None:
        """Return the lowest-priced record, optionally within a category.

        Ties go to the record stored first.  Returns ``None`` when no
        record matches.
        """
        candidates = filter_by_category(
            self.read().records, category, self.case_sensitive
        )
        if not candidates:
            return None
        return min(candidates, key=lambda r: r.price)

    # ── Writing ──────────────────────────────────────────

    def add(
        self, product: str, category: str, price: float, url: str
    ) -> PriceRecord:
        """Append a new observation stamped with the current UTC time."""
        require_text(product, "product")
        record = PriceRecord(
            product=product,
            category=category,
            price=validate_price(price),
            url=url,
            timestamp=utc_timestamp(),
        )

        self.initialize()
        if self._is_legacy_store():
            # Upgrade to the five-column layout rather than mix layouts
            snapshot = self.read()
            self._refuse_if_corrupt(snapshot)
            self._rewrite([*snapshot.records, record])
            logger.info(
                "Upgraded legacy store %s while adding '%s'",
                self.db_path,
                record.product,
            )
        else:
            self._append(record)

        logger.info(
            "Added '%s' (%s) at %s",
            record.product,
            record.category or "-",
            record.price,
        )
        return record

    def export(
        self, destination: str | Path, category: str | None = None
    ) -> int:
        """Write the (optionally filtered) records to *destination*.

        The destination is overwritten.  Returns the number of rows
        written, excluding the header.
        """
        dest = Path(destination)
        if dest.resolve() == self.db_path.resolve():
            msg = f"Refusing to export over the price store itself: {dest}"
            raise ValidationError(msg)

        records = filter_by_category(
            self.read().records, category, self.case_sensitive
        )

        try:
            with open(dest, "w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f)
                writer.writerow(Settings.CSV_HEADER)
                for record in records:
                    writer.writerow(record.to_row())
        except OSError as exc:
            logger.error("Export to %s failed", dest, exc_info=True)
            msg = f"Cannot write export file {dest}: {exc}"
            raise StorageError(msg) from exc

        logger.info(
            "Exported %d records (category=%s) to %s",
            len(records),
            category or "all",
            dest,
        )
        return len(records)

    def delete(self, index: int) -> PriceRecord:
        """Remove the record at 1-based *index* and rewrite the store."""
        if isinstance(index, bool) or not isinstance(index, int):
            msg = f"Index must be an integer, got {index!r}"
            raise TypeError(msg)
        snapshot = self.read()
        records = snapshot.records
        if not 1 <= index <= len(records):
            raise IndexOutOfRangeError(index, len(records))
        self._refuse_if_corrupt(snapshot)

        removed = records.pop(index - 1)
        self._rewrite(records)
        logger.info(
            "Deleted record %d ('%s' at %s)",
            index,
            removed.product,
            removed.price,
        )
        return removed

    # ── Internals ────────────────────────────────────────

    @staticmethod
    def _check_header(header: list[str] | None) -> bool:
        """Return ``True`` for a legacy header; raise on an unknown one."""
        if header is None or header == Settings.CSV_HEADER:
            return False
        if header == Settings.LEGACY_CSV_HEADER:
            return True
        msg = f"unrecognised header {','.join(header)!r}"
        raise DataCorruptionError(1, msg)

    def _is_legacy_store(self) -> bool:
        """Inspect only the header line of the store."""
        try:
            with open(
                self.db_path, newline="", encoding="utf-8-sig"
            ) as f:
                return self._check_header(next(csv.reader(f), None))
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Cannot read price store {self.db_path}: {exc}"
            raise StorageError(msg) from exc

    def _refuse_if_corrupt(self, snapshot: LedgerReadResult) -> None:
        """Abort a rewrite that would silently drop unparsable lines."""
        if not snapshot.skipped:
            return
        first = snapshot.skipped[0]
        raise DataCorruptionError(
            first.line_number,
            f"{first.reason}; refusing to rewrite a store with "
            f"{len(snapshot.skipped)} corrupt line(s)",
        )

    def _append(self, record: PriceRecord) -> None:
        """Append one row with a single write call."""
        buffer = io.StringIO()
        csv.writer(buffer).writerow(record.to_row())
        line = buffer.getvalue()

        try:
            with open(self.db_path, "rb") as f:
                f.seek(0, os.SEEK_END)
                if f.tell() > 0:
                    f.seek(-1, os.SEEK_END)
                    if f.read(1) != b"\n":
                        line = "\r\n" + line
            with open(
                self.db_path, "a", newline="", encoding="utf-8"
            ) as f:
                f.write(line)
        except OSError as exc:
            logger.error(
                "Append to %s failed", self.db_path, exc_info=True
            )
            msg = f"Cannot append to price store {self.db_path}: {exc}"
            raise StorageError(msg) from exc

    def _rewrite(self, records: list[PriceRecord]) -> None:
        """Replace the store via a temp file in the same directory."""
        path = self.db_path
        tmp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                newline="",
                encoding="utf-8",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                writer = csv.writer(tmp)
                writer.writerow(Settings.CSV_HEADER)
                for record in records:
                    writer.writerow(record.to_row())
                tmp.flush()
                os.fsync(tmp.fileno())
            if path.exists():
                os.chmod(tmp_name, stat.S_IMODE(os.stat(path).st_mode))
            os.replace(tmp_name, path)
        except OSError as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            logger.error("Rewrite of %s failed", path, exc_info=True)
            msg = f"Cannot rewrite price store {path}: {exc}"
            raise StorageError(msg) from exc
        logger.debug("Rewrote %s with %d records", path, len(records))
