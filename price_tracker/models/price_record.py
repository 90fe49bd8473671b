# price_tracker/models/price_record.py

"""Price observation model and its CSV row mapping."""

import math
from dataclasses import dataclass
from datetime import datetime, timezone

from price_tracker.config.settings import Settings
from price_tracker.storage.errors import DataCorruptionError


def utc_timestamp(now: datetime | None = None) -> str:
    """Return an RFC3339 timestamp with an explicit UTC offset."""
    moment = now or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat()


def format_price(price: float) -> str:
    """Render a price the way the store persists it (``199.99``)."""
    return f"{price:.{Settings.PRICE_DECIMALS}f}"


@dataclass
class PriceRecord:
    """A single price observation for a product in a shop."""

    product: str
    category: str
    price: float
    url: str
    timestamp: str

    @property
    def observed_at(self) -> datetime:
        """The timestamp parsed back into an aware datetime."""
        return datetime.fromisoformat(self.timestamp)

    def to_row(self) -> list[str]:
        """Serialise to the column order of ``Settings.CSV_HEADER``."""
        return [
            self.product,
            self.category,
            format_price(self.price),
            self.url,
            self.timestamp,
        ]

    @classmethod
    def from_row(
        cls,
        row: list[str],
        line_number: int,
        legacy: bool = False,
    ) -> "PriceRecord":
        """Parse one stored row.

        Legacy rows lack the category column and map to an empty
        category.  Raises :class:`DataCorruptionError` on any malformed
        field.
        """
        expected = len(
            Settings.LEGACY_CSV_HEADER if legacy else Settings.CSV_HEADER
        )
        if len(row) != expected:
            raise DataCorruptionError(
                line_number,
                f"expected {expected} columns, found {len(row)}",
            )

        if legacy:
            product, raw_price, url, timestamp = row
            category = ""
        else:
            product, category, raw_price, url, timestamp = row

        if not product.strip():
            raise DataCorruptionError(line_number, "empty product name")

        try:
            price = float(raw_price)
        except ValueError:
            raise DataCorruptionError(
                line_number, f"unparsable price '{raw_price}'"
            ) from None
        if not math.isfinite(price) or price < 0:
            raise DataCorruptionError(
                line_number, f"invalid price '{raw_price}'"
            )

        try:
            parsed = datetime.fromisoformat(timestamp)
        except ValueError:
            raise DataCorruptionError(
                line_number, f"unparsable timestamp '{timestamp}'"
            ) from None
        if parsed.tzinfo is None:
            raise DataCorruptionError(
                line_number, f"timestamp '{timestamp}' has no UTC offset"
            )

        return cls(
            product=product,
            category=category,
            price=price,
            url=url,
            timestamp=timestamp,
        )
