# price_tracker/filters/record_validator.py

"""Boundary validation for user-supplied record fields."""

import logging
import math
import numbers
from decimal import Decimal

from price_tracker.config.settings import Settings
from price_tracker.storage.errors import ValidationError

logger = logging.getLogger("price_tracker.filters")


def validate_price(value: float | Decimal) -> float:
    """Reject non-finite or negative prices; round to stored precision.

    Any real number is accepted, ``Decimal`` included, and converted to
    ``float``.
    """
    if isinstance(value, bool) or not isinstance(
        value, (numbers.Real, Decimal)
    ):
        msg = f"Price must be a number, got {value!r}"
        raise ValidationError(msg)
    try:
        value = float(value)
    except ValueError:
        msg = f"Price must be a real number, got {value!r}"
        raise ValidationError(msg) from None
    if not math.isfinite(value):
        msg = f"Price must be a real number, got {value!r}"
        raise ValidationError(msg)
    if value < 0:
        msg = f"Price must not be negative, got {value}"
        raise ValidationError(msg)
    return round(value, Settings.PRICE_DECIMALS)


def parse_price(raw: str) -> float:
    """Parse a typed price such as ``19.99`` or ``19,99``.

    A single decimal comma is accepted because that is how many locales
    write prices.  Currency symbols and thousands separators are not.
    """
    text = raw.strip()
    if not text:
        msg = "Price is required"
        raise ValidationError(msg)
    try:
        value = float(text.replace(",", "."))
    except ValueError:
        logger.debug("Rejected unparsable price input %r", raw)
        msg = f"Invalid price: '{text}'"
        raise ValidationError(msg) from None
    return validate_price(value)


def require_text(value: str, field: str) -> str:
    """Return *value* stripped, or raise if it is blank."""
    stripped = value.strip()
    if not stripped:
        msg = f"{field.capitalize()} must not be empty"
        raise ValidationError(msg)
    return stripped
