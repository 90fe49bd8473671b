# price_tracker/filters/category_filter.py

"""Optional category restriction shared by the ledger's read operations."""

import logging

from price_tracker.models.price_record import PriceRecord

logger = logging.getLogger("price_tracker.filters")


def filter_by_category(
    records: list[PriceRecord],
    category: str | None,
    case_sensitive: bool = True,
) -> list[PriceRecord]:
    """Keep the records whose category equals *category*.

    ``None`` or a blank category means "no filter" and returns every
    record.  Otherwise the match is on the whole value, surrounding
    spaces included.  File order is preserved.
    """
    if category is None or not category.strip():
        return list(records)

    if case_sensitive:
        kept = [r for r in records if r.category == category]
    else:
        folded = category.casefold()
        kept = [r for r in records if r.category.casefold() == folded]

    logger.debug(
        "Category filter '%s' kept %d of %d records",
        category,
        len(kept),
        len(records),
    )
    return kept
