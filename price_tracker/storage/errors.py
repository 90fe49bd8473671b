# price_tracker/storage/errors.py

"""Error taxonomy for price ledger operations."""


class PriceTrackerError(Exception):
    """Base class for every error the ledger reports to its driver."""


class StorageError(PriceTrackerError):
    """A backing or export file could not be created, read or written."""


class ValidationError(PriceTrackerError):
    """Caller-supplied input does not satisfy its constraint."""


class IndexOutOfRangeError(PriceTrackerError):
    """A delete was requested for a position outside the loaded records."""

    def __init__(self, index: int, count: int) -> None:
        self.index = index
        self.count = count
        if count:
            msg = f"Index {index} is out of range (1-{count})"
        else:
            msg = f"Index {index} is out of range (no entries)"
        super().__init__(msg)


class DataCorruptionError(PriceTrackerError):
    """A stored line does not parse as a well-formed record."""

    def __init__(self, line_number: int, reason: str) -> None:
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"Line {line_number}: {reason}")
