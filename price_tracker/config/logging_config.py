# price_tracker/config/logging_config.py

"""Per-run logging for the price tracker.

Each launch writes ``run_YYYYMMDD_HHMMSS.log`` into ``Settings.LOGS_DIR``
(``PRICE_TRACKER_LOG_DIR``, default ``<data dir>/logs``).  Only the
newest ``Settings.MAX_LOG_FILES`` run logs are kept.  The file captures
every ledger operation at DEBUG; the console threshold comes from
``PRICE_TRACKER_LOG_LEVEL`` and defaults to WARNING so the menu stays
readable while skipped store lines still surface.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from price_tracker.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | "
    "%(message)s"
)

_CONSOLE_FORMAT = "%(levelname)-8s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _console_level() -> int:
    """Map ``Settings.LOG_LEVEL`` to a logging level, WARNING if unknown."""
    level = logging.getLevelName(Settings.LOG_LEVEL)
    return level if isinstance(level, int) else logging.WARNING


def _prune_run_logs(logs_dir: Path, keep: int) -> int:
    """Delete all but the newest *keep* run logs; return how many went."""
    runs = sorted(logs_dir.glob("run_*.log"))
    stale = runs[:-keep] if keep > 0 else runs
    for old in stale:
        old.unlink(missing_ok=True)
    return len(stale)


def setup_logging(db_path: Path | None = None) -> Path:
    """Attach file and console handlers to the ``price_tracker`` logger.

    *db_path* is the store this run is bound to; it is written to the
    log header so each run log names the file it touched.  Returns the
    path of this run's log file.
    """
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{timestamp}.log"

    root_logger = logging.getLogger("price_tracker")
    root_logger.setLevel(logging.DEBUG)

    if root_logger.handlers:
        return log_file

    pruned = _prune_run_logs(logs_dir, Settings.MAX_LOG_FILES - 1)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(_console_level())
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info(
        "Run log %s (store=%s, pruned %d old log(s))",
        log_file,
        db_path or Settings.PRICE_DB_PATH,
        pruned,
    )
    return log_file
