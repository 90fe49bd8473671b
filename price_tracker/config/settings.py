# price_tracker/config/settings.py

"""Central configuration for the price tracker."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _path_from_env(name: str, default: Path) -> Path:
    """Read a path from the environment, falling back to *default*."""
    raw = os.getenv(name)
    return Path(raw).expanduser() if raw and raw.strip() else default


class Settings:
    """Central configuration for the price tracker."""

    # --- Storage ---
    CSV_HEADER: list[str] = [
        "product",
        "category",
        "price",
        "url",
        "timestamp",
    ]
    # Files written before categories existed
    LEGACY_CSV_HEADER: list[str] = [
        "product",
        "price",
        "url",
        "timestamp",
    ]
    PRICE_DECIMALS: int = 2
    DEFAULT_EXPORT_NAME: str = "export.csv"

    # --- Filtering ---
    CATEGORY_CASE_SENSITIVE: bool = _env_flag(
        "PRICE_TRACKER_CASE_SENSITIVE", True
    )

    # --- Logging ---
    LOG_LEVEL: str = os.getenv("PRICE_TRACKER_LOG_LEVEL", "WARNING").upper()
    MAX_LOG_FILES: int = 20             # Run logs kept in LOGS_DIR

    # --- Paths ---
    DATA_DIR: Path = _path_from_env("PRICE_TRACKER_DATA_DIR", Path.cwd())
    PRICE_DB_PATH: Path = _path_from_env(
        "PRICE_TRACKER_DB", DATA_DIR / "prices.csv"
    )
    LOGS_DIR: Path = _path_from_env("PRICE_TRACKER_LOG_DIR", DATA_DIR / "logs")
