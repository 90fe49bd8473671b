# tests/conftest.py

"""Shared pytest fixtures for all price tracker tests."""

from collections.abc import Generator
from pathlib import Path

import pytest

from price_tracker.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_paths(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Keep logs and the default price store out of the working tree."""
    monkeypatch.setattr(Settings, "LOGS_DIR", tmp_path / "logs")
    monkeypatch.setattr(
        Settings, "PRICE_DB_PATH", tmp_path / "default_prices.csv"
    )
    yield
