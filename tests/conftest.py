# tests/conftest.py

"""Shared pytest fixtures for all topseller tests."""

from collections.abc import Generator
from pathlib import Path

import pytest

from src.config.settings import Settings

_CREDENTIAL_VARS = (
    "SERPAPI_KEY",
    "RAINFOREST_API_KEY",
    "RAINFORREST_API_KEY",
    "APIFY_TOKEN",
)


@pytest.fixture(autouse=True)
def isolated_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
) -> Generator[None, None, None]:
    """Clear provider credentials and keep file output in a temp dir."""
    for name in _CREDENTIAL_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(Settings, "LOGS_DIR", tmp_path / "logs")
    monkeypatch.setattr(Settings, "RESULTS_DIR", tmp_path / "results")
    monkeypatch.setattr(
        Settings, "RESULTS_DB_PATH", tmp_path / "data" / "results.db"
    )
    yield
