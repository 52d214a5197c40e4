"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from questtracker.observability import configure_logging


@pytest.fixture(autouse=True, scope="session")
def quiet_logging() -> None:
    """Keep console logging at WARNING during test runs."""
    configure_logging(verbosity=0)


@pytest.fixture(autouse=True)
def clear_tracker_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Prevent QT_* variables from the developer's shell leaking into tests."""
    for name in ("QT_API_BASE", "QT_BATCH_SIZE", "QT_MAX_PAGES", "QT_MAX_QUESTS", "QT_CONFIG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent
