"""Shared test fixtures."""

from pathlib import Path

import pytest

from remindian.reminder_store import InMemoryReminderStore
from remindian.sync_engine import SyncEngine
from remindian.sync_log import SyncLog

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(name="store")
def store_fixture() -> InMemoryReminderStore:
    """An in-memory reminder store that grants access."""
    return InMemoryReminderStore()


@pytest.fixture(name="denied_store")
def denied_store_fixture() -> InMemoryReminderStore:
    """An in-memory reminder store that refuses access."""
    return InMemoryReminderStore(grant_access=False)


@pytest.fixture(name="sync_log")
def sync_log_fixture(tmp_path) -> SyncLog:
    """A sync log in a temporary SQLite database."""
    return SyncLog(tmp_path / "sync_log.db")


@pytest.fixture(name="engine")
def engine_fixture(store, sync_log) -> SyncEngine:
    return SyncEngine(store, sync_log=sync_log)


@pytest.fixture(name="fixture_text")
def fixture_text_fixture():
    """Read a Markdown fixture by file name."""

    def read(name: str) -> str:
        return (FIXTURES_DIR / name).read_text(encoding="utf-8")

    return read
