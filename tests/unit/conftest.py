"""Unit-specific fixtures (no I/O beyond in-memory SQLite and tmp_path)."""

from __future__ import annotations

import aiosqlite
import pytest

from updatecheck.notes import NotesStore


@pytest.fixture()
async def db():
    async with aiosqlite.connect(":memory:") as conn:
        yield conn


@pytest.fixture()
async def notes_store(db: aiosqlite.Connection) -> NotesStore:
    """Notes store for product "desktop" on an in-memory database."""
    store = NotesStore(db, "desktop")
    await store.init_db()
    await store.load()
    return store


class FakeClock:
    """Manually advanced replacement for time.monotonic."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()
