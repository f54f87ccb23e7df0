"""Per-version release notes accumulated across polls.

A single poll of the release host only sees a recent window of releases, so
notes are merged into a durable SQLite table and served from memory. A client
several versions behind can then still be given every note it skipped.

As in the cache, ``aiosqlite.Error`` never escapes this module. A store that
cannot be read starts empty, and a failed write leaves the in-memory mapping
as the source of truth until the next successful merge.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import aiosqlite
import structlog

from updatecheck.models.release import ReleaseNote

if TYPE_CHECKING:
    from collections.abc import Iterable

log = structlog.get_logger()

_CREATE_NOTES_TABLE = """
CREATE TABLE IF NOT EXISTS release_notes (
    product_id  TEXT NOT NULL,
    version     TEXT NOT NULL,
    notes       TEXT NOT NULL,
    updated_at  TEXT NOT NULL,
    PRIMARY KEY (product_id, version)
)
"""


class NotesStore:
    """Last-write-wins mapping of version -> notes for one product."""

    def __init__(self, db: aiosqlite.Connection, product_id: str) -> None:
        self._db = db
        self.product_id = product_id
        self._notes: dict[str, str] = {}
        # versions held in memory whose last write failed
        self._unsaved: set[str] = set()
        self._lock = asyncio.Lock()

    async def init_db(self) -> None:
        """Create the notes table. Non-fatal on failure."""
        try:
            await self._db.execute(_CREATE_NOTES_TABLE)
            await self._db.commit()
        except aiosqlite.Error:
            log.warning("notes_store_init_error", product=self.product_id, exc_info=True)

    async def load(self) -> None:
        """Read previously merged notes. A missing or corrupt store loads as empty."""
        self._unsaved = set()
        try:
            cursor = await self._db.execute(
                "SELECT version, notes FROM release_notes WHERE product_id = ?",
                (self.product_id,),
            )
            rows = await cursor.fetchall()
        except aiosqlite.Error:
            log.warning("notes_store_load_error", product=self.product_id, exc_info=True)
            self._notes = {}
            return

        self._notes = {version: notes for version, notes in rows}
        log.info("notes_store_loaded", product=self.product_id, count=len(self._notes))

    async def merge(self, notes: Iterable[ReleaseNote]) -> None:
        """Insert or replace each note, then commit before returning.

        Versions from an earlier merge whose write failed are written again
        with this batch, so the table catches up with memory.
        """
        incoming = list(notes)
        if not incoming:
            return

        async with self._lock:
            for note in incoming:
                self._notes[note.version] = note.notes
            pending = self._unsaved | {note.version for note in incoming}

            now = datetime.now(UTC).isoformat()
            try:
                await self._db.executemany(
                    "INSERT OR REPLACE INTO release_notes "
                    "(product_id, version, notes, updated_at) VALUES (?, ?, ?, ?)",
                    [(self.product_id, v, self._notes[v], now) for v in sorted(pending)],
                )
                await self._db.commit()
            except aiosqlite.Error:
                self._unsaved = pending
                log.warning(
                    "notes_store_write_error",
                    product=self.product_id,
                    count=len(pending),
                    exc_info=True,
                )
            else:
                self._unsaved = set()

    def get_all(self) -> list[ReleaseNote]:
        return [ReleaseNote(version=v, notes=n) for v, n in self._notes.items()]

    def __len__(self) -> int:
        return len(self._notes)
