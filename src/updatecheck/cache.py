"""In-memory value cache with TTL, single-flight refresh and stale-on-error.

One ``ResilientCache`` holds one value (for example the latest release of one
product). Reads of a fresh value never suspend. When the value has expired,
the first caller starts a refresh and every caller that arrives before it
settles awaits the same task, so the producer runs at most once at a time.

Producer failures never cross the class boundary. They are logged and the
last good value is served instead, or ``None`` if there has never been one.
Snapshot writes are best-effort in the same way: a failed write is logged and
the in-memory value stays authoritative.
"""

from __future__ import annotations

import asyncio
import math
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Generic, TypeVar

import structlog
from pydantic import TypeAdapter, ValidationError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

T = TypeVar("T")

log = structlog.get_logger()


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    value: T
    fetched_at: float  # clock() reading at the time of the successful fetch


class ResilientCache(Generic[T]):
    """Single-value async cache implementing TTL, dedup and stale fallback."""

    def __init__(
        self,
        producer: Callable[[], Awaitable[T | None]],
        ttl_seconds: float,
        *,
        snapshot_path: str | Path | None = None,
        value_type: type[T] | None = None,
        name: str = "cache",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._producer = producer
        self.ttl_seconds = ttl_seconds
        self.snapshot_path = Path(snapshot_path) if snapshot_path is not None else None
        self.name = name
        self._clock = clock
        self._adapter: TypeAdapter[Any] = TypeAdapter(value_type if value_type is not None else Any)
        self._entry: CacheEntry[T] | None = None
        self._inflight: asyncio.Task[T | None] | None = None

    async def get(self) -> T | None:
        """Return the cached value, refreshing it first if it has expired.

        Returns ``None`` only when no value has ever been fetched successfully.
        """
        entry = self._entry
        if entry is not None and self._clock() - entry.fetched_at < self.ttl_seconds:
            return entry.value

        task = self._inflight
        if task is None:
            # No await between the check and the assignment, so two callers
            # can never both start a refresh.
            task = asyncio.create_task(self._refresh())
            self._inflight = task

        # Cancelling one waiter must not cancel the refresh the others share.
        return await asyncio.shield(task)

    def invalidate(self) -> None:
        """Drop the cached value. A refresh already in flight is left running."""
        self._entry = None

    def peek(self) -> T | None:
        """Current value without triggering a refresh, fresh or not."""
        return self._entry.value if self._entry is not None else None

    @property
    def refreshing(self) -> bool:
        return self._inflight is not None

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    async def _refresh(self) -> T | None:
        try:
            try:
                value = await self._producer()
            except Exception:
                log.warning("cache_refresh_failed", cache=self.name, exc_info=True)
                return self._stale_value()

            if value is None:
                log.warning("cache_refresh_empty", cache=self.name)
                return self._stale_value()

            self._entry = CacheEntry(value=value, fetched_at=self._clock())
            log.debug("cache_refreshed", cache=self.name)
            # Waiters are released only once the snapshot is on disk
            await self._write_snapshot(value)
            return value
        finally:
            if self._inflight is asyncio.current_task():
                self._inflight = None

    def _stale_value(self) -> T | None:
        # fetched_at is left untouched so the next get() retries immediately
        entry = self._entry
        if entry is None:
            return None
        log.info("cache_serving_stale", cache=self.name)
        return entry.value

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    async def _write_snapshot(self, value: T) -> None:
        """Write ``value`` to the snapshot file. Non-fatal on failure."""
        if self.snapshot_path is None:
            return
        try:
            payload = self._adapter.dump_json(value, indent=2)
            await asyncio.to_thread(_atomic_write, self.snapshot_path, payload)
        # PydanticSerializationError is a ValueError
        except (OSError, ValueError):
            log.warning(
                "cache_snapshot_write_error",
                cache=self.name,
                path=str(self.snapshot_path),
                exc_info=True,
            )

    async def load_snapshot(self) -> bool:
        """Seed the cache from the snapshot file written by a previous process.

        The seeded entry counts as already expired: the first ``get()`` still
        calls the producer, but falls back to the snapshot if that fails.
        Returns ``True`` if a snapshot was loaded.
        """
        if self.snapshot_path is None:
            return False
        try:
            raw = await asyncio.to_thread(self.snapshot_path.read_bytes)
        except FileNotFoundError:
            return False
        except OSError:
            log.warning(
                "cache_snapshot_read_error",
                cache=self.name,
                path=str(self.snapshot_path),
                exc_info=True,
            )
            return False

        try:
            value = self._adapter.validate_json(raw)
        except ValidationError:
            log.warning(
                "cache_snapshot_invalid",
                cache=self.name,
                path=str(self.snapshot_path),
                exc_info=True,
            )
            return False

        if self._entry is None:
            self._entry = CacheEntry(value=value, fetched_at=-math.inf)
        log.info("cache_snapshot_loaded", cache=self.name, path=str(self.snapshot_path))
        return True


def _atomic_write(path: Path, payload: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        tmp_path.write_bytes(payload)
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise
