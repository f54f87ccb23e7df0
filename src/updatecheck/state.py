"""Per-product state and the composition point that wires it together.

Every product gets its own ``ResilientCache`` (latest release) and
``NotesStore`` (accumulated release notes). The cache producer polls the
release source, merges whatever notes that poll saw into the store, and hands
the latest release to the cache.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

import aiosqlite
import structlog

from updatecheck.cache import ResilientCache
from updatecheck.models.release import LatestRelease, SimpleRelease
from updatecheck.notes import NotesStore
from updatecheck.products import ProductIndex, build_product_index

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from updatecheck.config import Settings
    from updatecheck.models.product import ProductConfig
    from updatecheck.models.release import PlatformFetchResult, SimpleFetchResult

log = structlog.get_logger()


class ReleaseSource(Protocol):
    """Where release information comes from (e.g. a release-hosting API).

    Either method may raise; the cache treats that as a failed refresh.
    ``None`` means the source has no matching release.
    """

    async def fetch_platform_release(self, product: ProductConfig) -> PlatformFetchResult | None: ...

    async def fetch_simple_release(self, product: ProductConfig) -> SimpleFetchResult | None: ...


@dataclass
class ProductState:
    product: ProductConfig
    cache: ResilientCache[LatestRelease] | ResilientCache[SimpleRelease]
    notes: NotesStore


@dataclass
class AppState:
    settings: Settings
    products: ProductIndex
    db: aiosqlite.Connection
    product_states: dict[str, ProductState] = field(default_factory=dict)


def _platform_producer(
    source: ReleaseSource, product: ProductConfig, notes: NotesStore
) -> Callable[[], Awaitable[LatestRelease | None]]:
    async def produce() -> LatestRelease | None:
        result = await source.fetch_platform_release(product)
        if result is None:
            return None
        await notes.merge(result.fresh_notes)
        return result.latest

    return produce


def _simple_producer(
    source: ReleaseSource, product: ProductConfig, notes: NotesStore
) -> Callable[[], Awaitable[SimpleRelease | None]]:
    async def produce() -> SimpleRelease | None:
        result = await source.fetch_simple_release(product)
        if result is None:
            return None
        await notes.merge(result.fresh_notes)
        return result.latest

    return produce


async def build_product_state(
    product: ProductConfig,
    source: ReleaseSource,
    db: aiosqlite.Connection,
    settings: Settings,
) -> ProductState:
    notes = NotesStore(db, product.id)
    await notes.init_db()
    await notes.load()

    cache: ResilientCache[LatestRelease] | ResilientCache[SimpleRelease]
    if product.tauri_updates:
        cache = ResilientCache(
            _platform_producer(source, product, notes),
            settings.cache.ttl_seconds,
            snapshot_path=settings.snapshot_path(product.id),
            value_type=LatestRelease,
            name=product.id,
        )
    else:
        cache = ResilientCache(
            _simple_producer(source, product, notes),
            settings.cache.ttl_seconds,
            snapshot_path=settings.snapshot_path(product.id),
            value_type=SimpleRelease,
            name=product.id,
        )
    await cache.load_snapshot()
    return ProductState(product=product, cache=cache, notes=notes)


@asynccontextmanager
async def open_app_state(
    settings: Settings,
    products: list[ProductConfig],
    source: ReleaseSource,
) -> AsyncIterator[AppState]:
    """Connect the notes database and build every product's state.

    The connection is closed on exit. A db_path whose parent directory cannot
    be created or written is fatal: startup fails with the underlying error.
    """
    index = build_product_index(products)

    db_path = Path(settings.cache.db_path).expanduser()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(db_path) as db:
        try:
            await db.execute("PRAGMA journal_mode = WAL")
        except aiosqlite.Error:
            # Unreadable database: NotesStore logs and runs from memory
            log.warning("notes_db_unusable", path=str(db_path), exc_info=True)
        state = AppState(settings=settings, products=index, db=db)
        for product in index:
            state.product_states[product.id] = await build_product_state(
                product, source, db, settings
            )
        log.info("app_state_ready", products=list(state.product_states))
        yield state
