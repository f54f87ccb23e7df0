"""Integration test fixtures.

Provides a fully wired AppState on a tmp_path SQLite database with a fake
release source standing in for the release-hosting API. Release fixtures come
from tests/conftest.py.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from updatecheck.config import Settings
from updatecheck.models.release import PlatformFetchResult, ReleaseNote, SimpleFetchResult
from updatecheck.state import open_app_state

if TYPE_CHECKING:
    from pathlib import Path

    from updatecheck.models.product import ProductConfig
    from updatecheck.models.release import LatestRelease, SimpleRelease
    from updatecheck.state import AppState


class FakeReleaseSource:
    """In-memory ReleaseSource. Set ``error`` to make every fetch raise."""

    def __init__(
        self,
        platform: PlatformFetchResult | None = None,
        simple: SimpleFetchResult | None = None,
    ) -> None:
        self.platform = platform
        self.simple = simple
        self.error: Exception | None = None
        self.platform_calls = 0
        self.simple_calls = 0

    async def fetch_platform_release(self, product: ProductConfig) -> PlatformFetchResult | None:
        self.platform_calls += 1
        if self.error is not None:
            raise self.error
        return self.platform

    async def fetch_simple_release(self, product: ProductConfig) -> SimpleFetchResult | None:
        self.simple_calls += 1
        if self.error is not None:
            raise self.error
        return self.simple


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        data_dir=str(tmp_path / "data"),
        cache={"ttl_seconds": 300, "db_path": str(tmp_path / "db" / "cache.db")},
        products={"default_product": ""},
    )


@pytest.fixture()
def source(
    latest_release: LatestRelease,
    simple_release: SimpleRelease,
    release_notes: list[ReleaseNote],
) -> FakeReleaseSource:
    return FakeReleaseSource(
        platform=PlatformFetchResult(latest=latest_release, fresh_notes=release_notes),
        simple=SimpleFetchResult(
            latest=simple_release,
            fresh_notes=[
                ReleaseNote(version="0.4.6", notes="- New feature"),
                ReleaseNote(version="0.4.5", notes="- Bug fix"),
            ],
        ),
    )


@pytest.fixture()
def products(tauri_product: ProductConfig, simple_product: ProductConfig) -> list[ProductConfig]:
    return [tauri_product, simple_product]


@pytest.fixture()
async def app_state(
    settings: Settings, products: list[ProductConfig], source: FakeReleaseSource
) -> AppState:
    async with open_app_state(settings, products, source) as state:
        yield state
