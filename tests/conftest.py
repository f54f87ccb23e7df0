"""Shared fixtures: release manifests and notes used across unit and integration tests."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from updatecheck.models.product import ProductConfig
from updatecheck.models.release import (
    LatestRelease,
    PlatformArtifact,
    ReleaseNote,
    SimpleRelease,
)

_BASE_URL = "https://github.com/example/app/releases/download/v0.1.21"


@pytest.fixture()
def latest_release() -> LatestRelease:
    return LatestRelease(
        version="0.1.21",
        notes="- Remember window position across restarts",
        pub_date=datetime(2026, 2, 11, 7, 33, 31, tzinfo=UTC),
        platforms={
            "darwin-aarch64": PlatformArtifact(
                url=f"{_BASE_URL}/App_aarch64.app.tar.gz", signature="sig-darwin-aarch64"
            ),
            "windows-x86_64": PlatformArtifact(
                url=f"{_BASE_URL}/App_0.1.21_x64.msi", signature="sig-windows-x86_64"
            ),
            "linux-x86_64": PlatformArtifact(
                url=f"{_BASE_URL}/App_0.1.21_amd64.AppImage", signature="sig-linux-x86_64"
            ),
        },
    )


@pytest.fixture()
def simple_release() -> SimpleRelease:
    return SimpleRelease(
        version="0.4.6",
        notes="- New feature",
        pub_date=datetime(2026, 2, 28, tzinfo=UTC),
    )


@pytest.fixture()
def release_notes() -> list[ReleaseNote]:
    return [
        ReleaseNote(version="0.1.21", notes="- Remember window position across restarts"),
        ReleaseNote(
            version="0.1.20",
            notes="- Add magnet/torrent routing\n- Launch desktop app from extension",
        ),
        ReleaseNote(version="0.1.19", notes="- Add profile picker UI"),
        ReleaseNote(version="0.1.18", notes="- Add profile system"),
    ]


@pytest.fixture()
def tauri_product() -> ProductConfig:
    return ProductConfig(
        id="desktop",
        display_name="Desktop App",
        hostnames=["updates.desktop.test"],
        github_repo="example/desktop",
        tag_prefix="v",
        tauri_updates=True,
    )


@pytest.fixture()
def simple_product() -> ProductConfig:
    return ProductConfig(
        id="cli",
        display_name="CLI Tool",
        hostnames=["updates.cli.test", "cli.test"],
        github_repo="example/cli",
        tag_prefix="cli-v",
        tauri_updates=False,
    )
