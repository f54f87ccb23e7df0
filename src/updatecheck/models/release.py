from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class ReleaseNote(BaseModel):
    """Release notes for a single version. ``version`` is the unique key."""

    version: str
    notes: str


class PlatformArtifact(BaseModel):
    url: str
    signature: str


class LatestRelease(BaseModel):
    """Latest release manifest with per-platform downloads (Tauri ``latest.json``)."""

    version: str
    notes: str
    pub_date: datetime
    platforms: dict[str, PlatformArtifact]  # "<target>-<arch>" -> artifact


class SimpleRelease(BaseModel):
    """Latest release of a product that ships no platform manifest."""

    version: str
    notes: str
    pub_date: datetime


class PlatformFetchResult(BaseModel):
    latest: LatestRelease
    fresh_notes: list[ReleaseNote] = []


class SimpleFetchResult(BaseModel):
    latest: SimpleRelease
    fresh_notes: list[ReleaseNote] = []
