from __future__ import annotations

from updatecheck.models.product import ProductConfig
from updatecheck.models.release import (
    LatestRelease,
    PlatformArtifact,
    PlatformFetchResult,
    ReleaseNote,
    SimpleFetchResult,
    SimpleRelease,
)
from updatecheck.models.updates import (
    ResolvedUpdate,
    SimpleUpdate,
    UpdateDecision,
    VersionSummary,
)

__all__ = [
    # product
    "ProductConfig",
    # release
    "ReleaseNote",
    "PlatformArtifact",
    "LatestRelease",
    "SimpleRelease",
    "PlatformFetchResult",
    "SimpleFetchResult",
    # updates
    "ResolvedUpdate",
    "SimpleUpdate",
    "UpdateDecision",
    "VersionSummary",
]
