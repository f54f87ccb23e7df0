"""Decide whether a client is out of date and build the update payload."""

from __future__ import annotations

from typing import TYPE_CHECKING

from updatecheck.models.updates import ResolvedUpdate, SimpleUpdate, UpdateDecision
from updatecheck.versions import compare_versions, is_valid_version, version_sort_key

if TYPE_CHECKING:
    from collections.abc import Iterable

    from updatecheck.models.release import LatestRelease, ReleaseNote, SimpleRelease


def aggregate_notes(all_notes: Iterable[ReleaseNote], current_version: str) -> str:
    """Release notes for every version newer than ``current_version``.

    A single newer version gets its notes verbatim. Several get one
    ``## <version>`` section each, oldest first.
    """
    relevant = sorted(
        (
            n
            for n in all_notes
            if is_valid_version(n.version) and compare_versions(n.version, current_version) > 0
        ),
        key=lambda n: version_sort_key(n.version),
    )
    if not relevant:
        return ""
    if len(relevant) == 1:
        return relevant[0].notes
    return "\n\n".join(f"## {n.version}\n{n.notes}" for n in relevant)


def find_platform_update(
    latest: LatestRelease,
    target: str,
    arch: str,
    notes: str,
) -> ResolvedUpdate | None:
    """Artifact for ``<target>-<arch>``, or ``None`` if the release has none."""
    artifact = latest.platforms.get(f"{target}-{arch}")
    if artifact is None:
        return None

    return ResolvedUpdate(
        version=latest.version,
        notes=notes,
        pub_date=latest.pub_date,
        url=artifact.url,
        signature=artifact.signature,
    )


def resolve_platform_update(
    latest: LatestRelease,
    all_notes: Iterable[ReleaseNote],
    target: str,
    arch: str,
    current_version: str,
) -> UpdateDecision:
    notes = aggregate_notes(all_notes, current_version)
    update = find_platform_update(latest, target, arch, notes)
    # Both conditions are required: a known platform alone is not an update.
    if update is None or compare_versions(latest.version, current_version) <= 0:
        return UpdateDecision(update_available=False)
    return UpdateDecision(update_available=True, update=update)


def resolve_simple_update(
    latest: SimpleRelease | LatestRelease,
    all_notes: Iterable[ReleaseNote],
    current_version: str,
) -> UpdateDecision:
    if compare_versions(latest.version, current_version) <= 0:
        return UpdateDecision(update_available=False)
    return UpdateDecision(
        update_available=True,
        update=SimpleUpdate(
            version=latest.version,
            notes=aggregate_notes(all_notes, current_version),
            pub_date=latest.pub_date,
        ),
    )
