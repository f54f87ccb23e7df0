"""Update check operations consumed by the transport layer.

Each operation takes a ``ProductState`` (or the ``AppState`` for product
lookup) and returns a pydantic model ready for JSON serialisation. Conditions
the caller must report back to the client raise ``UpdateCheckError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

import structlog

from updatecheck.errors import ErrorCode, UpdateCheckError
from updatecheck.models.release import LatestRelease, SimpleRelease
from updatecheck.models.updates import SimpleUpdate, UpdateDecision, VersionSummary
from updatecheck.products import resolve_product
from updatecheck.resolver import resolve_platform_update, resolve_simple_update
from updatecheck.versions import is_valid_version

if TYPE_CHECKING:
    from updatecheck.state import AppState, ProductState

log = structlog.get_logger()


def _validate_version(version: str) -> None:
    if not is_valid_version(version):
        raise UpdateCheckError(
            ErrorCode.INVALID_VERSION, f"Invalid version format: {version!r}"
        )


async def _latest(state: ProductState) -> LatestRelease | SimpleRelease:
    latest = await state.cache.get()
    if latest is None:
        raise UpdateCheckError(
            ErrorCode.RELEASE_UNAVAILABLE,
            f"Unable to fetch release info for {state.product.id!r}",
            recoverable=True,
        )
    return latest


def resolve_product_state(
    app: AppState, host: str | None, forwarded_host: str | None = None
) -> ProductState:
    product = resolve_product(
        app.products, host, forwarded_host, app.settings.products.default_product
    )
    if product is None:
        raise UpdateCheckError(
            ErrorCode.UNKNOWN_PRODUCT, f"Unknown product for host {forwarded_host or host!r}"
        )
    return app.product_states[product.id]


async def check_platform_update(
    state: ProductState, target: str, arch: str, current_version: str
) -> UpdateDecision:
    """Update for a client on ``<target>-<arch>`` running ``current_version``."""
    if not state.product.tauri_updates:
        raise UpdateCheckError(
            ErrorCode.PLATFORM_UPDATES_UNSUPPORTED,
            f"Product {state.product.id!r} does not publish platform updates",
        )
    _validate_version(current_version)

    # tauri products always cache a LatestRelease
    latest = cast(LatestRelease, await _latest(state))
    decision = resolve_platform_update(
        latest, state.notes.get_all(), target, arch, current_version
    )
    log.info(
        "update_check",
        product=state.product.id,
        target=target,
        arch=arch,
        current_version=current_version,
        latest_version=latest.version,
        update_available=decision.update_available,
    )
    return decision


async def check_version(state: ProductState, current_version: str | None = None) -> UpdateDecision:
    """Version check for products without platform manifests.

    Without ``current_version`` the latest release is returned as-is, with its
    own notes.
    """
    if current_version is not None:
        _validate_version(current_version)

    latest = await _latest(state)
    if current_version is None:
        return UpdateDecision(
            update_available=True,
            update=SimpleUpdate(
                version=latest.version, notes=latest.notes, pub_date=latest.pub_date
            ),
        )

    decision = resolve_simple_update(latest, state.notes.get_all(), current_version)
    log.info(
        "version_check",
        product=state.product.id,
        current_version=current_version,
        latest_version=latest.version,
        update_available=decision.update_available,
    )
    return decision


async def latest_version(state: ProductState) -> VersionSummary:
    latest = await _latest(state)
    return VersionSummary(version=latest.version, pub_date=latest.pub_date)
