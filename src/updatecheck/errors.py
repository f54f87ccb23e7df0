"""Error taxonomy for the update check operations.

Only conditions the caller has to act on are raised. Producer and persistence
failures are absorbed by the cache and the notes store and never show up here.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    INVALID_VERSION = "INVALID_VERSION"
    UNKNOWN_PRODUCT = "UNKNOWN_PRODUCT"
    PLATFORM_UPDATES_UNSUPPORTED = "PLATFORM_UPDATES_UNSUPPORTED"
    RELEASE_UNAVAILABLE = "RELEASE_UNAVAILABLE"
    CONFIG_INVALID = "CONFIG_INVALID"


class UpdateCheckError(Exception):
    """Structured error carrying a machine-readable code.

    ``recoverable`` tells the caller whether retrying the same request later
    can succeed (e.g. the release host was unreachable on the first poll).
    """

    def __init__(self, code: ErrorCode, message: str, *, recoverable: bool = False) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.recoverable = recoverable

    def to_dict(self) -> dict[str, object]:
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "recoverable": self.recoverable,
            }
        }
