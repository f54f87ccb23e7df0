from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class ResolvedUpdate(BaseModel):
    """Download for one platform, returned to an out-of-date client."""

    version: str
    notes: str
    pub_date: datetime
    url: str
    signature: str


class SimpleUpdate(BaseModel):
    version: str
    notes: str
    pub_date: datetime


class UpdateDecision(BaseModel):
    """Outcome of an update check.

    ``update`` is only set when ``update_available`` is true. The flag is kept
    separate so the transport can choose between a body and an empty response
    without looking at the payload.
    """

    update_available: bool
    update: ResolvedUpdate | SimpleUpdate | None = None


class VersionSummary(BaseModel):
    version: str
    pub_date: datetime
