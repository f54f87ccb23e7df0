from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class ProductConfig(BaseModel):
    """Single entry in products.json."""

    # products.json uses camelCase keys (displayName, tauriUpdates, ...)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    display_name: str
    hostnames: list[str]
    github_repo: str
    tag_prefix: str
    tauri_updates: bool

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not re.match(r"^[a-z0-9][a-z0-9_-]*$", v):
            raise ValueError(f"Invalid product ID: {v!r}")
        return v
