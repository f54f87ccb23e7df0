"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (UPDATECHECK__CACHE__TTL_SECONDS=60)
  2. updatecheck.yaml       (searched in cwd, then ~/.config/updatecheck/)
  3. Hardcoded defaults

The config file is optional; all fields have sensible defaults. The product
catalogue itself lives in a separate JSON file (see ``updatecheck.products``).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_DATA_DIR = platformdirs.user_data_dir("updatecheck")
_DEFAULT_DB_PATH = str(Path(_DEFAULT_DATA_DIR) / "cache.db")


def _find_config_file() -> str | None:
    """Return the path of the first updatecheck.yaml found, or None."""
    candidates = [
        Path("updatecheck.yaml"),
        Path.home() / ".config" / "updatecheck" / "updatecheck.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class CacheSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    ttl_seconds: float = Field(default=300.0, gt=0)
    db_path: str = _DEFAULT_DB_PATH


class ProductsSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    config_path: str = "./products.json"
    # Fallback product ID when the hostname doesn't match (dev/testing)
    default_product: str = ""


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: UPDATECHECK__LOGGING__LEVEL=DEBUG
        env_prefix="UPDATECHECK__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    # Cache snapshots are written under <data_dir>/<product_id>/
    data_dir: str = _DEFAULT_DATA_DIR
    cache: CacheSettings = CacheSettings()
    products: ProductsSettings = ProductsSettings()
    logging: LoggingSettings = LoggingSettings()

    def snapshot_path(self, product_id: str) -> Path:
        return Path(self.data_dir).expanduser() / product_id / "latest-cache.json"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
