"""Product catalogue: loading products.json and hostname lookup.

One deployment serves several products. Each request is mapped to a product by
its hostname (``X-Forwarded-Host`` first, then ``Host``).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from pydantic import TypeAdapter, ValidationError

from updatecheck.errors import ErrorCode, UpdateCheckError
from updatecheck.models.product import ProductConfig

log = structlog.get_logger()

_products_adapter = TypeAdapter(list[ProductConfig])


@dataclass
class ProductIndex:
    """Lookups built once from products.json at startup."""

    # product ID → product  e.g. "myapp" → ProductConfig(...)
    by_id: dict[str, ProductConfig] = field(default_factory=dict)

    # hostname → product  e.g. "updates.myapp.dev" → ProductConfig(...)
    by_hostname: dict[str, ProductConfig] = field(default_factory=dict)

    def __iter__(self):
        return iter(self.by_id.values())

    def __len__(self) -> int:
        return len(self.by_id)


def load_products(path: str | Path) -> list[ProductConfig]:
    """Read and validate the products file.

    Raises UpdateCheckError(CONFIG_INVALID) if the file is missing, not JSON,
    not a non-empty array, or an entry fails validation.
    """
    config_path = Path(path).expanduser().resolve()
    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise UpdateCheckError(
            ErrorCode.CONFIG_INVALID,
            f"Cannot read products config file: {config_path} ({exc})",
        ) from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise UpdateCheckError(
            ErrorCode.CONFIG_INVALID,
            f"Invalid JSON in products config: {config_path} ({exc})",
        ) from exc

    if not isinstance(data, list):
        raise UpdateCheckError(
            ErrorCode.CONFIG_INVALID,
            f"Products config must be a JSON array: {config_path}",
        )
    if not data:
        raise UpdateCheckError(
            ErrorCode.CONFIG_INVALID,
            f"Products config must contain at least one product: {config_path}",
        )

    try:
        products = _products_adapter.validate_python(data)
    except ValidationError as exc:
        raise UpdateCheckError(
            ErrorCode.CONFIG_INVALID,
            f"Invalid products config: {config_path}\n{exc}",
        ) from exc

    log.info("products_loaded", path=str(config_path), products=[p.id for p in products])
    return products


def build_product_index(products: list[ProductConfig]) -> ProductIndex:
    index = ProductIndex()
    for product in products:
        if product.id in index.by_id:
            raise UpdateCheckError(
                ErrorCode.CONFIG_INVALID, f"Duplicate product ID: {product.id!r}"
            )
        index.by_id[product.id] = product
        for hostname in product.hostnames:
            index.by_hostname[hostname.lower()] = product
    return index


def resolve_product(
    index: ProductIndex,
    host: str | None,
    forwarded_host: str | None = None,
    default_product: str = "",
) -> ProductConfig | None:
    """Product for a request, falling back to ``default_product`` by ID."""
    header = forwarded_host or host or ""
    hostname = header.split(":")[0].strip().lower()
    product = index.by_hostname.get(hostname)
    if product is None and default_product:
        product = index.by_id.get(default_product)
    return product
