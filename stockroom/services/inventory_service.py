from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, List, Optional

from ..data.interface import BackendClient, select_one
from ..data.models import Product, ProductFilters, ProductInput
from ..logging import get_logger

logger = get_logger(__name__)


class StockStatus(str, Enum):
    OUT_OF_STOCK = "Out of Stock"
    LOW_STOCK = "Low Stock"
    IN_STOCK = "In Stock"


def stock_status(product: Product) -> StockStatus:
    if product.stock == 0:
        return StockStatus.OUT_OF_STOCK
    if product.stock <= product.threshold:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def _matches_search(product: Product, search: str) -> bool:
    needle = search.lower()
    return (
        needle in product.name.lower()
        or needle in product.sku.lower()
        or (product.description is not None and needle in product.description.lower())
    )


def _matches_stock(product: Product, stock_filter: str) -> bool:
    if stock_filter == "in-stock":
        return product.stock > 0
    if stock_filter == "low-stock":
        return 0 < product.stock <= product.threshold
    if stock_filter == "out-of-stock":
        return product.stock == 0
    return True


def filter_products(products: Iterable[Product], filters: ProductFilters) -> List[Product]:
    """Apply the inventory grid filters client-side."""
    out = []
    for product in products:
        if not _matches_search(product, filters.search):
            continue
        if not _matches_stock(product, filters.stock_filter):
            continue
        if filters.category_type not in (None, "all") and product.category_type != filters.category_type:
            continue
        out.append(product)
    return out


def category_types(products: Iterable[Product]) -> List[str]:
    """Distinct category types in first-seen order, preceded by 'all'."""
    seen = dict.fromkeys(p.category_type for p in products if p.category_type)
    return ["all", *seen]


def list_products(backend: BackendClient) -> List[Product]:
    rows = backend.select("products", order_by="name")
    return [Product.model_validate(row) for row in rows]


def create_product(backend: BackendClient, product: ProductInput) -> Product:
    values = product.model_dump()
    values["last_updated"] = datetime.now(timezone.utc).isoformat()
    rows = backend.insert("products", values)
    logger.info(f"Created product {product.sku}")
    return Product.model_validate(rows[0])


def update_product(backend: BackendClient, product_id: str, product: ProductInput) -> Optional[Product]:
    values = product.model_dump()
    values["last_updated"] = datetime.now(timezone.utc).isoformat()
    rows = backend.update("products", values, match={"id": product_id})
    logger.info(f"Updated product {product_id}")
    return Product.model_validate(rows[0]) if rows else None


def delete_product(backend: BackendClient, product_id: str) -> None:
    backend.delete("products", {"id": product_id})
    logger.info(f"Deleted product {product_id}")


def upsert_product_by_sku(backend: BackendClient, product: ProductInput) -> str:
    """Update the product carrying this SKU, or insert it when none exists.

    Returns "updated" or "inserted".
    """
    existing = select_one(backend, "products", columns="id", match={"sku": product.sku})
    if existing:
        update_product(backend, str(existing["id"]), product)
        return "updated"
    create_product(backend, product)
    return "inserted"
