from __future__ import annotations

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import IO, Any, Iterable, Mapping, Optional, Union

import pandas as pd

from ..config import get_config
from ..data.interface import BackendClient, BackendError
from ..data.models import ImportSummary, Product, ProductInput
from ..logging import get_logger
from .inventory_service import upsert_product_by_sku

logger = get_logger(__name__)

Workbook = Union[str, Path, IO[bytes]]

EXPORT_COLUMNS = list(Product.model_fields)
PRICE_COLUMNS = ["price", "wholesale_price", "retail_price", "trainer_price", "purchased_price"]


def export_products(products: Iterable[Product], target: Workbook, sheet_name: Optional[str] = None) -> None:
    """Write products to an .xlsx workbook, one row per product."""
    sheet_name = sheet_name or get_config().export_sheet_name
    # json mode keeps timestamps as text; openpyxl rejects tz-aware datetimes
    rows = [p.model_dump(mode="json") for p in products]
    df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    for col in PRICE_COLUMNS:
        df[col] = pd.to_numeric(df[col])
    df.to_excel(target, sheet_name=sheet_name, index=False, engine="openpyxl")
    logger.info(f"Exported {len(df)} products to sheet {sheet_name!r}")


def _blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _pick(row: Mapping[str, Any], *keys: str) -> Any:
    """First non-blank value among the spellings of a column."""
    for key in keys:
        value = row.get(key)
        if not _blank(value):
            return value
    return None


def _to_decimal(value: Any, default: Optional[Decimal]) -> Optional[Decimal]:
    if _blank(value):
        return default
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as e:
        raise ValueError(f"Invalid number: {value!r}") from e


def _to_int(value: Any, default: int) -> int:
    if _blank(value):
        return default
    return int(_to_decimal(value, Decimal(default)))


def _to_text(value: Any) -> Optional[str]:
    if _blank(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def parse_product_row(row: Mapping[str, Any]) -> ProductInput:
    """Map one spreadsheet row to product fields.

    Raises:
        ValueError: If name or SKU is missing or a number cannot be parsed.
    """
    config = get_config()
    name = _to_text(_pick(row, "name", "Name")) or ""
    sku = _to_text(_pick(row, "sku", "SKU")) or ""
    if not name or not sku:
        raise ValueError(f"Missing required fields for product: {name or 'Unknown'}")
    return ProductInput(
        name=name,
        sku=sku,
        category=config.default_category,
        category_type=_to_text(_pick(row, "category_type", "Category_type")),
        price=_to_decimal(_pick(row, "price", "Price"), Decimal("0")),
        wholesale_price=_to_decimal(_pick(row, "wholesale_price"), None),
        retail_price=_to_decimal(_pick(row, "retail_price"), None),
        trainer_price=_to_decimal(_pick(row, "trainer_price"), None),
        purchased_price=_to_decimal(_pick(row, "purchased_price"), None),
        stock=_to_int(_pick(row, "stock", "Stock"), 0),
        threshold=_to_int(_pick(row, "threshold", "Threshold"), config.default_threshold),
        description=_to_text(_pick(row, "description", "Description")),
        image_url=_to_text(_pick(row, "image_url")),
    )


def import_products(backend: BackendClient, source: Workbook) -> ImportSummary:
    """Upsert every row of the workbook's first sheet by SKU.

    A failing row is logged and counted; it never stops the rows after it.
    """
    df = pd.read_excel(source, sheet_name=0, engine="openpyxl")
    summary = ImportSummary()
    for row in df.to_dict("records"):
        try:
            product = parse_product_row(row)
            outcome = upsert_product_by_sku(backend, product)
            logger.debug(f"Product {product.sku} {outcome}")
            summary.successes += 1
        except (ValueError, BackendError) as e:
            logger.error(f"Error processing item {row}: {e}")
            summary.failures += 1
    logger.info(summary.message)
    return summary
