from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

StockFilter = Literal["all", "in-stock", "low-stock", "out-of-stock"]


class ProductFilters(BaseModel):
    """Filters for the inventory grid."""
    search: str = Field(default="", description="Case-insensitive match against name, SKU or description")
    stock_filter: StockFilter = Field(default="all", description="Stock level bucket")
    category_type: Optional[str] = Field(default=None, description="Category type filter, None or 'all' for every type")
