from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class OrderErrorKind(str, Enum):
    """Stage at which an order submission failed."""
    VALIDATION = "validation"
    HEADER_WRITE = "header_write"
    ITEMS_WRITE = "items_write"


class StockWarning(BaseModel):
    """A line item whose stock adjustment did not complete."""
    product_id: str = Field(description="Product whose stock may be stale")
    quantity: int = Field(description="Quantity that should have been deducted")
    stage: Literal["read", "write"] = Field(description="Fallback step that failed")
    message: str = Field(description="Backend error message")


class OrderCreationResult(BaseModel):
    """Outcome of an order submission."""
    success: bool = Field(description="True once the header and items are written")
    order_id: Optional[str] = Field(default=None, description="Identifier of the created order")
    total: Optional[Decimal] = Field(default=None, description="Order total as written")
    error: Optional[str] = Field(default=None, description="User-facing failure message")
    error_kind: Optional[OrderErrorKind] = Field(default=None, description="Failed stage")
    orphaned_order_id: Optional[str] = Field(default=None, description="Header left behind when the item write failed")
    stock_warnings: List[StockWarning] = Field(default_factory=list, description="Stock adjustments that did not complete")
    stats_warning: bool = Field(default=False, description="True when customer statistics were not updated")

    @property
    def fully_reconciled(self) -> bool:
        return self.success and not self.stock_warnings and not self.stats_warning


class ImportSummary(BaseModel):
    """Counts from a spreadsheet import."""
    successes: int = Field(default=0, description="Rows inserted or updated")
    failures: int = Field(default=0, description="Rows that could not be processed")

    @property
    def message(self) -> str:
        if self.successes > 0:
            msg = f"Successfully processed {self.successes} products."
            if self.failures > 0:
                msg += f" Failed to process {self.failures} products."
            return msg
        if self.failures > 0:
            return f"Failed to process {self.failures} products. Please check the file format."
        return "No products found in the uploaded file."
