from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from .order_items import OrderItem


class OrderDraft(BaseModel):
    """An order as submitted from the order form, before anything is written."""
    customer_id: Optional[str] = Field(default=None, description="Selected customer, None when nothing is selected")
    status: str = Field(default="pending", description="Order fulfilment status")
    payment_status: str = Field(default="unpaid", description="Order payment status")
    items: List[OrderItem] = Field(default_factory=list, description="Line items")


class Order(BaseModel):
    """Order header row from the `orders` table."""
    id: str = Field(description="Unique order identifier")
    customer_id: str = Field(description="Customer who placed the order")
    status: str = Field(description="Order fulfilment status")
    payment_status: str = Field(description="Order payment status")
    total: Decimal = Field(description="Sum of line item subtotals")
