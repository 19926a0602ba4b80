from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class Customer(BaseModel):
    """Customer row from the `customers` table."""
    id: str = Field(description="Unique customer identifier")
    name: Optional[str] = Field(default=None, description="Customer display name")
    email: Optional[str] = Field(default=None, description="Customer email address")
    total_orders: int = Field(default=0, description="Running count of orders placed")
    total_spent: Decimal = Field(default=Decimal("0"), description="Running sum of order totals")
