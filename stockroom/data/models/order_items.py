from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field


class OrderItem(BaseModel):
    """One line item of an order.

    `subtotal` is computed client-side when the line is built and is not
    re-verified against quantity * price afterwards.
    """
    product_id: str = Field(description="Product identifier")
    product_name: str = Field(description="Product name at time of order")
    quantity: int = Field(description="Quantity ordered")
    price: Decimal = Field(description="Unit price at time of order")
    subtotal: Decimal = Field(description="Total price for this line (quantity * price)")

    @classmethod
    def for_product(cls, product_id: str, product_name: str, quantity: int, price: Decimal) -> "OrderItem":
        """Build a line item with its subtotal filled in."""
        price = Decimal(str(price))
        return cls(
            product_id=product_id,
            product_name=product_name,
            quantity=quantity,
            price=price,
            subtotal=price * quantity,
        )
