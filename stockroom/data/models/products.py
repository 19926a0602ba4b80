from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class Product(BaseModel):
    """Product row from the `products` table."""
    id: str = Field(description="Unique product identifier")
    name: str = Field(description="Product name")
    sku: str = Field(description="Stock keeping unit code, unique business key used by imports")
    category: str = Field(default="Default", description="Product category")
    category_type: Optional[str] = Field(default=None, description="Optional sub-classification used by the inventory grid")
    description: Optional[str] = Field(default=None, description="Free-text description")
    price: Decimal = Field(default=Decimal("0"), description="Default selling price")
    wholesale_price: Optional[Decimal] = Field(default=None, description="Wholesale price tier")
    retail_price: Optional[Decimal] = Field(default=None, description="Retail price tier")
    trainer_price: Optional[Decimal] = Field(default=None, description="Trainer price tier")
    purchased_price: Optional[Decimal] = Field(default=None, description="Purchase cost")
    stock: int = Field(default=0, description="Units currently in stock")
    threshold: int = Field(default=5, description="Low-stock threshold")
    image_url: Optional[str] = Field(default=None, description="Product image location")
    created_at: Optional[datetime] = Field(default=None, description="Creation timestamp")
    last_updated: Optional[datetime] = Field(default=None, description="Last stock or detail update")


class ProductInput(BaseModel):
    """Writable product fields, as entered in a form or read from a spreadsheet row."""
    name: str = Field(description="Product name")
    sku: str = Field(description="Stock keeping unit code")
    category: str = Field(default="Default", description="Product category")
    category_type: Optional[str] = Field(default=None, description="Optional sub-classification")
    description: Optional[str] = Field(default=None, description="Free-text description")
    price: Decimal = Field(default=Decimal("0"), description="Default selling price")
    wholesale_price: Optional[Decimal] = Field(default=None, description="Wholesale price tier")
    retail_price: Optional[Decimal] = Field(default=None, description="Retail price tier")
    trainer_price: Optional[Decimal] = Field(default=None, description="Trainer price tier")
    purchased_price: Optional[Decimal] = Field(default=None, description="Purchase cost")
    stock: int = Field(default=0, description="Units in stock")
    threshold: int = Field(default=5, description="Low-stock threshold")
    image_url: Optional[str] = Field(default=None, description="Product image location")
