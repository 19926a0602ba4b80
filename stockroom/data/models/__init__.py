from .data_filters import (
    ProductFilters,
    StockFilter,
)

from .products import Product, ProductInput
from .customers import Customer
from .orders import Order, OrderDraft
from .order_items import OrderItem
from .access import CompanyAccess
from .results import (
    ImportSummary,
    OrderCreationResult,
    OrderErrorKind,
    StockWarning,
)

__all__ = [
    # Filter classes
    "ProductFilters",
    "StockFilter",
    # Row models
    "Product",
    "ProductInput",
    "Customer",
    "Order",
    "OrderDraft",
    "OrderItem",
    "CompanyAccess",
    # Result models
    "ImportSummary",
    "OrderCreationResult",
    "OrderErrorKind",
    "StockWarning",
]
