"""
Order placement workflow.

Validating -> WritingHeader -> WritingItems -> ReconcilingStock ->
ReconcilingCustomerStats -> Done

Only the first three stages can fail the submission. The two reconciliation
stages prefer an atomic remote procedure, fall back to read-modify-write, and
report what they could not do as warnings on the result.
"""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional

from ..config import get_config
from ..data.interface import BackendClient, select_single
from ..data.models import (
    Customer,
    Order,
    OrderCreationResult,
    OrderDraft,
    OrderErrorKind,
    OrderItem,
    StockWarning,
)
from ..logging import get_logger

logger = get_logger(__name__)

CENTS = Decimal("0.01")
DEFAULT_ORDER_ERROR = "An error occurred while creating the order"


def order_total(items: Iterable[OrderItem]) -> Decimal:
    """Sum of the line subtotals, rounded to currency precision."""
    total = sum((Decimal(item.subtotal) for item in items), Decimal("0"))
    return total.quantize(CENTS, rounding=ROUND_HALF_UP)


def validate_order(draft: OrderDraft) -> Optional[str]:
    """Return a user-facing message when the draft cannot be submitted."""
    if not draft.customer_id:
        return "Please select a customer"
    if len(draft.items) == 0:
        return "Please add at least one item to the order"
    return None


def _as_int(value) -> int:
    return int(Decimal(str(value))) if value is not None else 0


def _as_decimal(value) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


class StockReconciler:
    """Deducts ordered quantities from product stock, one line item at a time."""

    def __init__(self, backend: BackendClient) -> None:
        self.backend = backend

    def adjust(self, items: Iterable[OrderItem]) -> List[StockWarning]:
        warnings = []
        for item in items:
            warning = self.adjust_item(item)
            if warning is not None:
                warnings.append(warning)
        return warnings

    def adjust_item(self, item: OrderItem) -> Optional[StockWarning]:
        try:
            self.backend.call_procedure("decrement", {"x": item.quantity, "id": item.product_id})
            return None
        except Exception as e:
            logger.error(f"Error using RPC to update stock for product {item.product_id}: {e}")

        try:
            product = select_single(self.backend, "products", columns="stock", match={"id": item.product_id})
            new_stock = max(0, _as_int(product.get("stock")) - item.quantity)
        except Exception as e:
            logger.error(f"Error fetching product {item.product_id}: {e}")
            return StockWarning(product_id=item.product_id, quantity=item.quantity, stage="read", message=str(e))

        try:
            self.backend.update(
                "products",
                {"stock": new_stock, "last_updated": datetime.now(timezone.utc).isoformat()},
                match={"id": item.product_id},
            )
        except Exception as e:
            logger.error(f"Error updating stock for product {item.product_id}: {e}")
            return StockWarning(product_id=item.product_id, quantity=item.quantity, stage="write", message=str(e))

        logger.debug(f"Stock for product {item.product_id} set to {new_stock} via fallback")
        return None


class CustomerStatsReconciler:
    """Adds a placed order to the customer's order count and total spend."""

    def __init__(self, backend: BackendClient) -> None:
        self.backend = backend

    def adjust(self, customer_id: str, total: Decimal) -> bool:
        """Returns True when the customer statistics were updated."""
        try:
            self.backend.call_procedure("add_amount", {"base": 0, "amount": total, "id": customer_id})
            return True
        except Exception as e:
            logger.error(f"Error using RPC to update customer stats for {customer_id}: {e}")

        try:
            customer = select_single(
                self.backend, "customers", columns="total_orders, total_spent", match={"id": customer_id}
            )
            values = {
                "total_orders": _as_int(customer.get("total_orders")) + 1,
                "total_spent": _as_decimal(customer.get("total_spent")) + total,
            }
        except Exception as e:
            logger.error(f"Error fetching customer {customer_id}: {e}")
            return False

        try:
            self.backend.update("customers", values, match={"id": customer_id})
        except Exception as e:
            logger.error(f"Error updating customer stats for {customer_id}: {e}")
            return False
        return True


class OrderService:
    """Places orders against a BackendClient."""

    def __init__(self, backend: BackendClient, compensate_orphaned_orders: Optional[bool] = None) -> None:
        self.backend = backend
        if compensate_orphaned_orders is None:
            compensate_orphaned_orders = get_config().compensate_orphaned_orders
        self.compensate_orphaned_orders = compensate_orphaned_orders
        self.stock = StockReconciler(backend)
        self.customer_stats = CustomerStatsReconciler(backend)

    def create_order(self, draft: OrderDraft) -> OrderCreationResult:
        error = validate_order(draft)
        if error:
            logger.info(f"Order rejected: {error}")
            return OrderCreationResult(success=False, error=error, error_kind=OrderErrorKind.VALIDATION)

        total = order_total(draft.items)

        try:
            header = self.backend.insert(
                "orders",
                {
                    "customer_id": draft.customer_id,
                    "status": draft.status,
                    "payment_status": draft.payment_status,
                    "total": total,
                },
            )
            order_id = str(header[0]["id"])
        except Exception as e:
            logger.error(f"Error writing order header for customer {draft.customer_id}: {e}")
            return OrderCreationResult(
                success=False,
                error=str(e) or DEFAULT_ORDER_ERROR,
                error_kind=OrderErrorKind.HEADER_WRITE,
            )

        rows = [
            {
                "order_id": order_id,
                "product_id": item.product_id,
                "product_name": item.product_name,
                "quantity": item.quantity,
                "price": item.price,
                "subtotal": item.subtotal,
            }
            for item in draft.items
        ]
        try:
            self.backend.insert("order_items", rows)
        except Exception as e:
            logger.error(f"Error writing {len(rows)} items for order {order_id}: {e}")
            return OrderCreationResult(
                success=False,
                error=str(e) or DEFAULT_ORDER_ERROR,
                error_kind=OrderErrorKind.ITEMS_WRITE,
                total=total,
                orphaned_order_id=self._compensate(order_id),
            )

        logger.info(f"Order {order_id} written with {len(rows)} items, total {total}")

        stock_warnings = self.stock.adjust(draft.items)
        stats_updated = self.customer_stats.adjust(draft.customer_id, total)
        if stock_warnings or not stats_updated:
            logger.warning(
                f"Order {order_id} recorded with {len(stock_warnings)} stock warning(s), "
                f"customer stats updated: {stats_updated}"
            )

        return OrderCreationResult(
            success=True,
            order_id=order_id,
            total=total,
            stock_warnings=stock_warnings,
            stats_warning=not stats_updated,
        )

    def _compensate(self, order_id: str) -> Optional[str]:
        """Delete the header left behind by a failed item write.

        Returns the order id when the header is still in place.
        """
        if not self.compensate_orphaned_orders:
            return order_id
        try:
            self.backend.delete("orders", {"id": order_id})
        except Exception as e:
            logger.error(f"Could not remove orphaned order {order_id}: {e}")
            return order_id
        logger.info(f"Removed orphaned order {order_id}")
        return None


def create_order(backend: BackendClient, draft: OrderDraft) -> OrderCreationResult:
    """Validate and place an order using the configured compensation policy."""
    return OrderService(backend).create_order(draft)


def list_customers(backend: BackendClient) -> List[Customer]:
    return [Customer.model_validate(row) for row in backend.select("customers", order_by="name")]


def list_orders(backend: BackendClient, customer_id: Optional[str] = None) -> List[Order]:
    match = {"customer_id": customer_id} if customer_id else None
    return [Order.model_validate(row) for row in backend.select("orders", match=match)]
