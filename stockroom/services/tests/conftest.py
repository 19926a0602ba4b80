import copy
import uuid
from decimal import Decimal

import pytest

from stockroom.config import set_config_for_test
from stockroom.data.interface import BackendError


class FakeBackend:
    """In-memory BackendClient that records every call and fails on demand."""

    WRITE_METHODS = {"insert", "update", "delete", "call_procedure"}

    def __init__(self, tables=None):
        self.tables = {name: [dict(r) for r in rows] for name, rows in (tables or {}).items()}
        self.calls = []
        self._failures = []

    # ---- test helpers ----

    def fail(self, method, target, when=None, error=None):
        """Make `method` on `target` raise `error` (a BackendError by default), optionally only when `when(payload)` holds."""
        self._failures.append((method, target, when, error))

    def calls_to(self, method=None, target=None):
        return [
            c for c in self.calls
            if (method is None or c[0] == method) and (target is None or c[1] == target)
        ]

    @property
    def writes(self):
        return [c for c in self.calls if c[0] in self.WRITE_METHODS]

    def _record(self, method, target, payload):
        self.calls.append((method, target, copy.deepcopy(payload)))
        for f_method, f_target, when, error in self._failures:
            if f_method == method and f_target == target and (when is None or when(payload)):
                raise error or BackendError(target, f"injected {method} failure")

    @staticmethod
    def _matches(row, match):
        return all(str(row.get(k)) == str(v) for k, v in (match or {}).items())

    # ---- BackendClient ----

    def insert(self, table, rows):
        self._record("insert", table, rows)
        rows = [rows] if isinstance(rows, dict) else rows
        stored = []
        for row in rows:
            row = dict(row)
            row.setdefault("id", str(uuid.uuid4()))
            stored.append(row)
        self.tables.setdefault(table, []).extend(stored)
        return [dict(r) for r in stored]

    def update(self, table, values, match):
        self._record("update", table, {"values": values, "match": match})
        updated = []
        for row in self.tables.get(table, []):
            if self._matches(row, match):
                row.update(values)
                updated.append(dict(row))
        return updated

    def select(self, table, columns="*", match=None, order_by=None):
        self._record("select", table, {"columns": columns, "match": match})
        rows = [dict(r) for r in self.tables.get(table, []) if self._matches(r, match)]
        if order_by:
            rows.sort(key=lambda r: str(r.get(order_by)).lower())
        if columns.strip() != "*":
            cols = [c.strip() for c in columns.split(",")]
            rows = [{c: r.get(c) for c in cols} for r in rows]
        return rows

    def delete(self, table, match):
        self._record("delete", table, match)
        kept, removed = [], []
        for row in self.tables.get(table, []):
            (removed if self._matches(row, match) else kept).append(row)
        self.tables[table] = kept
        return removed

    def call_procedure(self, name, params):
        self._record("call_procedure", name, params)
        if name == "decrement":
            row = self._find("products", params["id"])
            row["stock"] = row["stock"] - params["x"]
            return row["stock"]
        if name == "add_amount":
            row = self._find("customers", params["id"])
            row["total_spent"] = Decimal(str(row["total_spent"])) + Decimal(str(params["amount"]))
            row["total_orders"] = row["total_orders"] + 1
            return row["total_spent"]
        raise BackendError(name, "procedure not found")

    def _find(self, table, row_id):
        for row in self.tables.get(table, []):
            if str(row["id"]) == str(row_id):
                return row
        raise BackendError(table, f"{row_id} not found")


@pytest.fixture(autouse=True)
def app_config():
    set_config_for_test(log_level="DEBUG", compensate_orphaned_orders=False)
    yield


@pytest.fixture
def backend():
    return FakeBackend(
        {
            "products": [
                {"id": "p1", "name": "Whey 900", "sku": "WHEY900", "stock": 10, "threshold": 5, "price": Decimal("100")},
                {"id": "p2", "name": "Yoga Mat", "sku": "MAT01", "stock": 3, "threshold": 5, "price": Decimal("25.50")},
                {"id": "p3", "name": "Shaker", "sku": "SHK", "stock": 1, "threshold": 2, "price": Decimal("7.99")},
            ],
            "customers": [
                {"id": "c1", "name": "Casey Rossi", "total_orders": 2, "total_spent": Decimal("500")},
            ],
            "orders": [],
            "order_items": [],
        }
    )
