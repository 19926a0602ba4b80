from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import pandas as pd

from ..interface import BackendClient, BackendError, Row
from ...config import get_config
from ...logging import get_logger

logger = get_logger(__name__)

# Columns per table; used when a CSV file is absent so an empty table still
# has the right shape.
TABLE_COLUMNS: Dict[str, List[str]] = {
    "products": [
        "id", "name", "sku", "category", "category_type", "description", "price",
        "wholesale_price", "retail_price", "trainer_price", "purchased_price",
        "stock", "threshold", "image_url", "created_at", "last_updated",
    ],
    "customers": ["id", "name", "email", "total_orders", "total_spent"],
    "orders": ["id", "customer_id", "status", "payment_status", "total", "created_at"],
    "order_items": ["id", "order_id", "product_id", "product_name", "quantity", "price", "subtotal"],
    "staff": ["id", "staff_email"],
    "company_access": ["id", "business_name", "owner_id", "staff_id", "created_at"],
}

NUMERIC_COLUMNS = {
    "price", "wholesale_price", "retail_price", "trainer_price", "purchased_price",
    "stock", "threshold", "total_orders", "total_spent", "total", "quantity", "subtotal",
}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class CsvBackend(BackendClient):
    """
    CSV-backed implementation for local development.
    - Loads every table CSV from `data_dir` once at construction.
    - Mutations happen on the in-memory frames; call `flush()` to write them back.
    - The `decrement` and `add_amount` procedures run locally against the frames.
    """

    def __init__(self, data_dir: str | Path = None, load: bool = True) -> None:
        if data_dir is None:
            config = get_config()
            data_dir = config.data_dir

        self.data_dir = Path(data_dir)

        # If the path is relative, make it relative to the repository root
        if not self.data_dir.is_absolute():
            current = Path.cwd()
            repo_root = None

            # Look up the directory tree for pyproject.toml
            for parent in [current] + list(current.parents):
                if (parent / "pyproject.toml").exists():
                    repo_root = parent
                    break

            self.data_dir = (repo_root or current) / self.data_dir

        self._tables: Dict[str, pd.DataFrame] = {}
        if load:
            self._tables = self._load_tables(self.data_dir)
        else:
            self._tables = {name: pd.DataFrame(columns=cols) for name, cols in TABLE_COLUMNS.items()}

        self._procedures = {
            "decrement": self._decrement,
            "add_amount": self._add_amount,
        }

    # ---------- loading / persistence ----------

    @staticmethod
    def _load_tables(data_dir: Path) -> Dict[str, pd.DataFrame]:
        if not data_dir.exists():
            raise FileNotFoundError(
                f"Data directory not found: {data_dir}\n"
                f"Please either:\n"
                f"  1. Generate sample data: python -m stockroom.seed_data\n"
                f"  2. Set DATA_DIR environment variable to point to your data directory\n"
                f"  3. Create a .env file with DATA_DIR=/path/to/your/data"
            )

        tables = {}
        for name, cols in TABLE_COLUMNS.items():
            path = data_dir / f"{name}.csv"
            if not path.exists():
                tables[name] = pd.DataFrame(columns=cols)
                continue
            try:
                # Read as text so identifiers never turn into numbers
                df = pd.read_csv(path, dtype=str)
            except Exception as e:
                raise RuntimeError(
                    f"Error reading {path}: {e}\n"
                    f"Please check that the CSV file is valid and readable."
                ) from e
            for col in df.columns:
                if col in NUMERIC_COLUMNS:
                    df[col] = pd.to_numeric(df[col])
            tables[name] = df
        logger.debug(f"Loaded {len(tables)} tables from {data_dir}")
        return tables

    def flush(self) -> None:
        """Write every table back to its CSV file."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        for name, df in self._tables.items():
            df.to_csv(self.data_dir / f"{name}.csv", index=False)
        logger.info(f"Flushed {len(self._tables)} tables to {self.data_dir}")

    # ---------- frame helpers ----------

    def _table(self, table: str) -> pd.DataFrame:
        if table not in self._tables:
            raise BackendError(table, "unknown table")
        return self._tables[table]

    @staticmethod
    def _mask(df: pd.DataFrame, table: str, match: Optional[Mapping[str, Any]]) -> pd.Series:
        mask = pd.Series(True, index=df.index)
        for col, value in (match or {}).items():
            if col not in df.columns:
                raise BackendError(table, f"unknown column {col!r}")
            mask &= df[col].astype(str) == str(value)
        return mask

    @staticmethod
    def _records(df: pd.DataFrame) -> List[Row]:
        return df.astype(object).where(df.notna(), None).to_dict("records")

    @staticmethod
    def _set(df: pd.DataFrame, idx, col: str, value: Any) -> None:
        if col not in df.columns:
            df[col] = None
        # object dtype keeps Decimals and ints as given
        df[col] = df[col].astype(object)
        df.at[idx, col] = value

    # ---------- interface implementation ----------

    def insert(self, table: str, rows: Union[Row, Sequence[Row]]) -> List[Row]:
        df = self._table(table)
        if isinstance(rows, Mapping):
            rows = [rows]
        stored = []
        for row in rows:
            row = dict(row)
            row.setdefault("id", str(uuid.uuid4()))
            if "created_at" in TABLE_COLUMNS.get(table, []):
                row.setdefault("created_at", _now_iso())
            if "id" in df.columns and (df["id"].astype(str) == str(row["id"])).any():
                raise BackendError(table, f"duplicate key value id={row['id']}")
            stored.append(row)
        if not stored:
            return []
        new = pd.DataFrame(stored)
        if df.empty:
            columns = list(dict.fromkeys([*df.columns, *new.columns]))
            self._tables[table] = new.reindex(columns=columns)
        else:
            self._tables[table] = pd.concat([df, new], ignore_index=True)
        return [dict(r) for r in stored]

    def update(self, table: str, values: Row, match: Mapping[str, Any]) -> List[Row]:
        df = self._table(table)
        mask = self._mask(df, table, match)
        for idx in df.index[mask]:
            for col, value in values.items():
                self._set(df, idx, col, value)
        return self._records(df.loc[mask])

    def select(
        self,
        table: str,
        columns: str = "*",
        match: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
    ) -> List[Row]:
        df = self._table(table)
        out = df.loc[self._mask(df, table, match)]
        if order_by:
            if order_by not in out.columns:
                raise BackendError(table, f"unknown column {order_by!r}")
            out = out.sort_values(order_by, key=lambda s: s.astype(str).str.lower())
        if columns.strip() != "*":
            cols = [c.strip() for c in columns.split(",")]
            missing = [c for c in cols if c not in out.columns]
            if missing:
                raise BackendError(table, f"unknown column(s) {', '.join(missing)}")
            out = out[cols]
        return self._records(out)

    def delete(self, table: str, match: Mapping[str, Any]) -> List[Row]:
        df = self._table(table)
        mask = self._mask(df, table, match)
        removed = self._records(df.loc[mask])
        self._tables[table] = df.loc[~mask].reset_index(drop=True)
        return removed

    def call_procedure(self, name: str, params: Mapping[str, Any]) -> Any:
        if name not in self._procedures:
            raise BackendError(name, "procedure not found")
        try:
            return self._procedures[name](**params)
        except TypeError as e:
            raise BackendError(name, f"invalid parameters: {e}") from e

    # ---------- local procedures ----------

    def _decrement(self, id: str, x: int) -> int:
        df = self._table("products")
        mask = self._mask(df, "products", {"id": id})
        if not mask.any():
            raise BackendError("decrement", f"product {id} not found")
        idx = df.index[mask][0]
        current = df.at[idx, "stock"]
        # No clamp here: the remote procedure does not guarantee one either
        new_stock = int(0 if pd.isna(current) else current) - int(x)
        self._set(df, idx, "stock", new_stock)
        self._set(df, idx, "last_updated", _now_iso())
        return new_stock

    def _add_amount(self, id: str, amount: Any, base: Any = 0) -> Decimal:
        df = self._table("customers")
        mask = self._mask(df, "customers", {"id": id})
        if not mask.any():
            raise BackendError("add_amount", f"customer {id} not found")
        idx = df.index[mask][0]
        spent = df.at[idx, "total_spent"]
        orders = df.at[idx, "total_orders"]
        start = Decimal(str(base)) if pd.isna(spent) else Decimal(str(spent))
        new_spent = start + Decimal(str(amount))
        self._set(df, idx, "total_spent", new_spent)
        self._set(df, idx, "total_orders", int(0 if pd.isna(orders) else orders) + 1)
        return new_spent
