from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Sequence, Union

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from ..interface import BackendClient, BackendError, Row
from ...logging import get_logger

logger = get_logger(__name__)


def _to_wire(value: Any) -> Any:
    """Convert Python values into JSON-safe values PostgREST accepts."""
    if isinstance(value, Decimal):
        # numeric columns accept string literals, which keeps the exact value
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {k: _to_wire(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_wire(v) for v in value]
    return value


class SupabaseBackend(BackendClient):
    """
    Supabase implementation of BackendClient.
    - Each call is one PostgREST request executed immediately; no caching.
    - API and transport errors are re-raised as BackendError.
    """

    def __init__(self, client: Client) -> None:
        self.client = client

    @staticmethod
    def _execute(target: str, request):
        try:
            return request.execute()
        except APIError as e:
            logger.debug(f"Supabase API error on {target}: {e.message}")
            raise BackendError(target, e.message or str(e)) from e
        except httpx.HTTPError as e:
            logger.debug(f"Supabase transport error on {target}: {e}")
            raise BackendError(target, str(e)) from e

    @staticmethod
    def _apply_match(query, match: Optional[Mapping[str, Any]]):
        for col, value in (match or {}).items():
            query = query.eq(col, _to_wire(value))
        return query

    def insert(self, table: str, rows: Union[Row, Sequence[Row]]) -> List[Row]:
        payload = _to_wire(dict(rows) if isinstance(rows, Mapping) else [dict(r) for r in rows])
        response = self._execute(table, self.client.table(table).insert(payload))
        return list(response.data or [])

    def update(self, table: str, values: Row, match: Mapping[str, Any]) -> List[Row]:
        if not match:
            raise BackendError(table, "refusing to update without a filter")
        query = self._apply_match(self.client.table(table).update(_to_wire(values)), match)
        response = self._execute(table, query)
        return list(response.data or [])

    def select(
        self,
        table: str,
        columns: str = "*",
        match: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
    ) -> List[Row]:
        query = self._apply_match(self.client.table(table).select(columns), match)
        if order_by:
            query = query.order(order_by)
        response = self._execute(table, query)
        return list(response.data or [])

    def delete(self, table: str, match: Mapping[str, Any]) -> List[Row]:
        if not match:
            raise BackendError(table, "refusing to delete without a filter")
        query = self._apply_match(self.client.table(table).delete(), match)
        response = self._execute(table, query)
        return list(response.data or [])

    def call_procedure(self, name: str, params: Mapping[str, Any]) -> Any:
        response = self._execute(name, self.client.rpc(name, _to_wire(dict(params))))
        return response.data
