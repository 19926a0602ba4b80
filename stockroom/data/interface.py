from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Union

Row = Dict[str, Any]


class BackendError(Exception):
    """Raised by a backend when a table operation or remote procedure fails."""

    def __init__(self, target: str, message: str) -> None:
        super().__init__(f"{target}: {message}")
        self.target = target
        self.message = message


# ---- Backend capability protocol ----

class BackendClient(Protocol):
    """
    Backend-agnostic contract for the hosted tables and remote procedures.

    IMPORTANT:
    - Every method raises BackendError on failure; nothing is swallowed here.
    - There are no transactions. Each call is an independent request, so a
      sequence of calls can leave partial writes behind.
    """

    def insert(self, table: str, rows: Union[Row, Sequence[Row]]) -> List[Row]:
        """Insert one or more rows and return them as stored (generated ids included)."""
        ...

    def update(self, table: str, values: Row, match: Mapping[str, Any]) -> List[Row]:
        """Update rows whose columns equal every value in `match`; return the updated rows."""
        ...

    def select(
        self,
        table: str,
        columns: str = "*",
        match: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
    ) -> List[Row]:
        """Select rows, optionally filtered by equality and ordered by one column."""
        ...

    def delete(self, table: str, match: Mapping[str, Any]) -> List[Row]:
        """Delete matching rows and return them."""
        ...

    def call_procedure(self, name: str, params: Mapping[str, Any]) -> Any:
        """Invoke a remote procedure by name."""
        ...


def select_one(
    backend: BackendClient,
    table: str,
    columns: str = "*",
    match: Optional[Mapping[str, Any]] = None,
) -> Optional[Row]:
    """Return the single matching row, None when nothing matches."""
    rows = backend.select(table, columns=columns, match=match)
    if len(rows) > 1:
        raise BackendError(table, f"expected at most one row for {dict(match or {})}, got {len(rows)}")
    return rows[0] if rows else None


def select_single(
    backend: BackendClient,
    table: str,
    columns: str = "*",
    match: Optional[Mapping[str, Any]] = None,
) -> Row:
    """Return exactly one matching row, raising BackendError otherwise."""
    row = select_one(backend, table, columns=columns, match=match)
    if row is None:
        raise BackendError(table, f"no row matches {dict(match or {})}")
    return row
