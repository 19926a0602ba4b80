from __future__ import annotations

from typing import Literal, Optional

from .backends.csv_backend import CsvBackend
from .interface import BackendClient
from ..config import get_config


def get_backend(kind: Optional[Literal["csv", "supabase"]] = None) -> BackendClient:
    config = get_config()
    kind = kind or config.backend
    if kind == "csv":
        # Reads from configured CSV folder
        return CsvBackend(data_dir=config.data_dir)
    if kind == "supabase":
        from .backends.supabase_backend import SupabaseBackend
        from ..supabase.auth import get_supabase_auth
        return SupabaseBackend(get_supabase_auth().get_client())
    raise ValueError(f"Unknown backend kind: {kind}")
