from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class AppConfig(BaseSettings):
    """Application configuration using Pydantic BaseSettings.

    Loads configuration from environment variables and .env file (if present).
    Fields are type-checked and validated. Defaults are provided where appropriate.
    """
    # Supabase
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    supabase_service_role_key: Optional[str] = None

    # Application
    app_env: str = "local"
    log_level: str = "DEBUG"
    backend: Literal["csv", "supabase"] = "csv"

    # Data paths
    data_dir: str = "sample_data"

    # Orders
    compensate_orphaned_orders: bool = False

    # Inventory import / export
    default_category: str = "Default"
    default_threshold: int = 5
    export_filename: str = "inventory_export.xlsx"
    export_sheet_name: str = "Inventory"

    # Seed data settings
    default_seed_products: int = 40
    default_seed_customers: int = 25
    default_seed_value: int = 42

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

_config: Optional[AppConfig] = None

def get_config() -> AppConfig:
    """Return the AppConfig instance (singleton pattern)."""
    global _config
    if _config is None:
        _config = AppConfig()
    return _config

def set_config_for_test(**kwargs):
    """For testing only: override the AppConfig instance with new values."""
    global _config
    _config = AppConfig(**kwargs)
