"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    bulk_table: str = "off_products"
    custom_table: str = "foods_custom"
    bulk_search_mode: str = "regex"
    search_default_limit: int = 25
    search_max_limit: int = 50
    barcode_cache_max_entries: int = 10_000
    barcode_cache_ttl_seconds: int = 86_400
    barcode_cache_negative_ttl_seconds: int = 1_800
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
