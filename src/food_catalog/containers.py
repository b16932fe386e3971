"""Dependency container wiring for the catalog."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from food_catalog.adapters.supabase_bulk_repository import SupabaseBulkRepository
from food_catalog.adapters.supabase_custom_food_repository import (
    SupabaseCustomFoodRepository,
)
from food_catalog.app_logging import configure_logging
from food_catalog.config import Settings
from food_catalog.services.bulk_search import parse_search_mode
from food_catalog.services.cache import BarcodeCache
from food_catalog.services.catalog import CatalogResolver

_logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds catalog-wide dependencies."""

    settings: Settings
    barcode_cache: BarcodeCache
    catalog_resolver: CatalogResolver
    startup: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging(debug=resolved_settings.debug)
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    custom_repository = SupabaseCustomFoodRepository(
        supabase_client, table=resolved_settings.custom_table
    )
    bulk_repository = SupabaseBulkRepository(
        supabase_client,
        table=resolved_settings.bulk_table,
        search_mode=parse_search_mode(resolved_settings.bulk_search_mode),
    )
    barcode_cache = BarcodeCache(
        max_entries=resolved_settings.barcode_cache_max_entries,
        ttl_seconds=resolved_settings.barcode_cache_ttl_seconds,
        negative_ttl_seconds=resolved_settings.barcode_cache_negative_ttl_seconds,
    )
    resolver = CatalogResolver(
        custom_store=custom_repository,
        bulk_repository=bulk_repository,
        cache=barcode_cache,
        default_limit=resolved_settings.search_default_limit,
        max_limit=resolved_settings.search_max_limit,
        debug=resolved_settings.debug,
    )
    return AppContainer(
        settings=resolved_settings,
        barcode_cache=barcode_cache,
        catalog_resolver=resolver,
        startup=startup_hook(resolver),
    )


def startup_hook(resolver: CatalogResolver) -> Callable[[], Awaitable[None]]:
    """Return the process-start hook; index setup failures are only logged."""

    async def startup() -> None:
        try:
            await resolver.ensure_indexes()
        except Exception:
            _logger.exception("Failed to ensure bulk dataset indexes")

    return startup
