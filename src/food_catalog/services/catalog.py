"""Catalog resolver merging custom foods and the bulk dataset."""

import asyncio
import logging
from dataclasses import dataclass
from uuid import UUID

from food_catalog.domain.errors import UnauthenticatedError
from food_catalog.domain.foods import CreateFoodRequest, FoodRecord, FoodSearchPage
from food_catalog.services.bulk_search import (
    BulkDatasetRepository,
    SearchMode,
    decode_cursor,
    encode_cursor,
)
from food_catalog.services.cache import BarcodeCache
from food_catalog.services.custom_foods import CustomFoodStore
from food_catalog.services.nutrients import normalize_product

_logger = logging.getLogger(__name__)


@dataclass
class CatalogResolver:
    """Resolves foods by query or barcode across custom and bulk stores.

    Custom foods always take precedence over bulk dataset products. Store
    calls run in worker threads so callers can cancel or time out a lookup
    with the usual asyncio tools.
    """

    custom_store: CustomFoodStore
    bulk_repository: BulkDatasetRepository
    cache: BarcodeCache
    default_limit: int = 25
    max_limit: int = 50
    debug: bool = False

    async def search(
        self, query: str, limit: int | None = None, cursor: str | None = None
    ) -> FoodSearchPage:
        """Search custom foods first, then fill the page from the bulk dataset."""
        query = query.strip()
        if not query:
            return FoodSearchPage(items=[])
        limit = self._clamp_limit(limit)
        cursor = self._continuation(cursor)

        items: list[FoodRecord] = []
        if cursor is None:
            custom = await asyncio.to_thread(self.custom_store.search, query, limit)
            if len(custom) >= limit:
                if self.debug:
                    _logger.info(
                        "Catalog search: query=%s custom=%s bulk=skipped",
                        query,
                        len(custom),
                    )
                return FoodSearchPage(items=custom[:limit])
            items.extend(custom)

        page = await asyncio.to_thread(
            self.bulk_repository.search, query, limit - len(items), cursor
        )
        custom_count = len(items)
        items.extend(normalize_product(product) for product in page.products)
        if self.debug:
            _logger.info(
                "Catalog search: query=%s custom=%s bulk=%s next_cursor=%s",
                query,
                custom_count,
                len(page.products),
                page.next_cursor,
            )
        return FoodSearchPage(items=items, next_cursor=page.next_cursor)

    async def by_barcode(self, code: str) -> FoodRecord | None:
        """Resolve a barcode: custom store, then cache, then bulk dataset."""
        code = code.strip()
        if not code:
            return None

        custom = await asyncio.to_thread(self.custom_store.by_barcode, code)
        if custom is not None:
            return custom

        cached, found = self.cache.get(code)
        if found:
            if self.debug:
                _logger.info(
                    "Barcode cache hit: code=%s absent=%s", code, cached is None
                )
            return cached

        product = await asyncio.to_thread(self.bulk_repository.by_barcode, code)
        if product is None:
            self.cache.set_not_found(code)
            if self.debug:
                _logger.info("Barcode not found in bulk dataset: code=%s", code)
            return None

        record = normalize_product(product)
        self.cache.set(code, record)
        if self.debug:
            _logger.info("Barcode resolved from bulk dataset: code=%s", code)
        return record

    async def create_custom(
        self, actor_id: str, request: CreateFoodRequest
    ) -> FoodRecord:
        """Create a custom food on behalf of an authenticated actor."""
        if not actor_id.strip():
            raise UnauthenticatedError("actor id is required to create a custom food")
        return await asyncio.to_thread(self.custom_store.create, actor_id, request)

    async def by_custom_id(self, food_id: str) -> FoodRecord | None:
        """Return a custom food by id; malformed ids resolve to None."""
        food_id = food_id.strip()
        try:
            UUID(food_id)
        except ValueError:
            return None
        return await asyncio.to_thread(self.custom_store.by_id, food_id)

    async def ensure_indexes(self) -> None:
        """Prepare bulk dataset indexes."""
        await asyncio.to_thread(self.bulk_repository.ensure_indexes)

    def _clamp_limit(self, limit: int | None) -> int:
        if limit is None or limit <= 0:
            return self.default_limit
        return min(limit, self.max_limit)

    def _continuation(self, cursor: str | None) -> str | None:
        """Return the cursor only when it continues a bulk result set."""
        if self.bulk_repository.search_mode is SearchMode.TEXT:
            return None
        after = decode_cursor(cursor)
        if after is None:
            return None
        return encode_cursor(after)
