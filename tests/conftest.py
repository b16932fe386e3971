"""Shared test fixtures."""

import time
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from food_catalog.config import Settings
from food_catalog.domain.bulk import BulkProduct, BulkSearchPage
from food_catalog.domain.foods import (
    CreateFoodRequest,
    FoodRecord,
    FoodSource,
    NutrientProfile,
)
from food_catalog.services.bulk_search import (
    BulkDatasetRepository,
    SearchCursor,
    SearchMode,
    decode_cursor,
    encode_cursor,
    tokenize_keywords,
)
from food_catalog.services.cache import BarcodeCache
from food_catalog.services.catalog import CatalogResolver
from food_catalog.services.custom_foods import CustomFoodStore


@dataclass
class FakeClock:
    """Manually advanced clock for cache tests."""

    now: datetime = field(
        default_factory=lambda: datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@dataclass
class InMemoryCustomFoodStore(CustomFoodStore):
    """In-memory custom food store for tests."""

    foods: dict[str, FoodRecord] = field(default_factory=dict)
    owners: dict[str, str] = field(default_factory=dict)
    barcode_calls: int = 0
    search_calls: int = 0

    def add(self, record: FoodRecord) -> FoodRecord:
        food_id = record.id or str(uuid4())
        stored = replace(record, id=food_id)
        self.foods[food_id] = stored
        return stored

    def create(self, actor_id: str, request: CreateFoodRequest) -> FoodRecord:
        record = self.add(
            FoodRecord(
                source=FoodSource.CUSTOM,
                name=request.name,
                brand=request.brand,
                barcode=request.barcode,
                nutrients=NutrientProfile(
                    calories=request.calories,
                    protein_g=request.protein_g,
                    carbs_g=request.carbs_g,
                    fat_g=request.fat_g,
                    fiber_g=request.fiber_g,
                    sugar_g=request.sugar_g,
                    salt_g=request.salt_g,
                ),
                serving_g=request.serving_g,
            )
        )
        self.owners[str(record.id)] = actor_id
        return record

    def by_barcode(self, code: str) -> FoodRecord | None:
        self.barcode_calls += 1
        for food in self.foods.values():
            if food.barcode == code:
                return food
        return None

    def search(self, query: str, limit: int) -> list[FoodRecord]:
        self.search_calls += 1
        needle = query.lower()
        results = [
            food
            for food in self.foods.values()
            if needle in food.name.lower() or needle in (food.brand or "").lower()
        ]
        return results[:limit]

    def by_id(self, food_id: str) -> FoodRecord | None:
        return self.foods.get(food_id)


@dataclass
class InMemoryBulkRepository(BulkDatasetRepository):
    """In-memory bulk dataset honoring the regex and keyword orderings."""

    products: list[BulkProduct] = field(default_factory=list)
    search_mode: SearchMode = SearchMode.REGEX
    error: Exception | None = None
    delay_seconds: float = 0.0
    search_calls: int = 0
    barcode_calls: int = 0
    ensure_calls: int = 0
    last_search: tuple[str, int, str | None] | None = None

    def search(self, query: str, limit: int, cursor: str | None) -> BulkSearchPage:
        self.search_calls += 1
        self.last_search = (query, limit, cursor)
        self._maybe_fail()
        candidates = [p for p in self.products if p.product_name.strip() and p.id]
        if self.search_mode is SearchMode.KEYWORD:
            tokens = set(tokenize_keywords(query))
            matches = [p for p in candidates if tokens & set(p.keywords)]

            def sort_key(product: BulkProduct) -> int:
                return product.unique_scans_n

        else:
            needle = query.lower()
            matches = [
                p
                for p in candidates
                if needle in p.product_name.lower() or needle in p.brands.lower()
            ]

            def sort_key(product: BulkProduct) -> int:
                return product.popularity_key

        after = decode_cursor(cursor)
        if after is not None:
            matches = [
                p
                for p in matches
                if sort_key(p) < after.sort_key
                or (sort_key(p) == after.sort_key and p.id > after.tie_break)
            ]
        matches.sort(key=lambda p: (-sort_key(p), p.id))
        page = matches[:limit]
        next_cursor = None
        if page and len(page) == limit:
            last = page[-1]
            next_cursor = encode_cursor(SearchCursor(sort_key(last), last.id))
        return BulkSearchPage(products=page, next_cursor=next_cursor)

    def by_barcode(self, code: str) -> BulkProduct | None:
        self.barcode_calls += 1
        self._maybe_fail()
        named = [p for p in self.products if p.product_name.strip()]
        for product in named:
            if product.code == code:
                return product
        for product in named:
            if product.id == code:
                return product
        return None

    def ensure_indexes(self) -> None:
        self.ensure_calls += 1
        self._maybe_fail()

    def _maybe_fail(self) -> None:
        if self.delay_seconds:
            time.sleep(self.delay_seconds)
        if self.error is not None:
            raise self.error


def make_product(  # noqa: PLR0913
    product_id: str,
    name: str,
    *,
    brand: str = "",
    code: str | None = None,
    popularity: int = 0,
    scans: int = 0,
    keywords: tuple[str, ...] = (),
    nutriments: dict[str, object] | None = None,
) -> BulkProduct:
    return BulkProduct(
        id=product_id,
        code=product_id if code is None else code,
        product_name=name,
        brands=brand,
        popularity_key=popularity,
        unique_scans_n=scans,
        nutriments=nutriments or {"energy-kcal_100g": 50},
        keywords=keywords,
    )


def make_custom_food(name: str, *, barcode: str | None = None) -> FoodRecord:
    return FoodRecord(
        source=FoodSource.CUSTOM,
        id=str(uuid4()),
        name=name,
        barcode=barcode,
        nutrients=NutrientProfile(calories=45, protein_g=1, carbs_g=7, fat_g=1.5),
        serving_g=250,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def barcode_cache(clock: FakeClock) -> BarcodeCache:
    return BarcodeCache(
        max_entries=1000, ttl_seconds=86400, negative_ttl_seconds=1800, clock=clock
    )


@pytest.fixture
def custom_store() -> InMemoryCustomFoodStore:
    return InMemoryCustomFoodStore()


@pytest.fixture
def bulk_repository() -> InMemoryBulkRepository:
    return InMemoryBulkRepository()


@pytest.fixture
def resolver(
    custom_store: InMemoryCustomFoodStore,
    bulk_repository: InMemoryBulkRepository,
    barcode_cache: BarcodeCache,
) -> CatalogResolver:
    return CatalogResolver(
        custom_store=custom_store,
        bulk_repository=bulk_repository,
        cache=barcode_cache,
    )
