"""Supabase implementation of the custom food store."""

from dataclasses import dataclass

from supabase import Client, PostgrestAPIError

from food_catalog.adapters.postgrest_filters import name_or_brand_match
from food_catalog.domain.errors import DuplicateBarcodeError
from food_catalog.domain.foods import (
    CreateFoodRequest,
    FoodRecord,
    FoodSource,
    NutrientProfile,
)
from food_catalog.services.custom_foods import CustomFoodStore
from food_catalog.services.nutrients import NUTRIENT_ALIASES, pick_nutrient

_UNIQUE_VIOLATION = "23505"

# Nutrients stored only inside the nutriments document, not as columns.
_DOCUMENT_ONLY_NUTRIENTS = (
    "sodium_g",
    "saturated_fat_g",
    "monounsaturated_fat_g",
    "polyunsaturated_fat_g",
    "alpha_linolenic_acid_g",
)


@dataclass
class SupabaseCustomFoodRepository(CustomFoodStore):
    """Supabase-backed repository for user-authored foods."""

    client: Client
    table: str = "foods_custom"

    def create(self, actor_id: str, request: CreateFoodRequest) -> FoodRecord:
        """Insert a custom food and return it."""
        row = {
            "created_by_user_id": actor_id,
            "name": request.name,
            "brand": request.brand,
            "barcode": request.barcode,
            "kcal_per_100g": request.calories,
            "protein_g_per_100g": request.protein_g,
            "carbs_g_per_100g": request.carbs_g,
            "fat_g_per_100g": request.fat_g,
            "fiber_g_per_100g": request.fiber_g,
            "sugar_g_per_100g": request.sugar_g,
            "salt_g_per_100g": request.salt_g,
            "serving_g": request.serving_g,
            "nutriments": build_nutriments(request),
        }
        try:
            response = self.client.table(self.table).insert(row).execute()
        except PostgrestAPIError as exc:
            if exc.code == _UNIQUE_VIOLATION:
                raise DuplicateBarcodeError(
                    f"barcode already exists: {request.barcode}"
                ) from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to create custom food")
        return _parse_custom_food(response.data[0])

    def by_barcode(self, code: str) -> FoodRecord | None:
        """Return the custom food registered for a barcode, if present."""
        code = code.strip()
        if not code:
            return None
        response = (
            self.client.table(self.table)
            .select("*")
            .eq("barcode", code)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_custom_food(response.data[0])

    def search(self, query: str, limit: int) -> list[FoodRecord]:
        """Search custom foods by name or brand, verified entries first."""
        query = query.strip()
        if not query:
            return []
        response = (
            self.client.table(self.table)
            .select("*")
            .or_(name_or_brand_match(query, "name", "brand"))
            .order("verified", desc=True)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_custom_food(row) for row in response.data or []]

    def by_id(self, food_id: str) -> FoodRecord | None:
        """Return a custom food by id, if present."""
        response = (
            self.client.table(self.table)
            .select("*")
            .eq("id", food_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_custom_food(response.data[0])


def build_nutriments(request: CreateFoodRequest) -> dict[str, float]:
    """Build a bulk-dataset compatible nutriments document for a custom food."""
    nutriments: dict[str, float] = {}
    for name, aliases in NUTRIENT_ALIASES.items():
        value = getattr(request, name)
        if value is not None:
            nutriments[aliases[0]] = float(value)
    for key, value in request.nutriments.items():
        cleaned = key.strip()
        if cleaned:
            nutriments[cleaned] = float(value)
    return nutriments


def _parse_custom_food(row: dict[str, object]) -> FoodRecord:
    """Parse a custom food row into a canonical record."""
    document = row.get("nutriments")
    if not isinstance(document, dict):
        document = {}
    extras = {
        name: pick_nutrient(document, NUTRIENT_ALIASES[name])
        for name in _DOCUMENT_ONLY_NUTRIENTS
    }
    nutrients = NutrientProfile(
        calories=_optional_float(row.get("kcal_per_100g")),
        protein_g=_optional_float(row.get("protein_g_per_100g")),
        carbs_g=_optional_float(row.get("carbs_g_per_100g")),
        fat_g=_optional_float(row.get("fat_g_per_100g")),
        fiber_g=_optional_float(row.get("fiber_g_per_100g")),
        sugar_g=_optional_float(row.get("sugar_g_per_100g")),
        salt_g=_optional_float(row.get("salt_g_per_100g")),
        **extras,
    )
    return FoodRecord(
        source=FoodSource.CUSTOM,
        id=str(row["id"]),
        name=str(row.get("name") or "").strip(),
        brand=row.get("brand") or None,
        barcode=row.get("barcode") or None,
        nutrients=nutrients,
        serving_g=_optional_float(row.get("serving_g")),
        verified=bool(row.get("verified", False)),
    )


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return float(value)
