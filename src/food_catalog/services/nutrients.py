"""Normalization of raw bulk dataset nutriments into canonical records."""

import math
from collections.abc import Mapping, Sequence
from decimal import Decimal

from food_catalog.domain.bulk import BulkProduct
from food_catalog.domain.foods import FoodRecord, FoodSource, NutrientProfile

# Values the dataset uses for "present but negligible". These are unknown, not zero.
_NEGLIGIBLE_SENTINELS = frozenset({"trace", "traces", "<0.1", "<0,1"})

NUTRIENT_ALIASES: dict[str, tuple[str, ...]] = {
    "calories": ("energy-kcal_100g", "energy-kcal", "energy-kcal_value"),
    "protein_g": ("proteins_100g", "proteins"),
    "carbs_g": ("carbohydrates_100g", "carbohydrates"),
    "fat_g": ("fat_100g", "fat"),
    "fiber_g": ("fiber_100g", "fiber"),
    "sugar_g": ("sugars_100g", "sugars"),
    "salt_g": ("salt_100g", "salt"),
    "sodium_g": ("sodium_100g", "sodium"),
    "saturated_fat_g": ("saturated-fat_100g", "saturated-fat"),
    "monounsaturated_fat_g": ("monounsaturated-fat_100g", "monounsaturated-fat"),
    "polyunsaturated_fat_g": ("polyunsaturated-fat_100g", "polyunsaturated-fat"),
    "alpha_linolenic_acid_g": (
        "alpha-linolenic-acid_100g",
        "alpha-linolenic-acid",
    ),
}


def parse_nutrient_value(value: object) -> float | None:
    """Parse a raw nutriment value, returning None when it is not a usable number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float | Decimal):
        parsed = float(value)
    elif isinstance(value, str):
        cleaned = value.strip()
        if not cleaned or cleaned.lower() in _NEGLIGIBLE_SENTINELS:
            return None
        try:
            parsed = float(cleaned.replace(",", "."))
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def pick_nutrient(
    nutriments: Mapping[str, object], aliases: Sequence[str]
) -> float | None:
    """Return the first alias that is present and parseable."""
    for alias in aliases:
        value = parse_nutrient_value(nutriments.get(alias))
        if value is not None:
            return value
    return None


def normalize_nutriments(nutriments: object) -> NutrientProfile:
    """Map a raw nutriments document onto the canonical nutrient profile."""
    if not isinstance(nutriments, Mapping):
        return NutrientProfile()
    return NutrientProfile(
        **{
            name: pick_nutrient(nutriments, aliases)
            for name, aliases in NUTRIENT_ALIASES.items()
        }
    )


def normalize_product(product: BulkProduct) -> FoodRecord:
    """Convert a bulk dataset product into a canonical food record."""
    barcode = product.code.strip() or product.id.strip()
    return FoodRecord(
        source=FoodSource.BULK,
        id=product.id,
        name=product.product_name.strip(),
        brand=_clean(product.brands),
        barcode=barcode or None,
        nutrients=normalize_nutriments(product.nutriments),
        serving_size=_clean(product.serving_size),
        quantity=_clean(product.quantity),
    )


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None
