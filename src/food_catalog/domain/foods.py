"""Canonical food domain models."""

from dataclasses import dataclass, field
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator


class FoodSource(StrEnum):
    """Provenance of a food record."""

    BULK = "off"
    CUSTOM = "custom"


@dataclass(frozen=True)
class NutrientProfile:
    """Per-100g nutrient values. ``None`` means unknown, not zero."""

    calories: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fat_g: float | None = None
    fiber_g: float | None = None
    sugar_g: float | None = None
    salt_g: float | None = None
    sodium_g: float | None = None
    saturated_fat_g: float | None = None
    monounsaturated_fat_g: float | None = None
    polyunsaturated_fat_g: float | None = None
    alpha_linolenic_acid_g: float | None = None


@dataclass(frozen=True)
class FoodRecord:
    """Source-agnostic food record shared by both stores.

    Bulk records carry the raw ``serving_size`` and ``quantity`` strings and
    never ``serving_g``; custom records carry ``serving_g`` and never the raw
    strings.
    """

    source: FoodSource
    name: str
    id: str | None = None
    brand: str | None = None
    barcode: str | None = None
    nutrients: NutrientProfile = field(default_factory=NutrientProfile)
    serving_size: str | None = None
    quantity: str | None = None
    serving_g: float | None = None
    verified: bool = False


@dataclass(frozen=True)
class FoodSearchPage:
    """One page of merged search results."""

    items: list[FoodRecord]
    next_cursor: str | None = None


class CreateFoodRequest(BaseModel):
    """Payload for creating a custom food."""

    name: str = Field(min_length=1)
    brand: str | None = None
    barcode: str | None = None
    calories: float = Field(ge=0)
    protein_g: float = Field(ge=0)
    carbs_g: float = Field(ge=0)
    fat_g: float = Field(ge=0)
    fiber_g: float | None = Field(default=None, ge=0)
    sugar_g: float | None = Field(default=None, ge=0)
    salt_g: float | None = Field(default=None, ge=0)
    sodium_g: float | None = Field(default=None, ge=0)
    saturated_fat_g: float | None = Field(default=None, ge=0)
    monounsaturated_fat_g: float | None = Field(default=None, ge=0)
    polyunsaturated_fat_g: float | None = Field(default=None, ge=0)
    alpha_linolenic_acid_g: float | None = Field(default=None, ge=0)
    serving_g: float | None = Field(default=None, gt=0)
    nutriments: dict[str, float] = Field(default_factory=dict)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("brand", "barcode", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str):
            cleaned = value.strip()
            return cleaned or None
        return value
