"""Custom food store contract."""

from typing import Protocol

from food_catalog.domain.foods import CreateFoodRequest, FoodRecord


class CustomFoodStore(Protocol):
    """Persistence interface for user-authored foods."""

    def create(self, actor_id: str, request: CreateFoodRequest) -> FoodRecord:
        """Create a custom food and return it."""

    def by_barcode(self, code: str) -> FoodRecord | None:
        """Return the custom food registered for a barcode, if present."""

    def search(self, query: str, limit: int) -> list[FoodRecord]:
        """Search custom foods by name or brand."""

    def by_id(self, food_id: str) -> FoodRecord | None:
        """Return a custom food by id, if present."""
