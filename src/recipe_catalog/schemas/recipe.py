"""Recipe catalog response schemas."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import Field

from recipe_catalog.schemas.base import APIResponse


if TYPE_CHECKING:
    from recipe_catalog.database.repositories import RecipeData, RecipeIngredientView


class Nutrient(APIResponse):
    label: str
    quantity: float
    unit: str


class RecipeIngredient(APIResponse):
    """One ingredient line of a recipe with its catalog ingredient."""

    ingredient_id: UUID
    name: str
    category: str
    text: str
    quantity: float
    measure: str


class RecipeSummary(APIResponse):
    """Recipe as returned by list and search endpoints."""

    id: UUID
    name: str
    images: dict[str, str] = Field(
        ...,
        description="Image size label to stored filename",
        examples=[{"THUMBNAIL": "3f2a9c.jpg", "SMALL": "8b1d04.jpg"}],
    )
    ingredient_lines: list[str]
    servings: float
    diet_labels: list[str]
    health_labels: list[str]
    calories: float
    nutrients: list[Nutrient]
    daily_nutrients: list[Nutrient]
    cautions: list[str]
    link: str

    @classmethod
    def from_data(cls, recipe: RecipeData) -> RecipeSummary:
        return cls.model_validate(recipe.model_dump())


class RecipeDetail(RecipeSummary):
    """Single recipe including its ingredient rows."""

    ingredients: list[RecipeIngredient] = Field(default_factory=list)

    @classmethod
    def from_records(
        cls,
        recipe: RecipeData,
        ingredients: list[RecipeIngredientView],
    ) -> RecipeDetail:
        return cls.model_validate(
            {
                **recipe.model_dump(),
                "ingredients": [i.model_dump() for i in ingredients],
            }
        )


class RecipeSearchResponse(APIResponse):
    """Paginated search results."""

    results: list[RecipeSummary]
    limit: int
    offset: int


class ImageResponse(APIResponse):
    """Public location of one stored image variant."""

    recipe_id: UUID
    size: str
    filename: str
    url: str
