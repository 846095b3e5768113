"""Pydantic models for Edamam recipe search payloads.

Every field is optional: the upstream API omits or nulls fields freely, and
completeness is decided later by the ingestion validator.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from recipe_catalog.schemas.base import DownstreamResponse


class EdamamImage(DownstreamResponse):
    url: str | None = None
    width: int | None = None
    height: int | None = None


class EdamamNutrient(DownstreamResponse):
    label: str | None = None
    quantity: float | None = None
    unit: str | None = None


class EdamamIngredient(DownstreamResponse):
    """One ingredient line as reported by Edamam."""

    text: str | None = None
    quantity: float | None = None
    measure: str | None = None
    food: str | None = None
    weight: float | None = None
    food_category: str | None = Field(default=None, alias="foodCategory")
    food_id: str | None = Field(default=None, alias="foodId")
    image: str | None = None


class EdamamRecipe(DownstreamResponse):
    """The ``recipe`` object of one search hit."""

    uri: str | None = None
    label: str | None = None
    image: str | None = None
    images: dict[str, EdamamImage | None] | None = None
    source: str | None = None
    url: str | None = None
    yield_: float | None = Field(default=None, alias="yield")
    diet_labels: list[str] | None = Field(default=None, alias="dietLabels")
    health_labels: list[str] | None = Field(default=None, alias="healthLabels")
    cautions: list[str] | None = None
    ingredient_lines: list[str] | None = Field(default=None, alias="ingredientLines")
    ingredients: list[EdamamIngredient] | None = None
    calories: float | None = None
    total_nutrients: dict[str, EdamamNutrient] | None = Field(
        default=None, alias="totalNutrients"
    )
    total_daily: dict[str, EdamamNutrient] | None = Field(
        default=None, alias="totalDaily"
    )


class EdamamHit(DownstreamResponse):
    # Kept raw so the validator can tell a missing key from a null one.
    recipe: dict[str, Any] | None = Field(default_factory=dict)


class EdamamLink(BaseModel):
    href: str
    title: str | None = None


class EdamamLinks(DownstreamResponse):
    next: EdamamLink | None = None


class RecipeSearchPage(DownstreamResponse):
    """One page of search results plus the cursor to the next page."""

    count: int
    from_: int | None = Field(default=None, alias="from")
    to: int | None = None
    hits: list[EdamamHit] = Field(default_factory=list)
    links: EdamamLinks = Field(default_factory=EdamamLinks, alias="_links")

    @property
    def next_url(self) -> str | None:
        return self.links.next.href if self.links.next is not None else None

    @property
    def records(self) -> list[dict[str, Any]]:
        # A null recipe becomes an empty record, which the validator rejects.
        return [hit.recipe or {} for hit in self.hits]
