"""Edamam recipe search API client."""

from recipe_catalog.clients.edamam.client import EdamamClient, EdamamClientError
from recipe_catalog.clients.edamam.models import (
    EdamamHit,
    EdamamImage,
    EdamamIngredient,
    EdamamNutrient,
    EdamamRecipe,
    RecipeSearchPage,
)


__all__ = [
    "EdamamClient",
    "EdamamClientError",
    "EdamamHit",
    "EdamamImage",
    "EdamamIngredient",
    "EdamamNutrient",
    "EdamamRecipe",
    "RecipeSearchPage",
]
