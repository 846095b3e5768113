"""Repository classes for data access."""

from recipe_catalog.database.repositories.ingredients import (
    IngredientData,
    IngredientRepository,
    RecipeIngredientData,
    RecipeIngredientView,
)
from recipe_catalog.database.repositories.recipes import (
    NutrientData,
    RecipeData,
    RecipeRepository,
    RecipeSearchFilters,
)
from recipe_catalog.database.repositories.users import (
    UserData,
    UsernameTakenError,
    UserRepository,
)


__all__ = [
    "IngredientData",
    "IngredientRepository",
    "NutrientData",
    "RecipeData",
    "RecipeIngredientData",
    "RecipeIngredientView",
    "RecipeRepository",
    "RecipeSearchFilters",
    "UserData",
    "UserRepository",
    "UsernameTakenError",
]
