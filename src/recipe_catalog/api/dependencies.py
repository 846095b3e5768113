"""FastAPI dependencies for repository access.

Repositories are cheap wrappers around the process-wide asyncpg pool; tests
replace these dependencies with mocks through ``app.dependency_overrides``.
"""

from __future__ import annotations

from recipe_catalog.core.exceptions import ServiceUnavailableException
from recipe_catalog.database.connection import get_database_pool
from recipe_catalog.database.repositories import (
    IngredientRepository,
    RecipeRepository,
    UserRepository,
)


def _require_pool() -> None:
    try:
        get_database_pool()
    except RuntimeError:
        raise ServiceUnavailableException("Database not available") from None


async def get_recipe_repository() -> RecipeRepository:
    """Get the recipe repository.

    Raises:
        ServiceUnavailableException: 503 if the database pool is not initialized.
    """
    _require_pool()
    return RecipeRepository()


async def get_ingredient_repository() -> IngredientRepository:
    _require_pool()
    return IngredientRepository()


async def get_user_repository() -> UserRepository:
    _require_pool()
    return UserRepository()
