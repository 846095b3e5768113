"""Bulk insert of the records accumulated by a run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import asyncpg

from recipe_catalog.database.repositories import IngredientRepository, RecipeRepository
from recipe_catalog.ingestion.exceptions import BulkLoadError
from recipe_catalog.observability.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from uuid import UUID

    from asyncpg import Pool

    from recipe_catalog.ingestion.models import IngestionRun

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class LoadCounts:
    recipes: int
    ingredients: int
    links: int


class BulkLoader:
    """Inserts recipes, then ingredients, then join rows.

    Each table is one ``executemany`` batch in its own transaction, so a
    failure in a later table leaves the earlier tables populated.
    """

    def __init__(
        self,
        pool: Pool | None = None,
        *,
        recipes: RecipeRepository | None = None,
        ingredients: IngredientRepository | None = None,
    ) -> None:
        self._recipes = recipes or RecipeRepository(pool)
        self._ingredients = ingredients or IngredientRepository(pool)

    async def known_ingredients(self) -> dict[str, UUID]:
        """Ingredient ids already in the catalog, keyed by name.

        Raises:
            BulkLoadError: If the ``ingredients`` table cannot be read.
        """
        try:
            known = await self._ingredients.name_index()
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.error("Reading existing ingredients failed", error=str(e))
            raise BulkLoadError("ingredients", str(e)) from e
        logger.info("Existing ingredients loaded", count=len(known))
        return known

    async def load(self, run: IngestionRun) -> LoadCounts:
        """Insert everything ``run`` accumulated.

        Raises:
            BulkLoadError: Naming the table whose batch failed.
        """
        recipes = await self._batch(
            "recipes", lambda: self._recipes.insert_many(run.recipes)
        )
        ingredients = await self._batch(
            "ingredients", lambda: self._ingredients.insert_many(run.ingredients)
        )
        links = await self._batch(
            "recipe_ingredients", lambda: self._ingredients.insert_links(run.links)
        )
        return LoadCounts(recipes=recipes, ingredients=ingredients, links=links)

    async def _batch(self, table: str, insert: Callable[[], Awaitable[int]]) -> int:
        try:
            count = await insert()
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.error("Bulk insert failed", table=table, error=str(e))
            raise BulkLoadError(table, str(e)) from e
        logger.info("Bulk insert complete", table=table, rows=count)
        return count
