"""Recipe catalog repository.

Read paths serve the public recipe endpoints; :meth:`RecipeRepository.insert_many`
is the bulk path used once by the ingestion job.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final
from uuid import UUID

from pydantic import BaseModel, Field

from recipe_catalog.database.connection import get_database_pool
from recipe_catalog.observability.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Sequence

    from asyncpg import Connection, Pool, Record

logger = get_logger(__name__)


# =============================================================================
# Data Transfer Objects
# =============================================================================


class NutrientData(BaseModel):
    """One entry of a recipe's total or daily nutrient breakdown."""

    label: str
    quantity: float
    unit: str


class RecipeData(BaseModel):
    """A catalog recipe as stored in the ``recipes`` table."""

    id: UUID
    name: str
    images: dict[str, str]
    ingredient_lines: list[str]
    servings: float
    diet_labels: list[str] = Field(default_factory=list)
    health_labels: list[str] = Field(default_factory=list)
    calories: float
    nutrients: list[NutrientData] = Field(default_factory=list)
    daily_nutrients: list[NutrientData] = Field(default_factory=list)
    cautions: list[str] = Field(default_factory=list)
    link: str


class RecipeSearchFilters(BaseModel):
    """Keyword and label filters for catalog search."""

    keyword: str | None = None
    diet_label: str | None = None
    health_label: str | None = None
    max_calories: float | None = None


# =============================================================================
# Repository
# =============================================================================


_RECIPE_COLUMNS: Final[str] = """
    id, name, images, ingredient_lines, servings, diet_labels, health_labels,
    calories, nutrients, daily_nutrients, cautions, link
"""

_INSERT_RECIPE: Final[str] = """
    INSERT INTO recipes (
        id, name, images, ingredient_lines, servings, diet_labels,
        health_labels, calories, nutrients, daily_nutrients, cautions, link
    )
    VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12)
"""


def like_pattern(keyword: str) -> str:
    """Build a ``contains`` LIKE pattern with wildcards in ``keyword`` escaped."""
    escaped = keyword.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def row_to_recipe(row: Record) -> RecipeData:
    return RecipeData.model_validate(dict(row))


class RecipeRepository:
    """Data access for the ``recipes`` table."""

    def __init__(self, pool: Pool | None = None) -> None:
        """Initialize repository with optional connection pool.

        Args:
            pool: asyncpg connection pool. If None, uses global pool.
        """
        self._pool = pool

    @property
    def pool(self) -> Pool:
        if self._pool is not None:
            return self._pool
        return get_database_pool()

    async def get_by_id(self, recipe_id: UUID) -> RecipeData | None:
        query = f"SELECT {_RECIPE_COLUMNS} FROM recipes WHERE id = $1"
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, recipe_id)
        return row_to_recipe(row) if row is not None else None

    async def get_images(self, recipe_id: UUID) -> dict[str, str] | None:
        """Return the size → filename mapping, or None if the recipe is unknown."""
        async with self.pool.acquire() as conn:
            images = await conn.fetchval(
                "SELECT images FROM recipes WHERE id = $1", recipe_id
            )
        return dict(images) if images is not None else None

    async def count(self) -> int:
        async with self.pool.acquire() as conn:
            return int(await conn.fetchval("SELECT count(*) FROM recipes"))

    async def get_at_offset(self, offset: int) -> RecipeData | None:
        """Return the recipe at ``offset`` in id order (used for random picks)."""
        query = f"SELECT {_RECIPE_COLUMNS} FROM recipes ORDER BY id OFFSET $1 LIMIT 1"
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, offset)
        return row_to_recipe(row) if row is not None else None

    async def search(
        self,
        filters: RecipeSearchFilters,
        *,
        limit: int | None = 20,
        offset: int = 0,
    ) -> list[RecipeData]:
        """Search by case-insensitive name keyword and optional label filters.

        Args:
            filters: Keyword, diet label, health label and calorie ceiling.
            limit: Page size; ``None`` returns every match.
            offset: Number of matches to skip.

        Returns:
            Matching recipes ordered by name.
        """
        conditions: list[str] = []
        params: list[object] = []

        if filters.keyword:
            params.append(like_pattern(filters.keyword))
            conditions.append(f"name ILIKE ${len(params)}")
        if filters.diet_label:
            params.append(filters.diet_label)
            conditions.append(
                f"EXISTS (SELECT 1 FROM unnest(diet_labels) AS d "
                f"WHERE lower(d) = lower(${len(params)}))"
            )
        if filters.health_label:
            params.append(filters.health_label)
            conditions.append(
                f"EXISTS (SELECT 1 FROM unnest(health_labels) AS h "
                f"WHERE lower(h) = lower(${len(params)}))"
            )
        if filters.max_calories is not None:
            params.append(filters.max_calories)
            conditions.append(f"calories <= ${len(params)}")

        query = f"SELECT {_RECIPE_COLUMNS} FROM recipes"
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY name, id"
        if limit is not None:
            params.append(limit)
            query += f" LIMIT ${len(params)}"
        if offset:
            params.append(offset)
            query += f" OFFSET ${len(params)}"

        async with self.pool.acquire() as conn:
            rows = await conn.fetch(query, *params)

        logger.debug("Recipe search", filters=filters.model_dump(), results=len(rows))
        return [row_to_recipe(row) for row in rows]

    async def insert_many(
        self,
        recipes: Sequence[RecipeData],
        *,
        conn: Connection | None = None,
    ) -> int:
        """Insert all recipes in one ``executemany`` batch.

        Args:
            recipes: Recipes to insert.
            conn: Connection to use; a pooled one is acquired when omitted.

        Returns:
            Number of rows submitted.
        """
        if not recipes:
            return 0
        args = [self._recipe_to_args(recipe) for recipe in recipes]
        if conn is not None:
            await conn.executemany(_INSERT_RECIPE, args)
        else:
            async with self.pool.acquire() as acquired, acquired.transaction():
                await acquired.executemany(_INSERT_RECIPE, args)
        return len(args)

    @staticmethod
    def _recipe_to_args(recipe: RecipeData) -> tuple[object, ...]:
        return (
            recipe.id,
            recipe.name,
            recipe.images,
            recipe.ingredient_lines,
            recipe.servings,
            recipe.diet_labels,
            recipe.health_labels,
            recipe.calories,
            [n.model_dump() for n in recipe.nutrients],
            [n.model_dump() for n in recipe.daily_nutrients],
            recipe.cautions,
            recipe.link,
        )
