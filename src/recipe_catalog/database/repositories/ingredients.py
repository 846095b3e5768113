"""Ingredient and recipe-ingredient repository."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final
from uuid import UUID

from pydantic import BaseModel

from recipe_catalog.database.connection import get_database_pool


if TYPE_CHECKING:
    from collections.abc import Sequence

    from asyncpg import Connection, Pool


class IngredientData(BaseModel):
    """A distinct ingredient; ``name`` is unique across the catalog."""

    id: UUID
    name: str
    category: str


class RecipeIngredientData(BaseModel):
    """Join row: one ingredient line of one recipe."""

    id: UUID
    recipe_id: UUID
    ingredient_id: UUID
    text: str
    quantity: float
    measure: str


class RecipeIngredientView(BaseModel):
    """An ingredient line joined with its ingredient's name and category."""

    ingredient_id: UUID
    name: str
    category: str
    text: str
    quantity: float
    measure: str


_INSERT_INGREDIENT: Final[str] = """
    INSERT INTO ingredients (id, name, category) VALUES ($1, $2, $3)
"""

_INSERT_RECIPE_INGREDIENT: Final[str] = """
    INSERT INTO recipe_ingredients (id, recipe_id, ingredient_id, text, quantity, measure)
    VALUES ($1, $2, $3, $4, $5, $6)
"""

_RECIPE_INGREDIENTS_QUERY: Final[str] = """
    SELECT ri.ingredient_id, i.name, i.category, ri.text, ri.quantity, ri.measure
    FROM recipe_ingredients ri
    JOIN ingredients i ON i.id = ri.ingredient_id
    WHERE ri.recipe_id = $1
    ORDER BY ri.text
"""


class IngredientRepository:
    """Data access for ``ingredients`` and ``recipe_ingredients``."""

    def __init__(self, pool: Pool | None = None) -> None:
        self._pool = pool

    @property
    def pool(self) -> Pool:
        if self._pool is not None:
            return self._pool
        return get_database_pool()

    async def name_index(self) -> dict[str, UUID]:
        """Map every stored ingredient name to its id."""
        async with self.pool.acquire() as conn:
            rows = await conn.fetch("SELECT name, id FROM ingredients")
        return {row["name"]: row["id"] for row in rows}

    async def list_for_recipe(self, recipe_id: UUID) -> list[RecipeIngredientView]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(_RECIPE_INGREDIENTS_QUERY, recipe_id)
        return [RecipeIngredientView.model_validate(dict(row)) for row in rows]

    async def insert_many(
        self,
        ingredients: Sequence[IngredientData],
        *,
        conn: Connection | None = None,
    ) -> int:
        args = [(i.id, i.name, i.category) for i in ingredients]
        return await self._executemany(_INSERT_INGREDIENT, args, conn)

    async def insert_links(
        self,
        links: Sequence[RecipeIngredientData],
        *,
        conn: Connection | None = None,
    ) -> int:
        args = [
            (link.id, link.recipe_id, link.ingredient_id, link.text, link.quantity, link.measure)
            for link in links
        ]
        return await self._executemany(_INSERT_RECIPE_INGREDIENT, args, conn)

    async def _executemany(
        self,
        query: str,
        args: list[tuple[object, ...]],
        conn: Connection | None,
    ) -> int:
        if not args:
            return 0
        if conn is not None:
            await conn.executemany(query, args)
        else:
            async with self.pool.acquire() as acquired, acquired.transaction():
                await acquired.executemany(query, args)
        return len(args)
