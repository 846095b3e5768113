"""Relational schema for the catalog and user tables.

The DDL is idempotent (``IF NOT EXISTS``) so ``recipe-catalog-init-db`` can
be run against an existing database.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from recipe_catalog.observability.logging import get_logger


if TYPE_CHECKING:
    from asyncpg import Pool

logger = get_logger(__name__)


SCHEMA_DDL: Final[str] = """
CREATE TABLE IF NOT EXISTS users (
    id UUID PRIMARY KEY,
    username TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS recipes (
    id UUID PRIMARY KEY,
    name TEXT NOT NULL,
    images JSONB NOT NULL,
    ingredient_lines TEXT[] NOT NULL,
    servings DOUBLE PRECISION NOT NULL,
    diet_labels TEXT[] NOT NULL,
    health_labels TEXT[] NOT NULL,
    calories DOUBLE PRECISION NOT NULL,
    nutrients JSONB NOT NULL,
    daily_nutrients JSONB NOT NULL,
    cautions TEXT[] NOT NULL,
    link TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS recipes_name_lower_idx ON recipes (lower(name));

CREATE TABLE IF NOT EXISTS ingredients (
    id UUID PRIMARY KEY,
    name TEXT NOT NULL UNIQUE,
    category TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS recipe_ingredients (
    id UUID PRIMARY KEY,
    recipe_id UUID NOT NULL REFERENCES recipes (id) ON DELETE CASCADE,
    ingredient_id UUID NOT NULL REFERENCES ingredients (id) ON DELETE CASCADE,
    text TEXT NOT NULL,
    quantity DOUBLE PRECISION NOT NULL,
    measure TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS recipe_ingredients_recipe_idx
    ON recipe_ingredients (recipe_id);

CREATE TABLE IF NOT EXISTS user_saved_recipes (
    user_id UUID NOT NULL REFERENCES users (id) ON DELETE CASCADE,
    recipe_id UUID NOT NULL REFERENCES recipes (id) ON DELETE CASCADE,
    saved_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    PRIMARY KEY (user_id, recipe_id)
);
"""


async def create_schema(pool: Pool) -> None:
    """Create all tables and indexes that do not exist yet."""
    async with pool.acquire() as conn:
        await conn.execute(SCHEMA_DDL)
    logger.info("Database schema ensured")
