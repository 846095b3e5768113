"""User account and saved-recipe repository."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Final
from uuid import UUID, uuid4

import asyncpg
from pydantic import BaseModel

from recipe_catalog.database.connection import get_database_pool
from recipe_catalog.database.repositories.recipes import RecipeData, row_to_recipe
from recipe_catalog.observability.logging import get_logger


if TYPE_CHECKING:
    from asyncpg import Pool

logger = get_logger(__name__)


class UsernameTakenError(Exception):
    """Raised when a username collides with an existing account."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"Username '{username}' is already taken")


class UserData(BaseModel):
    """A user row. ``password_hash`` never leaves the service layer."""

    id: UUID
    username: str
    password_hash: str
    created_at: datetime


_USER_COLUMNS: Final[str] = "id, username, password_hash, created_at"


class UserRepository:
    """Data access for ``users`` and ``user_saved_recipes``."""

    def __init__(self, pool: Pool | None = None) -> None:
        self._pool = pool

    @property
    def pool(self) -> Pool:
        if self._pool is not None:
            return self._pool
        return get_database_pool()

    async def create(self, username: str, password_hash: str) -> UserData:
        """Insert a new user.

        Raises:
            UsernameTakenError: If ``username`` already exists.
        """
        query = f"""
            INSERT INTO users (id, username, password_hash)
            VALUES ($1, $2, $3)
            RETURNING {_USER_COLUMNS}
        """
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(query, uuid4(), username, password_hash)
        except asyncpg.UniqueViolationError:
            raise UsernameTakenError(username) from None

        logger.info("User created", user_id=str(row["id"]))
        return UserData.model_validate(dict(row))

    async def get_by_id(self, user_id: UUID) -> UserData | None:
        query = f"SELECT {_USER_COLUMNS} FROM users WHERE id = $1"
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, user_id)
        return UserData.model_validate(dict(row)) if row is not None else None

    async def get_by_username(self, username: str) -> UserData | None:
        query = f"SELECT {_USER_COLUMNS} FROM users WHERE username = $1"
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, username)
        return UserData.model_validate(dict(row)) if row is not None else None

    async def update(
        self,
        user_id: UUID,
        *,
        username: str | None = None,
        password_hash: str | None = None,
    ) -> UserData | None:
        """Update the given fields; unspecified fields keep their value.

        Raises:
            UsernameTakenError: If the new username belongs to someone else.
        """
        query = f"""
            UPDATE users
            SET username = COALESCE($2, username),
                password_hash = COALESCE($3, password_hash)
            WHERE id = $1
            RETURNING {_USER_COLUMNS}
        """
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(query, user_id, username, password_hash)
        except asyncpg.UniqueViolationError:
            raise UsernameTakenError(username or "") from None
        return UserData.model_validate(dict(row)) if row is not None else None

    async def delete(self, user_id: UUID) -> UserData | None:
        """Delete a user (saved-recipe links cascade) and return the removed row."""
        query = f"DELETE FROM users WHERE id = $1 RETURNING {_USER_COLUMNS}"
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, user_id)
        if row is None:
            return None
        logger.info("User deleted", user_id=str(user_id))
        return UserData.model_validate(dict(row))

    async def list_saved_recipes(self, user_id: UUID) -> list[RecipeData]:
        query = """
            SELECT r.id, r.name, r.images, r.ingredient_lines, r.servings,
                   r.diet_labels, r.health_labels, r.calories, r.nutrients,
                   r.daily_nutrients, r.cautions, r.link
            FROM user_saved_recipes s
            JOIN recipes r ON r.id = s.recipe_id
            WHERE s.user_id = $1
            ORDER BY s.saved_at DESC
        """
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(query, user_id)
        return [row_to_recipe(row) for row in rows]

    async def save_recipe(self, user_id: UUID, recipe_id: UUID) -> bool:
        """Link a recipe to the user. Returns False if it was already saved."""
        query = """
            INSERT INTO user_saved_recipes (user_id, recipe_id)
            VALUES ($1, $2)
            ON CONFLICT DO NOTHING
        """
        async with self.pool.acquire() as conn:
            status = await conn.execute(query, user_id, recipe_id)
        return status.endswith(" 1")

    async def unsave_recipe(self, user_id: UUID, recipe_id: UUID) -> bool:
        """Remove the link. Returns False if it did not exist."""
        query = "DELETE FROM user_saved_recipes WHERE user_id = $1 AND recipe_id = $2"
        async with self.pool.acquire() as conn:
            status = await conn.execute(query, user_id, recipe_id)
        return status.endswith(" 1")
