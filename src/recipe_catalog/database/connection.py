"""PostgreSQL connection pool management.

One asyncpg pool per process, opened by the web lifespan or by the ingestion
CLI and closed on the way out. JSONB columns are transparently encoded and
decoded with orjson on every pooled connection.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import asyncpg
import orjson

from recipe_catalog.core.config import get_settings
from recipe_catalog.observability.logging import get_logger


if TYPE_CHECKING:
    from asyncpg import Connection, Pool

    from recipe_catalog.core.config import Settings

logger = get_logger(__name__)

_pool: Pool | None = None


def _encode_json(value: object) -> str:
    return orjson.dumps(value).decode()


async def _init_connection(conn: Connection) -> None:
    for type_name in ("json", "jsonb"):
        await conn.set_type_codec(
            type_name,
            encoder=_encode_json,
            decoder=orjson.loads,
            schema="pg_catalog",
        )


async def init_database_pool(settings: Settings | None = None) -> Pool:
    """Open the global connection pool and verify it with ``SELECT 1``."""
    global _pool  # noqa: PLW0603

    if settings is None:
        settings = get_settings()
    db = settings.database

    logger.info(
        "Initializing database connection pool",
        host=db.host,
        port=db.port,
        database=db.name,
    )

    _pool = await asyncpg.create_pool(
        host=db.host,
        port=db.port,
        database=db.name,
        user=db.user,
        password=settings.DATABASE_PASSWORD or None,
        min_size=db.min_pool_size,
        max_size=db.max_pool_size,
        command_timeout=db.command_timeout,
        ssl=db.ssl if db.ssl else None,
        init=_init_connection,
    )

    try:
        async with _pool.acquire() as conn:
            await conn.fetchval("SELECT 1")
    except asyncpg.PostgresError:
        logger.exception("Failed to connect to database")
        raise

    logger.info("Database connection established")
    return _pool


async def close_database_pool() -> None:
    global _pool  # noqa: PLW0603

    if _pool is not None:
        await _pool.close()
        _pool = None
        logger.info("Database connection pool closed")


def get_database_pool() -> Pool:
    """Return the global pool.

    Raises:
        RuntimeError: If :func:`init_database_pool` has not been awaited.
    """
    if _pool is None:
        msg = "Database pool not initialized. Call init_database_pool() first."
        raise RuntimeError(msg)
    return _pool


async def check_database_health() -> dict[str, str]:
    """Report ``healthy``, ``unhealthy`` or ``not_initialized``."""
    if _pool is None:
        return {"database": "not_initialized"}

    try:
        async with _pool.acquire() as conn:
            await conn.fetchval("SELECT 1")
    except (asyncpg.PostgresError, OSError):
        logger.warning("Database health check failed")
        return {"database": "unhealthy"}
    return {"database": "healthy"}
