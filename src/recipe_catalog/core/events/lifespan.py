"""Application lifespan event handlers.

Startup configures logging and opens the database pool; shutdown closes it.
The service keeps running without a database so that the liveness probe and
landing page stay up; repository-backed routes answer 503 until it returns.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import asyncpg

from recipe_catalog.core.config import Settings, get_settings
from recipe_catalog.database.connection import close_database_pool, init_database_pool
from recipe_catalog.observability.logging import get_logger, setup_logging


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI

logger = get_logger(__name__)


async def _startup(settings: Settings) -> None:
    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        is_development=settings.is_development,
        log_file=settings.logging.file,
    )
    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.APP_ENV,
        debug=settings.app.debug,
    )

    if not settings.JWT_SECRET_KEY:
        if settings.is_production:
            msg = "JWT_SECRET_KEY must be set in production"
            raise RuntimeError(msg)
        logger.warning("JWT_SECRET_KEY is empty - tokens are not secure")

    try:
        await init_database_pool(settings)
    except (asyncpg.PostgresError, OSError):
        logger.exception(
            "Failed to initialize database - data endpoints unavailable",
            dsn=settings.database_dsn,
        )

    logger.info("Application startup complete")


async def _shutdown() -> None:
    logger.info("Shutting down application")
    await close_database_pool()
    logger.info("Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None - control returns to the application to handle requests.
    """
    settings: Settings = getattr(app.state, "settings", None) or get_settings()
    await _startup(settings)
    yield
    await _shutdown()
