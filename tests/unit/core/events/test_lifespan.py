"""Unit tests for application lifespan handling."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from recipe_catalog.core.config import Settings
from recipe_catalog.core.events.lifespan import lifespan


pytestmark = pytest.mark.unit


def _app(settings: Settings) -> MagicMock:
    app = MagicMock()
    app.state.settings = settings
    return app


@pytest.fixture
def init_pool():
    with patch(
        "recipe_catalog.core.events.lifespan.init_database_pool", new=AsyncMock()
    ) as mock:
        yield mock


@pytest.fixture
def close_pool():
    with patch(
        "recipe_catalog.core.events.lifespan.close_database_pool", new=AsyncMock()
    ) as mock:
        yield mock


@pytest.fixture(autouse=True)
def _no_logging_setup():
    with patch("recipe_catalog.core.events.lifespan.setup_logging") as mock:
        yield mock


async def test_opens_and_closes_pool(
    test_settings: Settings, init_pool: AsyncMock, close_pool: AsyncMock
) -> None:
    async with lifespan(_app(test_settings)):
        init_pool.assert_awaited_once_with(test_settings)
        close_pool.assert_not_called()

    close_pool.assert_awaited_once()


async def test_starts_without_database(
    test_settings: Settings, init_pool: AsyncMock, close_pool: AsyncMock
) -> None:
    init_pool.side_effect = OSError("connection refused")

    async with lifespan(_app(test_settings)):
        pass

    close_pool.assert_awaited_once()


async def test_production_requires_jwt_secret(
    test_settings: Settings, init_pool: AsyncMock, close_pool: AsyncMock
) -> None:
    settings = test_settings.model_copy(update={"APP_ENV": "production", "JWT_SECRET_KEY": ""})

    with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
        async with lifespan(_app(settings)):
            pass

    init_pool.assert_not_called()


async def test_empty_secret_allowed_outside_production(
    test_settings: Settings, init_pool: AsyncMock, close_pool: AsyncMock
) -> None:
    settings = test_settings.model_copy(update={"JWT_SECRET_KEY": ""})

    async with lifespan(_app(settings)):
        pass

    init_pool.assert_awaited_once()
