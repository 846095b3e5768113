"""API unit test fixtures.

The app is built from test settings with every repository dependency
replaced by a mock. ``ASGITransport`` does not run the lifespan, so no
database pool is opened.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from recipe_catalog.api.dependencies import (
    get_ingredient_repository,
    get_recipe_repository,
    get_user_repository,
)
from recipe_catalog.auth import get_current_user
from recipe_catalog.core.config import Settings, get_settings
from recipe_catalog.database.repositories import UserData
from recipe_catalog.factory import create_app
from tests.factories.catalog import UserDataFactory


@pytest.fixture
def recipe_repository() -> MagicMock:
    repository = MagicMock()
    repository.get_by_id = AsyncMock(return_value=None)
    repository.get_images = AsyncMock(return_value=None)
    repository.count = AsyncMock(return_value=0)
    repository.get_at_offset = AsyncMock(return_value=None)
    repository.search = AsyncMock(return_value=[])
    return repository


@pytest.fixture
def ingredient_repository() -> MagicMock:
    repository = MagicMock()
    repository.list_for_recipe = AsyncMock(return_value=[])
    return repository


@pytest.fixture
def user_repository() -> MagicMock:
    repository = MagicMock()
    repository.create = AsyncMock()
    repository.get_by_id = AsyncMock(return_value=None)
    repository.get_by_username = AsyncMock(return_value=None)
    repository.update = AsyncMock(return_value=None)
    repository.delete = AsyncMock(return_value=None)
    repository.list_saved_recipes = AsyncMock(return_value=[])
    repository.save_recipe = AsyncMock(return_value=True)
    repository.unsave_recipe = AsyncMock(return_value=True)
    return repository


@pytest.fixture
def current_user() -> UserData:
    return UserDataFactory.build(username="alice")


@pytest.fixture
def app(
    test_settings: Settings,
    recipe_repository: MagicMock,
    ingredient_repository: MagicMock,
    user_repository: MagicMock,
) -> FastAPI:
    app = create_app(test_settings)
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_recipe_repository] = lambda: recipe_repository
    app.dependency_overrides[get_ingredient_repository] = lambda: ingredient_repository
    app.dependency_overrides[get_user_repository] = lambda: user_repository
    return app


@pytest.fixture
def authenticated_app(app: FastAPI, current_user: UserData) -> FastAPI:
    app.dependency_overrides[get_current_user] = lambda: current_user
    return app


@pytest.fixture
async def client(app: FastAPI):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def auth_client(authenticated_app: FastAPI):
    async with AsyncClient(
        transport=ASGITransport(app=authenticated_app), base_url="http://test"
    ) as ac:
        yield ac
