"""Shared test configuration for the recipe catalog tests.

``APP_ENV`` is pinned to ``test`` before any application module builds its
settings, so the ``config/environments/test`` overlay applies everywhere.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest


os.environ["APP_ENV"] = "test"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-minimum-32-characters-long")

from recipe_catalog.core.config import Settings, get_settings  # noqa: E402


if TYPE_CHECKING:
    from collections.abc import Generator


TEST_JWT_SECRET = "test-secret-key-minimum-32-characters-long"


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None]:
    """Drop cached settings so per-test environment changes take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings() -> Settings:
    """Settings with known secrets for tests."""
    return Settings(
        APP_ENV="test",
        JWT_SECRET_KEY=TEST_JWT_SECRET,
        DATABASE_PASSWORD="",
        EDAMAM_APP_KEY="test-app-key",
    )
