"""Ingestion unit test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from aiolimiter import AsyncLimiter

from tests.factories.catalog import FIRST_PAGE_URL


@pytest.fixture
def fast_limiter() -> AsyncLimiter:
    """Limiter that never makes a test wait."""
    return AsyncLimiter(1000, 1)


@pytest.fixture
def edamam_client() -> MagicMock:
    """Create a mock EdamamClient serving pages and image bytes."""
    client = MagicMock()
    client.search_url = MagicMock(return_value=FIRST_PAGE_URL)
    client.fetch_page = AsyncMock()
    client.fetch_image = AsyncMock(return_value=b"\xff\xd8jpeg")
    return client
