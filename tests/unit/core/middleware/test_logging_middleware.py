"""Unit tests for request logging middleware."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from recipe_catalog.core.middleware.logging import (
    LoggingMiddleware,
    client_ip,
    completion_level,
)


pytestmark = pytest.mark.unit


def _request(path: str = "/api/v1/recipes/random", headers: dict | None = None) -> MagicMock:
    request = MagicMock()
    request.url.path = path
    request.method = "GET"
    request.headers = headers or {}
    request.query_params = {}
    request.client.host = "10.0.0.1"
    return request


class TestClientIp:
    """Tests for client IP extraction."""

    @pytest.mark.parametrize(
        ("headers", "expected"),
        [
            ({"x-forwarded-for": "203.0.113.7, 10.0.0.2"}, "203.0.113.7"),
            ({"x-real-ip": "198.51.100.4"}, "198.51.100.4"),
            ({}, "10.0.0.1"),
        ],
    )
    def test_client_ip(self, headers: dict, expected: str) -> None:
        assert client_ip(_request(headers=headers)) == expected

    def test_unknown_without_client(self) -> None:
        request = _request()
        request.client = None

        assert client_ip(request) == "unknown"


@pytest.mark.parametrize(
    ("status_code", "level"),
    [(200, "INFO"), (204, "INFO"), (404, "WARNING"), (503, "ERROR")],
)
def test_completion_level(status_code: int, level: str) -> None:
    assert completion_level(status_code) == level


class TestDispatch:
    """Tests for request logging."""

    async def test_logs_start_and_completion(self) -> None:
        middleware = LoggingMiddleware(MagicMock())
        response = MagicMock(status_code=200)
        call_next = AsyncMock(return_value=response)

        with (
            patch("recipe_catalog.core.middleware.logging.logger") as logger,
            patch("recipe_catalog.core.middleware.logging.bind_context") as bind,
        ):
            result = await middleware.dispatch(_request(), call_next)

        assert result is response
        logger.info.assert_called_once()
        assert logger.info.call_args.args[0] == "Request started"
        level, message = logger.log.call_args.args
        assert (level, message) == ("INFO", "Request completed")
        assert logger.log.call_args.kwargs["status_code"] == 200
        bind.assert_called_once_with(
            method="GET", path="/api/v1/recipes/random", client_ip="10.0.0.1"
        )

    async def test_server_error_logged_as_error(self) -> None:
        middleware = LoggingMiddleware(MagicMock())
        call_next = AsyncMock(return_value=MagicMock(status_code=503))

        with patch("recipe_catalog.core.middleware.logging.logger") as logger:
            await middleware.dispatch(_request(), call_next)

        assert logger.log.call_args.args[0] == "ERROR"

    @pytest.mark.parametrize("path", ["/api/v1/health", "/images/abc.jpg"])
    async def test_quiet_prefix_is_silent(self, path: str) -> None:
        middleware = LoggingMiddleware(
            MagicMock(), quiet_prefixes=("/api/v1/health", "/images/")
        )
        call_next = AsyncMock(return_value=MagicMock(status_code=200))

        with patch("recipe_catalog.core.middleware.logging.logger") as logger:
            await middleware.dispatch(_request(path), call_next)

        logger.info.assert_not_called()
        logger.log.assert_not_called()
        call_next.assert_called_once()

    def test_no_prefixes_means_nothing_is_quiet(self) -> None:
        assert LoggingMiddleware(MagicMock()).is_quiet("/anything") is False
