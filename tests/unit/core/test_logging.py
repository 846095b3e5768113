"""Unit tests for Loguru logging setup and context helpers."""

from __future__ import annotations

import logging as pylogging
from typing import TYPE_CHECKING

import orjson
import pytest
from loguru import logger

from recipe_catalog.observability import logging as logging_mod


if TYPE_CHECKING:
    from collections.abc import Generator


pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None]:
    logging_mod.clear_context()
    yield
    logging_mod.clear_context()
    logger.remove()


class TestContext:
    """Tests for request-scoped context binding."""

    def test_bind_context_accumulates(self) -> None:
        logging_mod.bind_context(request_id="abc")
        logging_mod.bind_context(user_id="u1")

        assert logging_mod.get_context() == {"request_id": "abc", "user_id": "u1"}

    def test_clear_context(self) -> None:
        logging_mod.bind_context(request_id="abc")
        logging_mod.clear_context()

        assert logging_mod.get_context() == {}

    def test_get_context_returns_copy(self) -> None:
        logging_mod.bind_context(request_id="abc")
        logging_mod.get_context()["request_id"] = "changed"

        assert logging_mod.get_context() == {"request_id": "abc"}


class TestSetupLogging:
    """Tests for sink configuration."""

    def test_json_output_includes_extra_and_context(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        logging_mod.setup_logging("INFO", "json", is_development=False)
        logging_mod.bind_context(request_id="req-1")

        logging_mod.get_logger("tests.logging").info("Hello {who}", who="world")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        payload = orjson.loads(line)
        assert payload["message"] == "Hello world"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "tests.logging"
        assert payload["who"] == "world"
        assert payload["request_id"] == "req-1"

    def test_level_filters_lower_records(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        logging_mod.setup_logging("WARNING", "json")

        logging_mod.get_logger("tests.logging").info("hidden")

        assert capsys.readouterr().out == ""

    def test_standard_logging_is_intercepted(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        logging_mod.setup_logging("INFO", "json")

        pylogging.getLogger("third.party").warning("from stdlib")

        assert "from stdlib" in capsys.readouterr().out

    def test_text_format_escapes_braces_in_extra(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        logging_mod.setup_logging("INFO", "text", is_development=True)

        logging_mod.get_logger("tests.logging").info("payload", body="{not a field}")

        assert "body={not a field}" in capsys.readouterr().out
