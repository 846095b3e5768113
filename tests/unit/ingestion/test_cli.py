"""Unit tests for the ingestion console entry points."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from recipe_catalog.ingestion.cli import (
    EXIT_CONFIG_ERROR,
    EXIT_FAILED,
    EXIT_OK,
    build_parser,
    init_db,
    main,
)
from recipe_catalog.ingestion.models import IngestionReport, RunState


pytestmark = pytest.mark.unit


def _report(state: RunState, error: str | None = None) -> IngestionReport:
    return IngestionReport(
        state=state,
        pages_fetched=2,
        records_seen=40,
        records_accepted=37,
        records_rejected=3,
        images_downloaded=111,
        images_failed=0,
        recipes_loaded=37 if state is RunState.DONE else 0,
        ingredients_loaded=52 if state is RunState.DONE else 0,
        links_loaded=160 if state is RunState.DONE else 0,
        error=error,
    )


class TestArguments:
    """Tests for argument parsing."""

    def test_defaults_are_unset(self) -> None:
        args = build_parser().parse_args([])

        assert args.query is None
        assert args.threshold is None
        assert args.page_delay is None
        assert args.image_dir is None

    @pytest.mark.parametrize(
        "argv",
        [["--page-delay", "0"], ["--page-delay", "fast"], ["--threshold", "-1"]],
    )
    def test_rejects_bad_values(self, argv: list[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(argv)

        assert exc_info.value.code == 2


class TestMain:
    """Tests for the ingest command."""

    def test_missing_app_key_exits_before_running(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("EDAMAM_APP_KEY", "")

        with patch("recipe_catalog.ingestion.pipeline.init_database_pool") as init_pool:
            assert main([]) == EXIT_CONFIG_ERROR

        init_pool.assert_not_called()

    def test_success(self) -> None:
        run = AsyncMock(return_value=_report(RunState.DONE))

        with patch("recipe_catalog.ingestion.cli.run_ingestion", new=run):
            code = main(
                [
                    "--query", "mango",
                    "--threshold", "100",
                    "--page-delay", "2.5",
                    "--image-dir", "build/img",
                ]
            )

        assert code == EXIT_OK
        kwargs = run.call_args.kwargs
        assert kwargs == {
            "query": "mango",
            "budget_threshold": 100,
            "page_delay": 2.5,
            "image_dir": "build/img",
        }

    def test_failed_run(self) -> None:
        run = AsyncMock(return_value=_report(RunState.FAILED, "Edamam returned HTTP 500"))

        with patch("recipe_catalog.ingestion.cli.run_ingestion", new=run):
            assert main([]) == EXIT_FAILED


class TestInitDb:
    """Tests for the schema setup command."""

    def test_creates_schema(self) -> None:
        pool = MagicMock()

        with (
            patch(
                "recipe_catalog.ingestion.cli.init_database_pool",
                new=AsyncMock(return_value=pool),
            ),
            patch("recipe_catalog.ingestion.cli.create_schema", new=AsyncMock()) as create,
            patch("recipe_catalog.ingestion.cli.close_database_pool", new=AsyncMock()) as close,
        ):
            assert init_db([]) == EXIT_OK

        create.assert_awaited_once_with(pool)
        close.assert_awaited_once()

    def test_database_unreachable(self) -> None:
        with patch(
            "recipe_catalog.ingestion.cli.init_database_pool",
            new=AsyncMock(side_effect=OSError("connection refused")),
        ):
            assert init_db([]) == EXIT_FAILED
