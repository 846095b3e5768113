"""Unit tests for the run state machine and report."""

from __future__ import annotations

import pytest

from recipe_catalog.ingestion.exceptions import IngestionError, PageFetchError
from recipe_catalog.ingestion.models import IngestionReport, IngestionRun, RunState


pytestmark = pytest.mark.unit


class TestTransitions:
    """Tests for IngestionRun.transition."""

    def test_happy_path(self) -> None:
        run = IngestionRun(query="smoothie")

        for state in (
            RunState.FETCHING,
            RunState.VALIDATING,
            RunState.SKIPPING,
            RunState.VALIDATING,
            RunState.DOWNLOADING,
            RunState.ACCUMULATING,
            RunState.FETCHING,
            RunState.LOADING,
            RunState.DONE,
        ):
            run.transition(state)

        assert run.state is RunState.DONE
        assert run.history[0] is RunState.IDLE
        assert run.history[-1] is RunState.DONE

    def test_same_state_is_noop(self) -> None:
        run = IngestionRun(query="smoothie")
        run.transition(RunState.FETCHING)

        run.transition(RunState.FETCHING)

        assert run.history == [RunState.IDLE, RunState.FETCHING]

    @pytest.mark.parametrize(
        ("path", "target"),
        [
            ((), RunState.LOADING),
            ((RunState.FETCHING,), RunState.DONE),
            ((RunState.FETCHING, RunState.VALIDATING), RunState.ACCUMULATING),
            ((RunState.FETCHING, RunState.LOADING, RunState.DONE), RunState.FETCHING),
        ],
    )
    def test_illegal_transition(self, path: tuple[RunState, ...], target: RunState) -> None:
        run = IngestionRun(query="smoothie")
        for state in path:
            run.transition(state)

        with pytest.raises(IngestionError, match="Illegal run state transition"):
            run.transition(target)

    @pytest.mark.parametrize(
        "state",
        [RunState.FETCHING, RunState.VALIDATING, RunState.DOWNLOADING],
    )
    def test_fail_from_any_active_state(self, state: RunState) -> None:
        run = IngestionRun(query="smoothie")
        run.transition(RunState.FETCHING)
        run.transition(RunState.VALIDATING)
        if state is RunState.DOWNLOADING:
            run.transition(RunState.DOWNLOADING)
        elif state is RunState.FETCHING:
            run.transition(RunState.FETCHING)

        run.fail(PageFetchError("HTTP 500"))

        assert run.state is RunState.FAILED
        assert run.error == "HTTP 500"

    def test_no_way_out_of_failed(self) -> None:
        run = IngestionRun(query="smoothie")
        run.fail(RuntimeError())

        assert run.error == "RuntimeError"
        with pytest.raises(IngestionError):
            run.transition(RunState.FETCHING)


class TestReport:
    """Tests for IngestionReport."""

    def test_from_run(self) -> None:
        run = IngestionRun(query="smoothie")
        run.stats.pages_fetched = 2
        run.stats.records_rejected = 3
        for state in (RunState.FETCHING, RunState.LOADING, RunState.DONE):
            run.transition(state)

        report = IngestionReport.from_run(run, recipes_loaded=37)

        assert report.succeeded
        assert report.pages_fetched == 2
        assert report.records_rejected == 3
        assert report.recipes_loaded == 37
        assert report.error is None

    def test_failed_report(self) -> None:
        run = IngestionRun(query="smoothie")
        run.fail(PageFetchError("boom"))

        report = IngestionReport.from_run(run)

        assert not report.succeeded
        assert report.state is RunState.FAILED
        assert report.error == "boom"
