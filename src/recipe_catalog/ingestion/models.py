"""Run state and stage results for the ingestion job."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final

from pydantic import BaseModel

from recipe_catalog.database.repositories import (
    IngredientData,
    NutrientData,
    RecipeData,
    RecipeIngredientData,
)
from recipe_catalog.ingestion.dedup import IngredientRegistry
from recipe_catalog.ingestion.exceptions import IngestionError


class RunState(StrEnum):
    """Lifecycle of one ingestion run."""

    IDLE = "idle"
    FETCHING = "fetching"
    VALIDATING = "validating"
    DOWNLOADING = "downloading"
    ACCUMULATING = "accumulating"
    SKIPPING = "skipping"
    LOADING = "loading"
    DONE = "done"
    FAILED = "failed"


TERMINAL_STATES: Final[frozenset[RunState]] = frozenset(
    {RunState.DONE, RunState.FAILED}
)

# FAILED is reachable from every non-terminal state and is not listed here.
_TRANSITIONS: Final[dict[RunState, frozenset[RunState]]] = {
    RunState.IDLE: frozenset({RunState.FETCHING}),
    RunState.FETCHING: frozenset({RunState.VALIDATING, RunState.LOADING}),
    RunState.VALIDATING: frozenset(
        {RunState.SKIPPING, RunState.DOWNLOADING, RunState.FETCHING, RunState.LOADING}
    ),
    RunState.SKIPPING: frozenset(
        {RunState.VALIDATING, RunState.DOWNLOADING, RunState.FETCHING, RunState.LOADING}
    ),
    RunState.DOWNLOADING: frozenset({RunState.ACCUMULATING}),
    RunState.ACCUMULATING: frozenset({RunState.FETCHING, RunState.LOADING}),
    RunState.LOADING: frozenset({RunState.DONE}),
    RunState.DONE: frozenset(),
    RunState.FAILED: frozenset(),
}


class ValidatedIngredient(BaseModel):
    """An ingredient line with every required field present."""

    food: str
    category: str
    quantity: float
    text: str
    measure: str


class ValidatedRecipe(BaseModel):
    """A search hit that passed validation, with remote image URLs."""

    name: str
    image_urls: dict[str, str]
    ingredient_lines: list[str]
    ingredients: list[ValidatedIngredient]
    servings: float
    diet_labels: list[str]
    health_labels: list[str]
    calories: float
    nutrients: list[NutrientData]
    daily_nutrients: list[NutrientData]
    cautions: list[str]
    link: str


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of validating one raw record."""

    accepted: bool
    recipe: ValidatedRecipe | None = None
    reason: str | None = None

    @classmethod
    def accept(cls, recipe: ValidatedRecipe) -> ValidationResult:
        return cls(accepted=True, recipe=recipe)

    @classmethod
    def reject(cls, reason: str) -> ValidationResult:
        return cls(accepted=False, reason=reason)


@dataclass(frozen=True, slots=True)
class ImageDownloadResult:
    """Stored filenames for one recipe's images.

    ``images`` always has the same keys as the remote mapping; ``failed``
    lists the sizes whose download or write did not succeed.
    """

    images: dict[str, str]
    downloaded: int
    failed: tuple[str, ...] = ()


@dataclass(slots=True)
class IngestionStats:
    pages_fetched: int = 0
    records_seen: int = 0
    records_accepted: int = 0
    records_rejected: int = 0
    images_downloaded: int = 0
    images_failed: int = 0


@dataclass(slots=True)
class IngestionRun:
    """Accumulated state of one run, passed explicitly through the stages."""

    query: str
    state: RunState = RunState.IDLE
    recipes: list[RecipeData] = field(default_factory=list)
    ingredients: list[IngredientData] = field(default_factory=list)
    links: list[RecipeIngredientData] = field(default_factory=list)
    registry: IngredientRegistry = field(default_factory=IngredientRegistry)
    stats: IngestionStats = field(default_factory=IngestionStats)
    remaining: int | None = None
    error: str | None = None
    history: list[RunState] = field(default_factory=lambda: [RunState.IDLE])

    def transition(self, state: RunState) -> None:
        """Move to ``state``.

        Raises:
            IngestionError: If the move is not allowed from the current state.
        """
        if self.state == state:
            return
        allowed = _TRANSITIONS[self.state]
        if state not in allowed and not (
            state is RunState.FAILED and self.state not in TERMINAL_STATES
        ):
            msg = f"Illegal run state transition {self.state} -> {state}"
            raise IngestionError(msg)
        self.state = state
        self.history.append(state)

    def fail(self, error: BaseException) -> None:
        self.error = str(error) or type(error).__name__
        self.transition(RunState.FAILED)


@dataclass(frozen=True, slots=True)
class IngestionReport:
    """Final summary returned by a run."""

    state: RunState
    pages_fetched: int
    records_seen: int
    records_accepted: int
    records_rejected: int
    images_downloaded: int
    images_failed: int
    recipes_loaded: int
    ingredients_loaded: int
    links_loaded: int
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is RunState.DONE

    @classmethod
    def from_run(
        cls,
        run: IngestionRun,
        *,
        recipes_loaded: int = 0,
        ingredients_loaded: int = 0,
        links_loaded: int = 0,
    ) -> IngestionReport:
        return cls(
            state=run.state,
            pages_fetched=run.stats.pages_fetched,
            records_seen=run.stats.records_seen,
            records_accepted=run.stats.records_accepted,
            records_rejected=run.stats.records_rejected,
            images_downloaded=run.stats.images_downloaded,
            images_failed=run.stats.images_failed,
            recipes_loaded=recipes_loaded,
            ingredients_loaded=ingredients_loaded,
            links_loaded=links_loaded,
            error=run.error,
        )
