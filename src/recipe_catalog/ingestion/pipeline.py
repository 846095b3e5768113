"""Ingestion orchestration.

:class:`IngestionPipeline` drives one run through the state machine in
``models.RunState``: fetch a page, validate each record, download images for
the accepted ones, accumulate rows, and bulk-load everything at the end.
:func:`run_ingestion` wires the pipeline from settings for the CLI.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

import asyncpg

from recipe_catalog.clients.edamam import EdamamClient
from recipe_catalog.database.connection import close_database_pool, init_database_pool
from recipe_catalog.database.repositories import RecipeData
from recipe_catalog.ingestion.exceptions import IngestionConfigError, IngestionError
from recipe_catalog.ingestion.images import ImageFetcher
from recipe_catalog.ingestion.loader import BulkLoader
from recipe_catalog.ingestion.models import IngestionReport, IngestionRun, RunState
from recipe_catalog.ingestion.paginator import Paginator
from recipe_catalog.ingestion.validator import validate_recipe
from recipe_catalog.observability.logging import get_logger


if TYPE_CHECKING:
    from aiolimiter import AsyncLimiter
    from asyncpg import Pool

    from recipe_catalog.clients.edamam import RecipeSearchPage
    from recipe_catalog.core.config import Settings
    from recipe_catalog.ingestion.models import ImageDownloadResult, ValidatedRecipe

logger = get_logger(__name__)


class IngestionPipeline:
    """Runs one ingestion from the first search page to the bulk load."""

    def __init__(
        self,
        client: EdamamClient,
        image_fetcher: ImageFetcher,
        loader: BulkLoader,
        *,
        query: str,
        budget_threshold: int = 9000,
        page_delay: float = 6.1,
        limiter: AsyncLimiter | None = None,
    ) -> None:
        self._client = client
        self._images = image_fetcher
        self._loader = loader
        self.query = query
        self.budget_threshold = budget_threshold
        self.page_delay = page_delay
        self._limiter = limiter

    async def run(self) -> IngestionReport:
        """Execute the run.

        Ingestion errors end the run in ``FAILED`` and are reported, not
        raised. Anything else also marks the run failed and propagates.
        """
        run = IngestionRun(query=self.query)
        paginator = Paginator(
            self._client,
            self._client.search_url(self.query),
            budget_threshold=self.budget_threshold,
            page_delay=self.page_delay,
            limiter=self._limiter,
        )
        logger.info(
            "Ingestion started",
            query=self.query,
            threshold=self.budget_threshold,
            image_dir=str(self._images.image_dir),
        )

        try:
            self._images.ensure_directory()
            run.registry.seed(await self._loader.known_ingredients())
            pages = paginator.pages()
            while True:
                run.transition(RunState.FETCHING)
                try:
                    page = await anext(pages)
                except StopAsyncIteration:
                    break
                run.stats.pages_fetched = paginator.pages_fetched
                await self._process_page(run, page)
                run.remaining = paginator.remaining
                logger.info(
                    "Processed {processed} recipes, remaining {remaining}",
                    processed=paginator.records_fetched,
                    remaining=paginator.remaining,
                )

            run.transition(RunState.LOADING)
            counts = await self._loader.load(run)
            run.transition(RunState.DONE)
        except (IngestionError, OSError) as e:
            run.fail(e)
            logger.error("Ingestion failed", state=str(run.history[-2]), error=run.error)
            return IngestionReport.from_run(run)
        except Exception as e:
            run.fail(e)
            raise

        report = IngestionReport.from_run(
            run,
            recipes_loaded=counts.recipes,
            ingredients_loaded=counts.ingredients,
            links_loaded=counts.links,
        )
        logger.info(
            "Ingestion finished",
            recipes=report.recipes_loaded,
            ingredients=report.ingredients_loaded,
            rejected=report.records_rejected,
            images_failed=report.images_failed,
        )
        return report

    async def _process_page(self, run: IngestionRun, page: RecipeSearchPage) -> None:
        accepted: list[ValidatedRecipe] = []
        for raw in page.records:
            run.transition(RunState.VALIDATING)
            run.stats.records_seen += 1
            result = validate_recipe(raw)
            if result.recipe is None:
                run.transition(RunState.SKIPPING)
                run.stats.records_rejected += 1
                logger.debug("Record rejected", label=raw.get("label"), reason=result.reason)
                continue
            accepted.append(result.recipe)

        if not accepted:
            return

        run.transition(RunState.DOWNLOADING)
        downloads = await self._images.fetch_all([r.image_urls for r in accepted])

        run.transition(RunState.ACCUMULATING)
        for recipe, download in zip(accepted, downloads, strict=True):
            self._accumulate(run, recipe, download)

    @staticmethod
    def _accumulate(
        run: IngestionRun,
        recipe: ValidatedRecipe,
        download: ImageDownloadResult,
    ) -> None:
        recipe_id = uuid4()
        run.recipes.append(
            RecipeData(
                id=recipe_id,
                name=recipe.name,
                images=download.images,
                ingredient_lines=recipe.ingredient_lines,
                servings=recipe.servings,
                diet_labels=recipe.diet_labels,
                health_labels=recipe.health_labels,
                calories=recipe.calories,
                nutrients=recipe.nutrients,
                daily_nutrients=recipe.daily_nutrients,
                cautions=recipe.cautions,
                link=recipe.link,
            )
        )
        for line in recipe.ingredients:
            registration = run.registry.register(recipe_id, line)
            if registration.ingredient is not None:
                run.ingredients.append(registration.ingredient)
            run.links.append(registration.link)

        run.stats.records_accepted += 1
        run.stats.images_downloaded += download.downloaded
        run.stats.images_failed += len(download.failed)


async def run_ingestion(
    settings: Settings,
    *,
    query: str | None = None,
    budget_threshold: int | None = None,
    page_delay: float | None = None,
    image_dir: Path | str | None = None,
    pool: Pool | None = None,
) -> IngestionReport:
    """Build a pipeline from ``settings`` and run it once.

    Keyword arguments override the ``ingestion`` and ``content`` settings.
    A pool is opened (and closed afterwards) when none is passed.

    Raises:
        IngestionConfigError: If ``EDAMAM_APP_KEY`` is missing or the
            database cannot be reached. Raised before any API request.
    """
    config = settings.ingestion
    if not settings.EDAMAM_APP_KEY:
        msg = "EDAMAM_APP_KEY is not set"
        raise IngestionConfigError(msg)

    owns_pool = pool is None
    if pool is None:
        try:
            pool = await init_database_pool(settings)
        except (asyncpg.PostgresError, OSError) as e:
            msg = f"Database unavailable at {settings.database_dsn}: {e}"
            raise IngestionConfigError(msg) from e

    try:
        async with EdamamClient(
            config.app_id,
            settings.EDAMAM_APP_KEY,
            base_url=config.api_base_url,
            timeout=config.request_timeout,
        ) as client:
            pipeline = IngestionPipeline(
                client,
                ImageFetcher(
                    client,
                    Path(image_dir or settings.content.image_dir),
                    concurrency=config.image_concurrency,
                    timeout=config.image_timeout,
                ),
                BulkLoader(pool),
                query=query or config.query,
                budget_threshold=(
                    budget_threshold
                    if budget_threshold is not None
                    else config.budget_threshold
                ),
                page_delay=page_delay if page_delay is not None else config.page_delay_seconds,
            )
            return await pipeline.run()
    finally:
        if owns_pool:
            await close_database_pool()
