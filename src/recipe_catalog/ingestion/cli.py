"""Console entry points for the ingestion job and schema setup.

Exit status: 0 when the run reaches ``DONE``, 1 when it ends ``FAILED``,
2 when it cannot start (missing credential, unreachable database).
"""

from __future__ import annotations

import argparse
import asyncio
from typing import TYPE_CHECKING, Final

import asyncpg

from recipe_catalog.core.config import get_settings
from recipe_catalog.database.connection import close_database_pool, init_database_pool
from recipe_catalog.database.schema import create_schema
from recipe_catalog.ingestion.exceptions import IngestionConfigError
from recipe_catalog.ingestion.pipeline import run_ingestion
from recipe_catalog.observability.logging import get_logger, setup_logging


if TYPE_CHECKING:
    from collections.abc import Sequence

    from recipe_catalog.core.config import Settings

logger = get_logger(__name__)

EXIT_OK: Final[int] = 0
EXIT_FAILED: Final[int] = 1
EXIT_CONFIG_ERROR: Final[int] = 2


def _positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        msg = f"must be greater than 0, got {value}"
        raise argparse.ArgumentTypeError(msg)
    return number


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        msg = f"must be 0 or greater, got {value}"
        raise argparse.ArgumentTypeError(msg)
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="recipe-catalog-ingest",
        description="Load recipes from the Edamam search API into the catalog.",
    )
    parser.add_argument("--query", help="Search term (default: ingestion.query)")
    parser.add_argument(
        "--threshold",
        type=_non_negative_int,
        help="Stop once the remaining result count drops to this value",
    )
    parser.add_argument(
        "--page-delay",
        type=_positive_float,
        help="Seconds between page requests",
    )
    parser.add_argument("--image-dir", help="Directory for downloaded images")
    return parser


def _configure_logging(settings: Settings) -> None:
    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        is_development=settings.is_development,
        log_file=settings.logging.file,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run one ingestion and return the process exit status."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    _configure_logging(settings)

    try:
        report = asyncio.run(
            run_ingestion(
                settings,
                query=args.query,
                budget_threshold=args.threshold,
                page_delay=args.page_delay,
                image_dir=args.image_dir,
            )
        )
    except IngestionConfigError as e:
        logger.error("Ingestion not started", error=str(e))
        return EXIT_CONFIG_ERROR

    if report.succeeded:
        logger.info(
            "Ingestion succeeded: {recipes} recipes, {ingredients} ingredients",
            recipes=report.recipes_loaded,
            ingredients=report.ingredients_loaded,
        )
        return EXIT_OK

    logger.error("Ingestion failed: {error}", error=report.error)
    return EXIT_FAILED


async def _init_db(settings: Settings) -> None:
    pool = await init_database_pool(settings)
    try:
        await create_schema(pool)
    finally:
        await close_database_pool()


def init_db(argv: Sequence[str] | None = None) -> int:
    """Create the catalog tables if they do not exist."""
    argparse.ArgumentParser(
        prog="recipe-catalog-init-db",
        description="Create the recipe catalog tables if absent.",
    ).parse_args(argv)
    settings = get_settings()
    _configure_logging(settings)

    try:
        asyncio.run(_init_db(settings))
    except (asyncpg.PostgresError, OSError) as e:
        logger.error("Schema setup failed", dsn=settings.database_dsn, error=str(e))
        return EXIT_FAILED
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
