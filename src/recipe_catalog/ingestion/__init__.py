"""One-shot ingestion of Edamam search results into the recipe catalog."""

from recipe_catalog.ingestion.dedup import IngredientRegistry, RegistrationResult
from recipe_catalog.ingestion.exceptions import (
    BulkLoadError,
    ImageFetchError,
    IngestionConfigError,
    IngestionError,
    PageFetchError,
)
from recipe_catalog.ingestion.models import (
    ImageDownloadResult,
    IngestionReport,
    IngestionRun,
    RunState,
    ValidatedIngredient,
    ValidatedRecipe,
    ValidationResult,
)
from recipe_catalog.ingestion.pipeline import IngestionPipeline, run_ingestion
from recipe_catalog.ingestion.validator import validate_recipe


__all__ = [
    "BulkLoadError",
    "ImageDownloadResult",
    "ImageFetchError",
    "IngestionConfigError",
    "IngestionError",
    "IngestionPipeline",
    "IngestionReport",
    "IngestionRun",
    "IngredientRegistry",
    "PageFetchError",
    "RegistrationResult",
    "RunState",
    "ValidatedIngredient",
    "ValidatedRecipe",
    "ValidationResult",
    "run_ingestion",
    "validate_recipe",
]
