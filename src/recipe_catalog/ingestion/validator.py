"""Accept or reject raw Edamam records before any side effect.

A record is accepted only when every required recipe field is present and
non-null, every ingredient line carries every required ingredient field, and
the THUMBNAIL, SMALL and REGULAR image variants are present. Extra image
sizes (e.g. LARGE) are kept when they carry a url. Nutrient entries
without a label, quantity or unit are dropped.
"""

from __future__ import annotations

from typing import Any, Final

from pydantic import ValidationError

from recipe_catalog.clients.edamam.models import EdamamNutrient, EdamamRecipe
from recipe_catalog.database.repositories import NutrientData
from recipe_catalog.ingestion.models import (
    ValidatedIngredient,
    ValidatedRecipe,
    ValidationResult,
)


REQUIRED_RECIPE_FIELDS: Final[tuple[str, ...]] = (
    "label",
    "ingredientLines",
    "ingredients",
    "yield",
    "images",
    "dietLabels",
    "healthLabels",
    "totalNutrients",
    "totalDaily",
    "cautions",
    "calories",
    "url",
)

REQUIRED_INGREDIENT_FIELDS: Final[tuple[str, ...]] = (
    "food",
    "foodCategory",
    "quantity",
    "text",
    "measure",
)

REQUIRED_IMAGE_SIZES: Final[tuple[str, ...]] = ("THUMBNAIL", "SMALL", "REGULAR")


def _missing(mapping: dict[str, Any], fields: tuple[str, ...]) -> list[str]:
    return [name for name in fields if mapping.get(name) is None]


def _check_shape(raw: dict[str, Any]) -> str | None:
    """Return the first reason ``raw`` is incomplete, or None."""
    missing = _missing(raw, REQUIRED_RECIPE_FIELDS)
    if missing:
        return f"missing recipe fields: {', '.join(missing)}"

    ingredients = raw["ingredients"]
    if not isinstance(ingredients, list):
        return "ingredients is not a list"
    for index, line in enumerate(ingredients):
        if not isinstance(line, dict):
            return f"ingredient {index} is not an object"
        missing = _missing(line, REQUIRED_INGREDIENT_FIELDS)
        if missing:
            return f"ingredient {index} missing fields: {', '.join(missing)}"

    images = raw["images"]
    if not isinstance(images, dict):
        return "images is not an object"
    missing = _missing(images, REQUIRED_IMAGE_SIZES)
    if missing:
        return f"missing image sizes: {', '.join(missing)}"
    return None


def _nutrients(values: dict[str, EdamamNutrient]) -> list[NutrientData]:
    return [
        NutrientData(label=n.label, quantity=n.quantity, unit=n.unit)
        for n in values.values()
        if n.label is not None and n.quantity is not None and n.unit is not None
    ]


def validate_recipe(raw: dict[str, Any]) -> ValidationResult:
    """Validate one raw ``hits[].recipe`` object.

    Returns:
        An accepted result carrying a :class:`ValidatedRecipe`, or a rejected
        result carrying the reason.
    """
    reason = _check_shape(raw)
    if reason is not None:
        return ValidationResult.reject(reason)

    try:
        recipe = EdamamRecipe.model_validate(raw)
    except ValidationError as e:
        return ValidationResult.reject(f"malformed record: {e.error_count()} errors")

    image_urls: dict[str, str] = {}
    for size, image in (recipe.images or {}).items():
        if image is not None and image.url:
            image_urls[size] = image.url
        elif size in REQUIRED_IMAGE_SIZES:
            return ValidationResult.reject(f"image {size} has no url")

    # Presence of every field below was checked in _check_shape.
    validated = ValidatedRecipe(
        name=recipe.label,
        image_urls=image_urls,
        ingredient_lines=recipe.ingredient_lines,
        ingredients=[
            ValidatedIngredient(
                food=line.food,
                category=line.food_category,
                quantity=line.quantity,
                text=line.text,
                measure=line.measure,
            )
            for line in recipe.ingredients or []
        ],
        servings=recipe.yield_,
        diet_labels=recipe.diet_labels,
        health_labels=recipe.health_labels,
        calories=recipe.calories,
        nutrients=_nutrients(recipe.total_nutrients or {}),
        daily_nutrients=_nutrients(recipe.total_daily or {}),
        cautions=recipe.cautions,
        link=recipe.url,
    )
    return ValidationResult.accept(validated)
