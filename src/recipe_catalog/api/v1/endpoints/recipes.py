"""Public recipe catalog endpoints."""

from __future__ import annotations

import random
from typing import Annotated, Final
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from recipe_catalog.api.dependencies import (
    get_ingredient_repository,
    get_recipe_repository,
)
from recipe_catalog.core.config import Settings, get_settings
from recipe_catalog.core.exceptions import CatalogEmptyException, NotFoundException
from recipe_catalog.database.repositories import (
    IngredientRepository,
    RecipeRepository,
    RecipeSearchFilters,
)
from recipe_catalog.schemas import (
    ImageResponse,
    RecipeDetail,
    RecipeSearchResponse,
    RecipeSummary,
)


router = APIRouter(prefix="/recipes", tags=["recipes"])

Recipes = Annotated[RecipeRepository, Depends(get_recipe_repository)]

# Smallest first.
IMAGE_SIZE_ORDER: Final[tuple[str, ...]] = ("THUMBNAIL", "SMALL", "REGULAR", "LARGE")

# Rows can disappear between the count and the offset lookup.
RANDOM_PICK_ATTEMPTS: Final[int] = 3


def public_image_url(settings: Settings, filename: str) -> str:
    return f"{settings.content.public_base_url.rstrip('/')}/{filename}"


def ranked_sizes(images: dict[str, str]) -> list[str]:
    """Known size labels present in ``images``, smallest first."""
    return [size for size in IMAGE_SIZE_ORDER if size in images]


@router.get("/random", response_model=RecipeSummary, summary="Get a random recipe")
async def random_recipe(recipes: Recipes) -> RecipeSummary:
    for _ in range(RANDOM_PICK_ATTEMPTS):
        total = await recipes.count()
        if total == 0:
            break
        recipe = await recipes.get_at_offset(random.randrange(total))  # noqa: S311
        if recipe is not None:
            return RecipeSummary.from_data(recipe)

    raise CatalogEmptyException()


@router.get(
    "/search",
    response_model=RecipeSearchResponse,
    summary="Search recipes",
    description="Case-insensitive name search with optional label and calorie filters.",
)
async def search_recipes(
    recipes: Recipes,
    q: Annotated[str | None, Query(max_length=200, description="Name keyword")] = None,
    diet: Annotated[str | None, Query(description="Diet label, e.g. Balanced")] = None,
    health: Annotated[str | None, Query(description="Health label, e.g. Vegan")] = None,
    max_calories: Annotated[float | None, Query(alias="maxCalories", ge=0)] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> RecipeSearchResponse:
    filters = RecipeSearchFilters(
        keyword=q,
        diet_label=diet,
        health_label=health,
        max_calories=max_calories,
    )
    results = await recipes.search(filters, limit=limit, offset=offset)
    return RecipeSearchResponse(
        results=[RecipeSummary.from_data(recipe) for recipe in results],
        limit=limit,
        offset=offset,
    )


@router.get(
    "/keyword/{keyword}",
    response_model=list[RecipeSummary],
    summary="All recipes whose name contains a keyword",
)
async def recipes_by_keyword(keyword: str, recipes: Recipes) -> list[RecipeSummary]:
    results = await recipes.search(RecipeSearchFilters(keyword=keyword), limit=None)
    return [RecipeSummary.from_data(recipe) for recipe in results]


@router.get("/{recipe_id}", response_model=RecipeDetail, summary="Get a recipe")
async def get_recipe(
    recipe_id: UUID,
    recipes: Recipes,
    ingredients: Annotated[IngredientRepository, Depends(get_ingredient_repository)],
) -> RecipeDetail:
    recipe = await recipes.get_by_id(recipe_id)
    if recipe is None:
        raise NotFoundException("Recipe", recipe_id)
    lines = await ingredients.list_for_recipe(recipe_id)
    return RecipeDetail.from_records(recipe, lines)


async def _image_response(
    recipes: RecipeRepository,
    settings: Settings,
    recipe_id: UUID,
    pick: str,
) -> ImageResponse:
    images = await recipes.get_images(recipe_id)
    if images is None:
        raise NotFoundException("Recipe", recipe_id)

    if pick in ("largest", "smallest"):
        sizes = ranked_sizes(images)
        if not sizes:
            raise NotFoundException("Image", f"{recipe_id}/{pick}")
        size = sizes[-1] if pick == "largest" else sizes[0]
    else:
        size = pick.upper()
        if size not in images:
            raise NotFoundException("Image", f"{recipe_id}/{pick}")

    filename = images[size]
    return ImageResponse(
        recipe_id=recipe_id,
        size=size,
        filename=filename,
        url=public_image_url(settings, filename),
    )


@router.get(
    "/{recipe_id}/images/largest",
    response_model=ImageResponse,
    summary="Largest stored image of a recipe",
)
async def largest_image(
    recipe_id: UUID,
    recipes: Recipes,
    settings: Annotated[Settings, Depends(get_settings)],
) -> ImageResponse:
    return await _image_response(recipes, settings, recipe_id, "largest")


@router.get(
    "/{recipe_id}/images/smallest",
    response_model=ImageResponse,
    summary="Smallest stored image of a recipe",
)
async def smallest_image(
    recipe_id: UUID,
    recipes: Recipes,
    settings: Annotated[Settings, Depends(get_settings)],
) -> ImageResponse:
    return await _image_response(recipes, settings, recipe_id, "smallest")


@router.get(
    "/{recipe_id}/images/{size}",
    response_model=ImageResponse,
    summary="One stored image variant of a recipe",
)
async def image_by_size(
    recipe_id: UUID,
    size: str,
    recipes: Recipes,
    settings: Annotated[Settings, Depends(get_settings)],
) -> ImageResponse:
    """Look up a variant by label (THUMBNAIL, SMALL, REGULAR, LARGE; any case)."""
    return await _image_response(recipes, settings, recipe_id, size)
