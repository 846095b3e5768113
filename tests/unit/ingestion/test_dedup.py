"""Unit tests for run-scoped ingredient deduplication."""

from __future__ import annotations

from uuid import uuid4

import pytest

from recipe_catalog.ingestion.dedup import IngredientRegistry
from recipe_catalog.ingestion.models import ValidatedIngredient


pytestmark = pytest.mark.unit


def _line(food: str, text: str | None = None) -> ValidatedIngredient:
    return ValidatedIngredient(
        food=food,
        category="fruit",
        quantity=1.0,
        text=text or f"1 {food}",
        measure="<unit>",
    )


def test_first_sight_creates_ingredient() -> None:
    registry = IngredientRegistry()
    recipe_id = uuid4()

    result = registry.register(recipe_id, _line("lime"))

    assert result.created
    assert result.ingredient.name == "lime"
    assert result.ingredient.id == result.ingredient_id
    assert result.link.recipe_id == recipe_id
    assert "lime" in registry
    assert len(registry) == 1


def test_shared_ingredient_across_recipes() -> None:
    registry = IngredientRegistry()
    first_recipe, second_recipe = uuid4(), uuid4()

    first = registry.register(first_recipe, _line("lime", "juice of 1 lime"))
    mango = registry.register(first_recipe, _line("mango"))
    second = registry.register(second_recipe, _line("lime", "2 lime wedges"))

    assert not second.created
    assert second.ingredient is None
    assert second.ingredient_id == first.ingredient_id
    assert mango.ingredient_id != first.ingredient_id
    # every line keeps its own join row
    assert second.link.id != first.link.id
    assert second.link.recipe_id == second_recipe
    assert second.link.text == "2 lime wedges"
    assert len(registry) == 2


def test_repeat_within_one_recipe_still_links() -> None:
    registry = IngredientRegistry()
    recipe_id = uuid4()

    first = registry.register(recipe_id, _line("lime", "1 lime, juiced"))
    second = registry.register(recipe_id, _line("lime", "lime zest"))

    assert first.created
    assert not second.created
    assert second.link.ingredient_id == first.ingredient_id


def test_names_are_case_sensitive() -> None:
    registry = IngredientRegistry()

    lower = registry.register(uuid4(), _line("lime"))
    title = registry.register(uuid4(), _line("Lime"))

    assert title.created
    assert registry.get("lime") == lower.ingredient_id
    assert registry.get("Lime") == title.ingredient_id
    assert registry.get("lemon") is None


def test_seeded_name_reuses_stored_id() -> None:
    stored_id = uuid4()
    registry = IngredientRegistry()
    registry.seed({"lime": stored_id})

    result = registry.register(uuid4(), _line("lime"))

    assert not result.created
    assert result.ingredient_id == stored_id
    assert result.link.ingredient_id == stored_id


def test_unseeded_name_still_created_after_seed() -> None:
    registry = IngredientRegistry()
    registry.seed({"lime": uuid4()})

    result = registry.register(uuid4(), _line("mango"))

    assert result.created
    assert result.ingredient.name == "mango"
