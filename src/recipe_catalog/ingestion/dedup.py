"""Run-scoped ingredient deduplication.

Ingredient names are unique across the catalog. The registry is seeded with
the names already stored, hands out one id per distinct name and emits the
``ingredients`` row only for names it has never seen. Every line still gets
its own join row.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from recipe_catalog.database.repositories import IngredientData, RecipeIngredientData


if TYPE_CHECKING:
    from collections.abc import Mapping

    from recipe_catalog.ingestion.models import ValidatedIngredient


@dataclass(frozen=True, slots=True)
class RegistrationResult:
    """Outcome of registering one ingredient line.

    ``ingredient`` is set only on first sight of the name.
    """

    ingredient_id: UUID
    link: RecipeIngredientData
    ingredient: IngredientData | None = None

    @property
    def created(self) -> bool:
        return self.ingredient is not None


@dataclass(slots=True)
class IngredientRegistry:
    """Maps ingredient name to its id for one run."""

    _ids: dict[str, UUID] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, name: object) -> bool:
        return name in self._ids

    def get(self, name: str) -> UUID | None:
        return self._ids.get(name)

    def seed(self, known: Mapping[str, UUID]) -> None:
        """Adopt ids of ingredients persisted by earlier runs; no rows are emitted for them."""
        self._ids.update(known)

    def register(self, recipe_id: UUID, line: ValidatedIngredient) -> RegistrationResult:
        """Resolve ``line.food`` to an id and build the join row for ``recipe_id``."""
        ingredient: IngredientData | None = None
        ingredient_id = self._ids.get(line.food)
        if ingredient_id is None:
            ingredient_id = uuid4()
            self._ids[line.food] = ingredient_id
            ingredient = IngredientData(
                id=ingredient_id, name=line.food, category=line.category
            )

        link = RecipeIngredientData(
            id=uuid4(),
            recipe_id=recipe_id,
            ingredient_id=ingredient_id,
            text=line.text,
            quantity=line.quantity,
            measure=line.measure,
        )
        return RegistrationResult(
            ingredient_id=ingredient_id, link=link, ingredient=ingredient
        )
