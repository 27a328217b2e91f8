from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from ..errors import UnknownCatalogEntry
from .character import CraftingSkill

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Recipe:
    id: str
    name: str
    inputs: Tuple[str, ...]
    output: str
    category: str = "items"
    difficulty: int = 1
    description: str = ""
    required_skills: Mapping[CraftingSkill, int] = field(default_factory=dict)
    experience_gain: Mapping[CraftingSkill, int] = field(default_factory=dict)
    magic_cost: int = 0
    temperature: Optional[int] = None
    optimal_controls: Mapping[str, int] = field(default_factory=dict)
    is_secret: bool = False
    pattern_type: Optional[str] = None

    def ingredient_counts(self) -> Counter:
        return Counter(self.inputs)

    def matches(self, items: Iterable[str]) -> bool:
        """Exact multiset equality; order and grid position are ignored."""
        return Counter(items) == self.ingredient_counts()

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Recipe":
        return Recipe(
            id=data["id"],
            name=data.get("name", data["id"]),
            inputs=tuple(data["inputs"]),
            output=data["output"],
            category=data.get("category", "items"),
            difficulty=int(data.get("difficulty", 1)),
            description=data.get("description", ""),
            required_skills={CraftingSkill(k): int(v) for k, v in (data.get("requiredStats") or {}).items()},
            experience_gain={CraftingSkill(k): int(v) for k, v in (data.get("experienceGain") or {}).items()},
            magic_cost=int(data.get("magicCost", 0)),
            temperature=data.get("temperature"),
            optimal_controls=dict(data.get("optimalControls") or {}),
            is_secret=bool(data.get("isSecret", False)),
            pattern_type=data.get("patternType"),
        )


class RecipeBook:
    """Recipe catalog with grid matching and secret-recipe visibility."""

    def __init__(self, recipes: Iterable[Recipe] = ()) -> None:
        self._recipes: Dict[str, Recipe] = {}
        for recipe in recipes:
            self._recipes[recipe.id] = recipe

    def get(self, recipe_id: str) -> Recipe:
        try:
            return self._recipes[recipe_id]
        except KeyError:
            raise UnknownCatalogEntry("recipe", recipe_id) from None

    def __iter__(self) -> Iterator[Recipe]:
        return iter(self._recipes.values())

    def __len__(self) -> int:
        return len(self._recipes)

    def match(self, grid: Sequence[Optional[str]]) -> Optional[Recipe]:
        """Return the first recipe whose inputs equal the grid's filled cells as a multiset."""
        items = [cell for cell in grid if cell is not None]
        if not items:
            return None
        for recipe in self._recipes.values():
            if recipe.matches(items):
                logger.debug("Grid matched recipe %s", recipe.id)
                return recipe
        return None

    def visible(self, discovered) -> List[Recipe]:
        """Recipes the player may see: all non-secret ones plus discovered secrets."""
        return [r for r in self._recipes.values() if not r.is_secret or r.id in discovered]
