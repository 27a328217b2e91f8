from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

from ..combat.skills import SpecialSkill, available_skills
from ..config import EngineConfig
from ..models.character import Character, CraftingSkill
from ..models.inventory import Inventory
from ..models.items import ItemCatalog, Rarity
from ..models.recipes import Recipe, RecipeBook
from ..progression.leveling import SkillLevelUp, add_skill_experience
from ..utils.random_provider import RandomProvider
from .controls import (
    CraftingControls,
    crafted_rarity,
    grid_success_chance,
    has_cursed_ring,
    magic_cost,
    quick_success_chance,
    special_skill_chance,
)
from .discovery import DiscoveredRecipes
from .grid import CraftingGrid
from .patterns import CraftingGridAnalyzer, GridAnalysis

logger = logging.getLogger(__name__)


class CraftStatus(Enum):
    SUCCESS = "success"
    FAILED = "failed"
    NO_RECIPE = "no_recipe"
    INSUFFICIENT_MAGIC = "insufficient_magic"
    MISSING_INGREDIENTS = "missing_ingredients"


@dataclass(frozen=True)
class CraftResult:
    """Outcome of a craft attempt.

    `character`, `inventory` and `grid` are the new state to persist. When
    nothing was attempted (no recipe, not enough magic or ingredients) they
    equal the inputs.
    """

    status: CraftStatus
    message: str
    character: Character
    inventory: Inventory
    grid: CraftingGrid
    recipe: Optional[Recipe] = None
    item_id: Optional[str] = None
    pattern: Optional[str] = None
    rarity: Optional[Rarity] = None
    special_skill_chance: float = 0.0
    special_skill_options: Tuple[SpecialSkill, ...] = ()
    magic_spent: int = 0
    chance: float = 0.0
    roll: Optional[float] = None
    skill_level_ups: Dict[CraftingSkill, SkillLevelUp] = field(default_factory=dict)
    discovered: bool = False

    @property
    def success(self) -> bool:
        return self.status == CraftStatus.SUCCESS


@dataclass(frozen=True)
class PotionResult:
    consumed: bool
    restored: int
    character: Character
    inventory: Inventory


class CraftingResolver:
    """Resolve grid crafts and quick crafts against a recipe book.

    Inputs are never mutated; each call returns fresh character, inventory
    and grid state.
    """

    def __init__(
        self,
        recipes: RecipeBook,
        items: ItemCatalog,
        config: Optional[EngineConfig] = None,
        rng=None,
        discovered: Optional[DiscoveredRecipes] = None,
        analyzer: Optional[CraftingGridAnalyzer] = None,
    ) -> None:
        self.recipes = recipes
        self.items = items
        self.config = config or EngineConfig.default()
        self.rng = rng or RandomProvider()
        self.discovered = discovered if discovered is not None else DiscoveredRecipes()
        self.analyzer = analyzer or CraftingGridAnalyzer()

    # Queries

    def match_recipe(self, grid: Sequence[Optional[str]]) -> Optional[Recipe]:
        return self.recipes.match(list(grid))

    def controls_for(self, character: Character, controls: CraftingControls) -> CraftingControls:
        return controls.effective(has_cursed_ring(character.equipment, self.config.crafting.cursed_ring_id))

    def magic_cost(self, recipe: Recipe, character: Character, controls: CraftingControls) -> int:
        return magic_cost(recipe, self.controls_for(character, controls))

    def success_chance(self, recipe: Recipe, character: Character, controls: CraftingControls) -> float:
        tuning = self.config.crafting
        return grid_success_chance(
            recipe,
            character,
            self.controls_for(character, controls),
            base=tuning.base_success,
            low=tuning.min_success,
            high=tuning.max_success,
        )

    def quick_success_chance(self, recipe: Recipe, character: Character, controls: CraftingControls) -> float:
        tuning = self.config.crafting
        return quick_success_chance(
            recipe,
            character,
            self.controls_for(character, controls),
            base=tuning.quick_base_success,
            low=tuning.min_success,
            high=tuning.max_success,
        )

    def analyze(self, grid: Sequence[Optional[str]], recipe: Optional[Recipe] = None) -> GridAnalysis:
        item_type = self.items.get(recipe.output).item_type if recipe is not None else None
        return self.analyzer.analyze(list(grid), item_type)

    def visible_recipes(self):
        return self.recipes.visible(self.discovered)

    # Resolution

    def craft(
        self,
        character: Character,
        inventory: Inventory,
        grid: Sequence[Optional[str]],
        controls: Optional[CraftingControls] = None,
        recipe: Optional[Recipe] = None,
    ) -> CraftResult:
        """Craft from the grid. Grid ingredients were taken from inventory when placed."""
        controls = self.controls_for(character, controls or CraftingControls())
        cells = list(grid)
        if recipe is None:
            recipe = self.match_recipe(cells)
        elif not recipe.matches(c for c in cells if c is not None):
            logger.warning("Grid does not hold the ingredients of %s", recipe.id)
            recipe = None
        if recipe is None:
            return CraftResult(
                CraftStatus.NO_RECIPE, "No recipe matches these ingredients.",
                character.copy(), inventory.copy(), CraftingGrid(cells),
            )

        cost = magic_cost(recipe, controls)
        if character.magic_points < cost:
            return CraftResult(
                CraftStatus.INSUFFICIENT_MAGIC,
                f"Not enough magic points ({character.magic_points}/{cost}).",
                character.copy(), inventory.copy(), CraftingGrid(cells), recipe=recipe, magic_spent=0,
            )

        chance = self.success_chance(recipe, character, controls)
        roll = self.rng.random() * 100
        analysis = self.analyze(cells, recipe)
        new_character = character.copy()
        new_inventory = inventory.copy()
        new_character.set_magic_points(new_character.magic_points - cost)

        if roll > chance:
            logger.info("Craft of %s failed (roll %.1f > %.1f)", recipe.id, roll, chance)
            return CraftResult(
                CraftStatus.FAILED, f"Crafting {recipe.name} failed.",
                new_character, new_inventory, CraftingGrid(),
                recipe=recipe, magic_spent=cost, chance=chance, roll=roll,
            )

        new_inventory.add(recipe.output, 1, analysis.tag)
        level_ups = add_skill_experience(new_character, recipe.experience_gain)
        rarity = crafted_rarity(character, controls, analysis.bonuses)
        skill_chance = special_skill_chance(character, controls, rarity)
        options = available_skills(self.items.get(recipe.output).item_type, rarity)
        discovered = self._discover(recipe, analysis)
        logger.info("Crafted %s (pattern=%s, rarity=%s)", recipe.output, analysis.tag, rarity.value)
        return CraftResult(
            CraftStatus.SUCCESS, f"Successfully crafted {recipe.name}!",
            new_character, new_inventory, CraftingGrid(),
            recipe=recipe, item_id=recipe.output, pattern=analysis.tag, rarity=rarity,
            special_skill_chance=skill_chance, special_skill_options=tuple(options),
            magic_spent=cost, chance=chance, roll=roll,
            skill_level_ups=level_ups, discovered=discovered,
        )

    def quick_craft(
        self,
        character: Character,
        inventory: Inventory,
        recipe_id: str,
        controls: Optional[CraftingControls] = None,
    ) -> CraftResult:
        """Craft straight from inventory, bypassing the grid. Ingredients are used up either way."""
        recipe = self.recipes.get(recipe_id)
        controls = self.controls_for(character, controls or CraftingControls())
        empty = CraftingGrid()

        missing = [
            item_id for item_id, count in recipe.ingredient_counts().items() if not inventory.has(item_id, count)
        ]
        if missing:
            return CraftResult(
                CraftStatus.MISSING_INGREDIENTS, f"Missing ingredients: {', '.join(sorted(missing))}",
                character.copy(), inventory.copy(), empty, recipe=recipe,
            )
        cost = recipe.magic_cost
        if character.magic_points < cost:
            return CraftResult(
                CraftStatus.INSUFFICIENT_MAGIC,
                f"Not enough magic points ({character.magic_points}/{cost}).",
                character.copy(), inventory.copy(), empty, recipe=recipe,
            )

        new_character = character.copy()
        new_inventory = inventory.copy()
        for item_id, count in recipe.ingredient_counts().items():
            new_inventory.remove(item_id, count)
        new_character.set_magic_points(new_character.magic_points - cost)

        chance = self.quick_success_chance(recipe, character, controls)
        roll = self.rng.random() * 100
        if roll > chance:
            logger.info("Quick craft of %s failed (roll %.1f > %.1f)", recipe.id, roll, chance)
            return CraftResult(
                CraftStatus.FAILED, f"Crafting {recipe.name} failed.",
                new_character, new_inventory, empty,
                recipe=recipe, magic_spent=cost, chance=chance, roll=roll,
            )

        new_inventory.add(recipe.output, 1)
        level_ups = add_skill_experience(new_character, recipe.experience_gain)
        logger.info("Quick crafted %s", recipe.output)
        return CraftResult(
            CraftStatus.SUCCESS, f"Successfully crafted {recipe.name}!",
            new_character, new_inventory, empty,
            recipe=recipe, item_id=recipe.output, magic_spent=cost, chance=chance, roll=roll,
            skill_level_ups=level_ups,
        )

    def consume_mana_potion(self, character: Character, inventory: Inventory) -> PotionResult:
        tuning = self.config.crafting
        if not inventory.has(tuning.mana_potion_id):
            return PotionResult(False, 0, character.copy(), inventory.copy())
        new_character = character.copy()
        new_inventory = inventory.copy()
        new_inventory.remove(tuning.mana_potion_id, 1)
        before = new_character.magic_points
        new_character.set_magic_points(before + tuning.mana_potion_restore)
        return PotionResult(True, new_character.magic_points - before, new_character, new_inventory)

    def _discover(self, recipe: Recipe, analysis: GridAnalysis) -> bool:
        if not recipe.is_secret:
            return False
        found = {p.value for p in analysis.patterns}
        if recipe.pattern_type is not None and recipe.pattern_type not in found:
            return False
        return self.discovered.add(recipe.id)


__all__ = ["CraftStatus", "CraftResult", "PotionResult", "CraftingResolver"]
