from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Mapping, Sequence

from ..models.character import Character, CraftingSkill
from ..models.equipment import Equipment
from ..models.items import Rarity
from ..models.recipes import Recipe
from .patterns import PatternBonus

RARITY_THRESHOLDS = (
    (200, Rarity.LEGENDARY),
    (150, Rarity.EPIC),
    (100, Rarity.RARE),
    (50, Rarity.UNCOMMON),
)

SPECIAL_SKILL_BASE = {
    Rarity.COMMON: 5,
    Rarity.UNCOMMON: 15,
    Rarity.RARE: 30,
    Rarity.EPIC: 50,
    Rarity.LEGENDARY: 75,
    Rarity.MYTHIC: 75,
}
SPECIAL_SKILL_CAP = 95


@dataclass(frozen=True)
class CraftingControls:
    """Slider values, each 0-100."""

    magic: int = 0
    stability: int = 50
    curse: int = 0

    def __post_init__(self):
        for name in ("magic", "stability", "curse"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} control must be within 0-100, got {value}")

    def effective(self, cursed: bool) -> "CraftingControls":
        """Curse has no effect without a cursed ring equipped."""
        return self if cursed or self.curse == 0 else replace(self, curse=0)

    def as_dict(self) -> Mapping[str, int]:
        return {"magic": self.magic, "stability": self.stability, "curse": self.curse}


def has_cursed_ring(equipment: Equipment, ring_id: str = "cursed_energy_ring") -> bool:
    return ring_id in equipment.rings


def magic_cost(recipe: Recipe, controls: CraftingControls) -> int:
    """recipe cost + floor(magic / 20) * 5 + floor(curse / 10)."""
    return recipe.magic_cost + (controls.magic // 20) * 5 + controls.curse // 10


def crafted_rarity(character: Character, controls: CraftingControls, bonuses: Sequence[PatternBonus]) -> Rarity:
    points = (
        character.skill_level(CraftingSkill.METALWORKING) * 5
        + character.skill_level(CraftingSkill.MAGICWORKING) * 8
        + character.skill_level(CraftingSkill.SPELLCRAFT) * 7
        + controls.magic * 0.5
        + controls.stability * 0.3
        + controls.curse * 0.8
        + sum(b.rarity_boost * 10 for b in bonuses)
    )
    for threshold, rarity in RARITY_THRESHOLDS:
        if points >= threshold:
            return rarity
    return Rarity.COMMON


def special_skill_chance(character: Character, controls: CraftingControls, rarity: Rarity) -> float:
    """Percent chance that a crafted item of `rarity` rolls a special skill."""
    stat_bonus = (
        character.skill_level(CraftingSkill.MAGICWORKING) * 2 + character.skill_level(CraftingSkill.SPELLCRAFT) * 3
    )
    control_bonus = controls.magic / 100 * 15 + controls.stability / 100 * 10
    return min(SPECIAL_SKILL_CAP, SPECIAL_SKILL_BASE[rarity] + stat_bonus + control_bonus)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def grid_success_chance(
    recipe: Recipe,
    character: Character,
    controls: CraftingControls,
    base: float = 90,
    low: float = 5,
    high: float = 95,
) -> float:
    """Success percentage for a grid craft, clamped to [low, high].

    Character skill counts for at most twice each requirement.
    """
    chance = base
    required_total = 0
    character_total = 0
    for skill, required in recipe.required_skills.items():
        required_total += required
        character_total += min(character.skill_level(skill), required * 2)
    if required_total > 0:
        surplus = max(0, character_total - required_total)
        deficit = max(0, required_total - character_total)
        chance = base + min(45, surplus * 5) - deficit * 10
    if recipe.magic_cost:
        chance += (controls.stability - 50) / 2
        if controls.curse > 0:
            chance -= controls.curse / 10
    return clamp(chance, low, high)


def quick_success_chance(
    recipe: Recipe,
    character: Character,
    controls: CraftingControls,
    base: float = 80,
    low: float = 5,
    high: float = 95,
) -> float:
    """Success percentage for a quick craft.

    +5/-5 per met/unmet skill requirement; per recipe optimal control value
    +5 within 10 points, 0 within 25, -5 beyond.
    """
    chance = base
    for skill, required in recipe.required_skills.items():
        chance += 5 if character.skill_level(skill) >= required else -5
    values = controls.as_dict()
    for name, optimal in recipe.optimal_controls.items():
        diff = abs(values.get(name, 0) - optimal)
        if diff <= 10:
            chance += 5
        elif diff > 25:
            chance -= 5
    return clamp(chance, low, high)


__all__ = [
    "CraftingControls",
    "has_cursed_ring",
    "magic_cost",
    "crafted_rarity",
    "special_skill_chance",
    "grid_success_chance",
    "quick_success_chance",
    "clamp",
]
