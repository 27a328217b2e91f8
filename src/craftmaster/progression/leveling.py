from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from ..config import GrowthConfig
from ..models.character import Character, CraftingSkill

logger = logging.getLogger(__name__)

SKILL_EXPERIENCE_PER_LEVEL = 100


@dataclass(frozen=True)
class LevelUpEvent:
    from_level: int
    to_level: int


@dataclass(frozen=True)
class SkillLevelUp:
    skill: CraftingSkill
    from_level: int
    to_level: int


def add_character_experience(
    character: Character, amount: int, growth: Optional[GrowthConfig] = None
) -> Optional[LevelUpEvent]:
    """Add experience in place and apply at most one level-up.

    On level-up the threshold is subtracted from experience, the threshold
    grows by the configured multiplier, and health and magic points are
    raised and fully restored.
    """
    if amount < 0:
        raise ValueError("Experience amount cannot be negative")
    g = growth or GrowthConfig()
    character.experience += amount
    if character.experience < character.experience_to_next_level:
        return None

    from_level = character.level
    character.level += 1
    character.experience -= character.experience_to_next_level
    character.experience_to_next_level = math.floor(character.experience_to_next_level * g.threshold_multiplier)
    character.max_health += g.max_health
    character.health = character.max_health
    character.max_magic_points += g.max_magic_points
    character.magic_points = character.max_magic_points
    character.strength += g.strength
    character.speed += g.speed
    logger.info("%s leveled up: L%d -> L%d", character.name, from_level, character.level)
    return LevelUpEvent(from_level=from_level, to_level=character.level)


def add_skill_experience(character: Character, gains: Mapping[CraftingSkill, int]) -> Dict[CraftingSkill, SkillLevelUp]:
    """Add crafting experience in place; each skill levels up at most once.

    A skill at level L levels up when its experience reaches L * 100, keeping
    the excess.
    """
    level_ups: Dict[CraftingSkill, SkillLevelUp] = {}
    for skill, amount in gains.items():
        if amount <= 0:
            continue
        progress = character.skills[skill]
        progress.experience += amount
        required = progress.level * SKILL_EXPERIENCE_PER_LEVEL
        if progress.experience >= required:
            progress.experience -= required
            progress.level += 1
            level_ups[skill] = SkillLevelUp(skill, progress.level - 1, progress.level)
            logger.info("%s %s skill up: L%d -> L%d", character.name, skill.value, progress.level - 1, progress.level)
    return level_ups
