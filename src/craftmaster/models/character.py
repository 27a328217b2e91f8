from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from ..config import EngineConfig
from .equipment import Equipment


class CraftingSkill(Enum):
    METALWORKING = "metalworking"
    MAGICWORKING = "magicworking"
    SPELLCRAFT = "spellcraft"


@dataclass
class SkillProgress:
    level: int = 1
    experience: int = 0


def _default_skills() -> Dict[CraftingSkill, SkillProgress]:
    return {skill: SkillProgress() for skill in CraftingSkill}


@dataclass
class Character:
    """
    Persistent character record. Engine operations work on copies and hand
    the updated record back to the caller.
    """

    name: str
    level: int = 1
    experience: int = 0
    experience_to_next_level: int = 100
    strength: int = 1
    speed: int = 1
    health: int = 100
    max_health: int = 100
    magic_points: int = 50
    max_magic_points: int = 50
    gold: int = 0
    gems: int = 0
    skills: Dict[CraftingSkill, SkillProgress] = field(default_factory=_default_skills)
    equipment: Equipment = field(default_factory=Equipment)

    def __post_init__(self):
        for skill in CraftingSkill:
            self.skills.setdefault(skill, SkillProgress())
        self.experience = max(0, self.experience)
        self.gold = max(0, self.gold)
        self.gems = max(0, self.gems)
        self.set_health(self.health)
        self.set_magic_points(self.magic_points)

    def skill_level(self, skill: CraftingSkill) -> int:
        return self.skills[skill].level

    def set_health(self, value: int) -> None:
        self.health = max(0, min(self.max_health, int(value)))

    def set_magic_points(self, value: int) -> None:
        self.magic_points = max(0, min(self.max_magic_points, int(value)))

    def copy(self) -> "Character":
        return copy.deepcopy(self)


def starting_character(config: Optional[EngineConfig] = None) -> Character:
    """The default new-game character, with as many ring slots as `config` allows."""
    config = config or EngineConfig.default()
    return Character(
        name="Craftmaster",
        level=5,
        experience=240,
        experience_to_next_level=500,
        strength=8,
        speed=6,
        health=100,
        max_health=100,
        magic_points=50,
        max_magic_points=50,
        gold=500,
        gems=10,
        skills={
            CraftingSkill.METALWORKING: SkillProgress(3, 150),
            CraftingSkill.MAGICWORKING: SkillProgress(2, 80),
            CraftingSkill.SPELLCRAFT: SkillProgress(2, 50),
        },
        equipment=Equipment(ring_slots=config.equipment.ring_slots),
    )
