from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Mapping, Optional, Tuple

from .skills import Element, SpecialSkill

BUFF = "buff"
DEBUFF = "debuff"


def _no_resistances() -> Dict[Element, int]:
    return {element: 0 for element in Element}


@dataclass(frozen=True)
class CombatStats:
    attack: float = 0
    defense: float = 0
    magic_attack: float = 0
    magic_defense: float = 0
    speed: float = 0
    crit_chance: float = 5
    crit_damage: float = 150
    resistances: Mapping[Element, float] = field(default_factory=_no_resistances)
    special_skills: Tuple[SpecialSkill, ...] = ()

    def resistance(self, element: Optional[Element]) -> float:
        if element is None:
            return 0
        return self.resistances.get(element, 0)


@dataclass(frozen=True)
class StatusEffect:
    """
    Timed modifier on a combat entity. `tick`, when present, returns the
    damage dealt to the holder each turn.
    """

    name: str
    description: str
    duration: int
    type: str = DEBUFF
    stat_modifiers: Mapping[str, int] = field(default_factory=dict)
    tick: Optional[Callable[[], float]] = field(default=None, compare=False)


@dataclass(frozen=True)
class CombatEntity:
    name: str
    level: int
    health: int
    max_health: int
    magic_points: int
    max_magic_points: int
    stats: CombatStats
    status_effects: Tuple[StatusEffect, ...] = ()

    @property
    def is_defeated(self) -> bool:
        return self.health <= 0

    def take_damage(self, amount: int) -> "CombatEntity":
        return replace(self, health=max(0, self.health - max(0, int(amount))))

    def heal(self, amount: int) -> "CombatEntity":
        return replace(self, health=min(self.max_health, self.health + max(0, int(amount))))

    def spend_mana(self, amount: int) -> "CombatEntity":
        return replace(self, magic_points=max(0, self.magic_points - max(0, int(amount))))

    def with_status(self, effect: StatusEffect) -> "CombatEntity":
        return replace(self, status_effects=self.status_effects + (effect,))
