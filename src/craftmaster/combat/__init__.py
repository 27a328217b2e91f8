from .damage import CombatResult, DamageResolver, defense_factor
from .entities import CombatEntity, CombatStats, StatusEffect
from .log import CombatLog, CombatLogEntry, LogCategory
from .session import ActionType, CombatAction, CombatSession, CombatState, CombatUpdate, Rewards
from .skills import SKILL_REGISTRY, Element, SkillType, SpecialSkill
from .stats import StatAggregator, equipped_items
from .status import StatusTick, process_status_effects

__all__ = [
    "CombatResult",
    "DamageResolver",
    "defense_factor",
    "CombatEntity",
    "CombatStats",
    "StatusEffect",
    "CombatLog",
    "CombatLogEntry",
    "LogCategory",
    "ActionType",
    "CombatAction",
    "CombatSession",
    "CombatState",
    "CombatUpdate",
    "Rewards",
    "SKILL_REGISTRY",
    "Element",
    "SkillType",
    "SpecialSkill",
    "StatAggregator",
    "equipped_items",
    "StatusTick",
    "process_status_effects",
]
