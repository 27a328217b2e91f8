from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

from ..models.character import Character, CraftingSkill
from ..models.equipment import Equipment
from ..models.items import Item, ItemCatalog
from .entities import CombatStats
from .skills import SKILL_REGISTRY, Element, SpecialSkill

logger = logging.getLogger(__name__)

BASE_CRIT_CHANCE = 5
BASE_CRIT_DAMAGE = 150

# Item stat name -> CombatStats field
STAT_FIELDS = {
    "Attack": "attack",
    "Defense": "defense",
    "Magic Power": "magic_attack",
    "Magic Defense": "magic_defense",
    "Speed": "speed",
    "Crit Chance": "crit_chance",
    "Crit Damage": "crit_damage",
}

RESISTANCE_SUFFIX = " Resistance"


def _resistance_element(stat_name: str) -> Optional[Element]:
    if not stat_name.endswith(RESISTANCE_SUFFIX):
        return None
    prefix = stat_name[: -len(RESISTANCE_SUFFIX)].lower()
    try:
        return Element(prefix)
    except ValueError:
        return None


def equipped_items(equipment: Equipment, catalog: ItemCatalog) -> Dict[str, Item]:
    """Resolve equipped ids to catalog items, keyed by slot (rings as rings_<n>)."""
    return {slot: catalog.get(item_id) for slot, item_id in equipment.equipped()}


class StatAggregator:
    """Derive a CombatStats block from base attributes and equipped items."""

    def __init__(self, skills: Optional[Mapping[str, SpecialSkill]] = None) -> None:
        self.skills = SKILL_REGISTRY if skills is None else skills

    def aggregate(self, character: Character, items: Mapping[str, Item]) -> CombatStats:
        totals = {
            "attack": character.strength * 2,
            "defense": character.strength,
            "magic_attack": character.skill_level(CraftingSkill.SPELLCRAFT) * 3,
            "magic_defense": character.skill_level(CraftingSkill.MAGICWORKING) * 2,
            "speed": character.speed * 2,
            "crit_chance": BASE_CRIT_CHANCE,
            "crit_damage": BASE_CRIT_DAMAGE,
        }
        resistances = {element: 0 for element in Element}
        skills = []

        for slot, item in items.items():
            for stat_name, value in item.stats.items():
                field_name = STAT_FIELDS.get(stat_name)
                if field_name is not None:
                    totals[field_name] += value
                    continue
                element = _resistance_element(stat_name)
                if element is not None:
                    resistances[element] += value
                else:
                    logger.debug("Ignoring non-combat stat %r on %s", stat_name, item.id)
            if item.special_ability and item.special_ability in self.skills:
                skills.append(self.skills[item.special_ability])
                logger.debug("Item %s in %s grants skill %s", item.id, slot, item.special_ability)

        return CombatStats(resistances=resistances, special_skills=tuple(skills), **totals)
