from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional

from ..errors import UnknownCatalogEntry
from ..models.items import ItemType, Rarity


class SkillType(Enum):
    DAMAGE = "damage"
    HEAL = "heal"
    BUFF = "buff"
    DEBUFF = "debuff"
    AOE = "aoe"
    DOT = "dot"
    SHIELD = "shield"
    LIFESTEAL = "lifesteal"
    MANABURN = "manaburn"
    STUN = "stun"
    REFLECT = "reflect"


class Element(Enum):
    PHYSICAL = "physical"
    FIRE = "fire"
    ICE = "ice"
    LIGHTNING = "lightning"
    EARTH = "earth"
    ARCANE = "arcane"
    VOID = "void"
    HOLY = "holy"

    @property
    def is_magical(self) -> bool:
        return self in MAGICAL_ELEMENTS


MAGICAL_ELEMENTS = frozenset(
    {Element.FIRE, Element.ICE, Element.LIGHTNING, Element.ARCANE, Element.VOID, Element.HOLY}
)


class Target(Enum):
    SELF = "self"
    ENEMY = "enemy"
    ALL_ENEMIES = "all_enemies"
    ALL_ALLIES = "all_allies"
    ALL = "all"


@dataclass(frozen=True)
class SkillEffects:
    duration: Optional[int] = None
    chance: Optional[int] = None
    stat_modifiers: Mapping[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class SpecialSkill:
    id: str
    name: str
    type: SkillType
    description: str = ""
    element: Optional[Element] = None
    target: Target = Target.ENEMY
    base_power: int = 0
    mana_cost: int = 0
    cooldown: int = 0
    required_rarity: Rarity = Rarity.COMMON
    effects: Optional[SkillEffects] = None


def _skill(id, name, type, description, **kwargs) -> SpecialSkill:
    return SpecialSkill(id=id, name=name, type=type, description=description, **kwargs)


SKILL_REGISTRY: Dict[str, SpecialSkill] = {
    s.id: s
    for s in (
        _skill("firebolt", "Firebolt", SkillType.DAMAGE, "Launches a bolt of fire at the enemy",
               element=Element.FIRE, base_power=120, mana_cost=15, cooldown=2,
               required_rarity=Rarity.UNCOMMON),
        _skill("ice_spike", "Ice Spike", SkillType.DAMAGE, "Impales the enemy with a spike of ice",
               element=Element.ICE, base_power=130, mana_cost=18, cooldown=2,
               required_rarity=Rarity.UNCOMMON),
        _skill("lightning_strike", "Lightning Strike", SkillType.DAMAGE, "Calls lightning down on the enemy",
               element=Element.LIGHTNING, base_power=150, mana_cost=25, cooldown=3,
               required_rarity=Rarity.RARE),
        _skill("arcane_blast", "Arcane Blast", SkillType.DAMAGE, "Unleashes raw arcane energy",
               element=Element.ARCANE, base_power=180, mana_cost=30, cooldown=4,
               required_rarity=Rarity.EPIC),
        _skill("void_rift", "Void Rift", SkillType.DAMAGE, "Tears open a rift that damages all enemies",
               element=Element.VOID, target=Target.ALL_ENEMIES, base_power=120, mana_cost=40,
               cooldown=5, required_rarity=Rarity.LEGENDARY),
        _skill("healing_light", "Healing Light", SkillType.HEAL, "Bathes the caster in restoring light",
               element=Element.HOLY, target=Target.SELF, base_power=150, mana_cost=25, cooldown=3,
               required_rarity=Rarity.RARE),
        _skill("strength_aura", "Strength Aura", SkillType.BUFF, "Surrounds the caster with empowering energy",
               target=Target.SELF, mana_cost=20, cooldown=4, required_rarity=Rarity.UNCOMMON,
               effects=SkillEffects(duration=3, stat_modifiers={"Attack": 15})),
        _skill("protective_barrier", "Protective Barrier", SkillType.SHIELD, "Raises a barrier against harm",
               target=Target.SELF, mana_cost=30, cooldown=5, required_rarity=Rarity.RARE,
               effects=SkillEffects(duration=3, stat_modifiers={"Defense": 20, "Magic Defense": 20})),
        _skill("vampiric_strike", "Vampiric Strike", SkillType.LIFESTEAL, "Strikes and drains the enemy's life",
               element=Element.PHYSICAL, base_power=100, mana_cost=15, cooldown=3,
               required_rarity=Rarity.RARE),
        _skill("poison_blade", "Poison Blade", SkillType.DOT, "Coats the blade with lingering poison",
               base_power=80, mana_cost=20, cooldown=4, required_rarity=Rarity.UNCOMMON,
               effects=SkillEffects(duration=3)),
        _skill("mana_drain", "Mana Drain", SkillType.MANABURN, "Drains the enemy's magic points",
               element=Element.ARCANE, base_power=60, mana_cost=15, cooldown=3,
               required_rarity=Rarity.RARE),
        _skill("stunning_blow", "Stunning Blow", SkillType.STUN, "A heavy blow that may stun",
               element=Element.PHYSICAL, base_power=90, mana_cost=25, cooldown=4,
               required_rarity=Rarity.RARE, effects=SkillEffects(duration=1, chance=70)),
        _skill("reflective_shield", "Reflective Shield", SkillType.REFLECT, "Reflects part of incoming damage",
               target=Target.SELF, mana_cost=35, cooldown=5, required_rarity=Rarity.EPIC,
               effects=SkillEffects(duration=3, stat_modifiers={"Damage Reflection": 30})),
        _skill("elemental_fury", "Elemental Fury", SkillType.AOE, "Unleashes every element at once",
               target=Target.ALL_ENEMIES, base_power=100, mana_cost=45, cooldown=6,
               required_rarity=Rarity.LEGENDARY),
    )
}

_ITEM_SKILL_TYPES = {
    ItemType.WEAPON: {SkillType.DAMAGE, SkillType.LIFESTEAL, SkillType.DOT, SkillType.MANABURN},
    ItemType.ARMOR: {SkillType.SHIELD, SkillType.REFLECT, SkillType.BUFF},
    ItemType.ACCESSORY: {SkillType.BUFF, SkillType.DEBUFF, SkillType.AOE},
}


def get_skill(skill_id: str) -> SpecialSkill:
    try:
        return SKILL_REGISTRY[skill_id]
    except KeyError:
        raise UnknownCatalogEntry("skill", skill_id) from None


def enemy_skill(skill_id: str) -> SpecialSkill:
    """Placeholder skill used for every entry of an enemy's skill list."""
    return SpecialSkill(
        id=skill_id,
        name=" ".join(part.capitalize() for part in skill_id.split("_")),
        type=SkillType.DAMAGE,
        description=f"Enemy skill: {skill_id}",
        target=Target.ENEMY,
        base_power=100,
        mana_cost=10,
        cooldown=3,
        required_rarity=Rarity.COMMON,
    )


def available_skills(item_type: ItemType, rarity: Rarity) -> List[SpecialSkill]:
    """Registered skills a crafted item of this type and rarity may roll."""
    allowed = _ITEM_SKILL_TYPES.get(item_type, set())
    return [s for s in SKILL_REGISTRY.values() if s.type in allowed and s.required_rarity <= rarity]
