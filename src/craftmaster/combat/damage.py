from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Tuple

from ..utils.random_provider import RandomProvider
from .entities import BUFF, DEBUFF, CombatEntity, StatusEffect
from .skills import Element, SkillType, SpecialSkill

logger = logging.getLogger(__name__)

DEFENSE_CURVE = 50
DEFAULT_EFFECT_DURATION = 3
LIFESTEAL_RATIO = 0.5
DOT_DIVISOR = 3


def defense_factor(defense: float) -> float:
    """Damage multiplier for a defense value: 1 - d / (d + 50).

    Always in (0, 1] for d >= 0; exactly 0.5 at d = 50.
    """
    d = max(0.0, float(defense))
    return 1.0 - d / (d + DEFENSE_CURVE)


def resistance_factor(resistance: float) -> float:
    return 1.0 - resistance / 100.0


@dataclass(frozen=True)
class CombatResult:
    """Outcome of one attack or skill use.

    Attributes:
        damage: Damage dealt to the defender (0 when none).
        healing: Health restored to the attacker.
        is_critical: Whether the critical roll succeeded.
        message: Log line describing the action.
        target_effects: Status effects to attach to the defender.
        self_effects: Status effects to attach to the attacker.
    """

    damage: int = 0
    healing: int = 0
    is_critical: bool = False
    message: str = ""
    target_effects: Tuple[StatusEffect, ...] = ()
    self_effects: Tuple[StatusEffect, ...] = ()


class DamageResolver:
    """Resolve basic attacks and special skills between two combat entities.

    Mana is not checked or deducted here; the combat session owns that.
    """

    def __init__(self, rng=None) -> None:
        self.rng = rng or RandomProvider()

    def _roll_critical(self, attacker: CombatEntity) -> bool:
        return self.rng.random() * 100 < attacker.stats.crit_chance

    def basic_attack(
        self, attacker: CombatEntity, defender: CombatEntity, element: Element = Element.PHYSICAL
    ) -> CombatResult:
        damage = float(attacker.stats.attack)
        is_critical = self._roll_critical(attacker)
        if is_critical:
            damage *= attacker.stats.crit_damage / 100
        damage *= defense_factor(defender.stats.defense)
        damage *= resistance_factor(defender.stats.resistance(element))
        final = max(1, math.floor(damage))
        crit = " (Critical Hit!)" if is_critical else ""
        message = f"{attacker.name} attacks {defender.name} for {final} {element.value} damage{crit}!"
        logger.debug("basic attack %s -> %s: %d (crit=%s)", attacker.name, defender.name, final, is_critical)
        return CombatResult(damage=final, is_critical=is_critical, message=message)

    def special_skill(self, attacker: CombatEntity, defender: CombatEntity, skill: SpecialSkill) -> CombatResult:
        stats = attacker.stats
        power = skill.base_power / 100
        magical = skill.element is not None and skill.element.is_magical
        effects = skill.effects
        raw_damage = 0.0
        healing = 0
        target_effects = []
        self_effects = []
        apply_resistance = skill.element is not None

        if skill.type == SkillType.DAMAGE:
            raw_damage = (stats.magic_attack if magical else stats.attack) * power
        elif skill.type == SkillType.HEAL:
            healing = math.floor(stats.magic_attack * power)
        elif skill.type in (SkillType.BUFF, SkillType.DEBUFF):
            if effects is not None and effects.stat_modifiers:
                effect = StatusEffect(
                    name=skill.name,
                    description=skill.description,
                    duration=effects.duration or DEFAULT_EFFECT_DURATION,
                    type=BUFF if skill.type == SkillType.BUFF else DEBUFF,
                    stat_modifiers=dict(effects.stat_modifiers),
                )
                (self_effects if skill.type == SkillType.BUFF else target_effects).append(effect)
        elif skill.type == SkillType.DOT:
            tick_amount = stats.magic_attack * power / DOT_DIVISOR
            raw_damage = tick_amount
            if effects is not None and effects.duration:
                target_effects.append(
                    StatusEffect(
                        name=f"{skill.name} (DoT)",
                        description=f"Taking damage over time from {skill.name}",
                        duration=effects.duration,
                        type=DEBUFF,
                        tick=lambda: tick_amount,
                    )
                )
        elif skill.type == SkillType.SHIELD:
            if effects is not None and effects.stat_modifiers:
                self_effects.append(
                    StatusEffect(
                        name=f"{skill.name} Shield",
                        description=f"Protected by {skill.name}",
                        duration=effects.duration or DEFAULT_EFFECT_DURATION,
                        type=BUFF,
                        stat_modifiers=dict(effects.stat_modifiers),
                    )
                )
        elif skill.type == SkillType.LIFESTEAL:
            raw_damage = stats.attack * power
            apply_resistance = False
        else:
            logger.debug("Skill type %s has no direct combat effect", skill.type.value)

        damage = 0
        is_critical = False
        if raw_damage > 0:
            is_critical = self._roll_critical(attacker)
            if is_critical:
                raw_damage *= stats.crit_damage / 100
            defense = defender.stats.magic_defense if magical else defender.stats.defense
            raw_damage *= defense_factor(defense)
            if apply_resistance:
                raw_damage *= resistance_factor(defender.stats.resistance(skill.element))
            damage = max(1, math.floor(raw_damage))
            if skill.type == SkillType.LIFESTEAL:
                healing = math.floor(damage * LIFESTEAL_RATIO)

        message = self._message(attacker, defender, skill, damage, healing, is_critical)
        return CombatResult(
            damage=damage,
            healing=healing,
            is_critical=is_critical,
            message=message,
            target_effects=tuple(target_effects),
            self_effects=tuple(self_effects),
        )

    @staticmethod
    def _message(
        attacker: CombatEntity,
        defender: CombatEntity,
        skill: SpecialSkill,
        damage: int,
        healing: int,
        is_critical: bool,
    ) -> str:
        if damage > 0:
            crit = " (Critical Hit!)" if is_critical else ""
            drained = f" and drains {healing} health" if healing > 0 else ""
            return f"{attacker.name} uses {skill.name} on {defender.name} for {damage} damage{crit}{drained}!"
        if healing > 0:
            return f"{attacker.name} uses {skill.name} and heals for {healing} health!"
        return f"{attacker.name} uses {skill.name}!"
