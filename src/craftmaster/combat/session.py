from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Tuple

from ..config import EngineConfig
from ..models.character import Character
from ..models.enemies import EnemyTemplate
from ..models.inventory import Inventory
from ..models.items import ItemCatalog
from ..progression.leveling import LevelUpEvent, add_character_experience
from ..utils.random_provider import RandomProvider
from .damage import CombatResult, DamageResolver
from .entities import DEBUFF, CombatEntity, CombatStats, StatusEffect
from .log import CombatLog, LogCategory
from .skills import SpecialSkill, enemy_skill
from .stats import StatAggregator, equipped_items
from .status import StatusTick, process_status_effects

logger = logging.getLogger(__name__)


class CombatState(Enum):
    IDLE = "idle"
    PLAYER_TURN = "player_turn"
    ENEMY_TURN = "enemy_turn"
    VICTORY = "victory"
    DEFEAT = "defeat"


class ActionType(Enum):
    ATTACK = "attack"
    SPECIAL = "special"
    FLEE = "flee"


@dataclass(frozen=True)
class CombatAction:
    name: str
    type: ActionType
    skill: Optional[SpecialSkill] = None


ATTACK = CombatAction("Attack", ActionType.ATTACK)
FLEE = CombatAction("Flee", ActionType.FLEE)


@dataclass(frozen=True)
class Rewards:
    gold: int
    experience: int
    items: Tuple[Tuple[str, int], ...] = ()


@dataclass(frozen=True)
class CombatUpdate:
    """State the caller should persist once a combat ends."""

    outcome: str
    character: Character
    inventory: Inventory
    level_up: Optional[LevelUpEvent] = None


def build_enemy(template: EnemyTemplate) -> CombatEntity:
    stats = CombatStats(
        attack=template.attack,
        defense=template.defense,
        magic_attack=template.magic_attack,
        magic_defense=template.magic_defense,
        speed=template.speed,
        special_skills=tuple(enemy_skill(skill_id) for skill_id in template.skills),
    )
    return CombatEntity(
        name=template.name,
        level=template.level,
        health=template.health,
        max_health=template.health,
        magic_points=template.magic_points,
        max_magic_points=template.magic_points,
        stats=stats,
    )


def defeat_restore(maximum: int, ratio: float = 0.1) -> int:
    return max(1, math.floor(maximum * ratio))


class CombatSession:
    """
    Turn-based fight between the player's character and one enemy.

    The session copies the character and inventory it is given; results are
    handed back through CombatUpdate (collect_rewards on victory, `update`
    after a defeat). Actions made while the required entities are missing or
    in the wrong state are ignored.

    With `auto_advance` every enemy turn, including an opening one won on
    initiative, runs as soon as it begins, so callers only ever see the
    player's turn or a finished fight.
    """

    def __init__(
        self,
        character: Character,
        inventory: Inventory,
        items: ItemCatalog,
        config: Optional[EngineConfig] = None,
        rng=None,
        aggregator: Optional[StatAggregator] = None,
        on_combat_end: Optional[Callable[[str], None]] = None,
        auto_advance: bool = False,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.character = character.copy()
        self.inventory = inventory.copy()
        self.items = items
        self.config = config or EngineConfig.default()
        self.rng = rng or RandomProvider()
        self.resolver = DamageResolver(self.rng)
        self.aggregator = aggregator or StatAggregator()
        self.on_combat_end = on_combat_end
        self.auto_advance = auto_advance
        self.log = CombatLog(clock)

        self.state = CombatState.IDLE
        self.player: Optional[CombatEntity] = None
        self.enemy: Optional[CombatEntity] = None
        self.available_actions: List[CombatAction] = []
        self.rewards: Optional[Rewards] = None
        self.update: Optional[CombatUpdate] = None
        self.turn = 0

    # Setup

    def start(self, template: EnemyTemplate) -> CombatState:
        self.end()
        self.log.clear()
        self.update = None
        stats = self.aggregator.aggregate(self.character, equipped_items(self.character.equipment, self.items))
        self.player = CombatEntity(
            name=self.character.name,
            level=self.character.level,
            health=self.character.health,
            max_health=self.character.max_health,
            magic_points=self.character.magic_points,
            max_magic_points=self.character.max_magic_points,
            stats=stats,
        )
        self.enemy = build_enemy(template)
        player_first = self.player.stats.speed >= self.enemy.stats.speed
        self.state = CombatState.PLAYER_TURN if player_first else CombatState.ENEMY_TURN
        self.log.add(f"Combat started with {template.name}!", LogCategory.SYSTEM)
        self._refresh_actions()
        logger.info("Combat started: %s vs %s (%s first)", self.player.name, template.name,
                    "player" if player_first else "enemy")
        if self.auto_advance and not player_first:
            self.process_enemy_turn()
        return self.state

    def end(self) -> None:
        """Reset to idle and drop all per-combat state except the log."""
        self.state = CombatState.IDLE
        self.player = None
        self.enemy = None
        self.available_actions = []
        self.rewards = None
        self.turn = 0

    def _refresh_actions(self) -> None:
        if self.player is None:
            self.available_actions = []
            return
        actions = [ATTACK]
        for skill in self.player.stats.special_skills:
            if self.player.magic_points >= skill.mana_cost:
                actions.append(CombatAction(skill.name, ActionType.SPECIAL, skill))
        actions.append(FLEE)
        self.available_actions = actions

    # Player turn

    def execute_player_action(self, action: CombatAction) -> Optional[CombatResult]:
        if self.state != CombatState.PLAYER_TURN or self.player is None or self.enemy is None:
            logger.debug("Ignoring player action %s in state %s", action.name, self.state.value)
            return None

        result: Optional[CombatResult] = None
        if action.type == ActionType.ATTACK:
            result = self.resolver.basic_attack(self.player, self.enemy)
            self.enemy = self.enemy.take_damage(result.damage)
            self.log.add(result.message, LogCategory.PLAYER)
        elif action.type == ActionType.SPECIAL:
            skill = action.skill
            if skill is None:
                return None
            if self.player.magic_points < skill.mana_cost:
                self.log.add("Not enough magic points!", LogCategory.SYSTEM)
                return None
            result = self.resolver.special_skill(self.player, self.enemy, skill)
            self.enemy, self.player = self._apply(result, target=self.enemy, caster=self.player)
            self.player = self.player.spend_mana(skill.mana_cost)
            self.log.add(result.message, LogCategory.PLAYER)
        elif action.type == ActionType.FLEE:
            if self.rng.random() < self.config.combat.flee_chance:
                self.log.add("You successfully fled from combat!", LogCategory.SYSTEM)
                logger.info("%s fled from combat", self.character.name)
                self.end()
                return None
            self.log.add("Failed to flee!", LogCategory.SYSTEM)

        if self.enemy.is_defeated:
            self._handle_victory()
            return result

        self.state = CombatState.ENEMY_TURN
        self.turn += 1
        if self.auto_advance:
            self.process_enemy_turn()
        return result

    @staticmethod
    def _apply(
        result: CombatResult, target: CombatEntity, caster: CombatEntity
    ) -> Tuple[CombatEntity, CombatEntity]:
        target = target.take_damage(result.damage)
        for effect in result.target_effects:
            target = target.with_status(effect)
        caster = caster.heal(result.healing)
        for effect in result.self_effects:
            caster = caster.with_status(effect)
        return target, caster

    # Enemy turn

    def process_enemy_turn(self) -> Optional[CombatResult]:
        if self.state != CombatState.ENEMY_TURN or self.player is None or self.enemy is None:
            return None

        tick = process_status_effects(self.enemy, damage_category=LogCategory.PLAYER)
        self._record(tick)
        self.enemy = tick.entity
        if self.enemy.is_defeated:
            self._handle_victory()
            return None

        tuning = self.config.combat
        skills = self.enemy.stats.special_skills
        if (
            skills
            and self.enemy.magic_points >= skills[0].mana_cost
            and self.rng.random() < tuning.enemy_special_chance
        ):
            skill = skills[0]
            result = self.resolver.special_skill(self.enemy, self.player, skill)
            self.player, self.enemy = self._apply(result, target=self.player, caster=self.enemy)
            self.enemy = self.enemy.spend_mana(skill.mana_cost)
        else:
            result = self.resolver.basic_attack(self.enemy, self.player)
            if self.rng.random() < tuning.enemy_status_chance:
                result = self._with_random_status(result)
            self.player, self.enemy = self._apply(result, target=self.player, caster=self.enemy)
        self.log.add(result.message, LogCategory.ENEMY)

        if self.player.is_defeated:
            self._handle_defeat()
            return result

        tick = process_status_effects(self.player, damage_category=LogCategory.ENEMY)
        self._record(tick)
        self.player = tick.entity
        if self.player.is_defeated:
            self._handle_defeat()
            return result

        self.state = CombatState.PLAYER_TURN
        self.turn += 1
        self._refresh_actions()
        return result

    def _with_random_status(self, result: CombatResult) -> CombatResult:
        tuning = self.config.combat
        name = self.rng.choice(list(tuning.enemy_status_names))
        tick_damage = math.floor(self.enemy.level * 1.5)
        effect = StatusEffect(
            name=name,
            description=f"Suffering from {name.lower()}",
            duration=tuning.enemy_status_duration,
            type=DEBUFF,
            tick=lambda: tick_damage,
        )
        return replace(
            result,
            message=f"{result.message} The attack causes {name.lower()}!",
            target_effects=result.target_effects + (effect,),
        )

    def _record(self, tick: StatusTick) -> None:
        for message, category in tick.messages:
            self.log.add(message, category)

    # Outcomes

    def _handle_victory(self) -> None:
        tuning = self.config.combat
        level = self.enemy.level
        gold = math.floor(level * tuning.gold_per_level * (1 + self.rng.random() * tuning.reward_variance))
        experience = math.floor(
            level * tuning.experience_per_level * (1 + self.rng.random() * tuning.reward_variance)
        )
        drops = []
        if self.rng.random() < tuning.health_potion_chance:
            drops.append((tuning.health_potion_id, 1))
        if self.rng.random() < tuning.mana_potion_chance:
            drops.append((tuning.mana_potion_id, 1))

        self.rewards = Rewards(gold=gold, experience=experience, items=tuple(drops))
        self.state = CombatState.VICTORY
        self.available_actions = []
        self.log.add(f"You defeated {self.enemy.name}!", LogCategory.SYSTEM)
        self.log.add(f"Gained {gold} gold and {experience} experience!", LogCategory.LOOT)
        for item_id, qty in drops:
            self.log.add(f"Received {item_id} x{qty}", LogCategory.LOOT)
        logger.info("Victory over %s: %s", self.enemy.name, self.rewards)

    def _handle_defeat(self) -> None:
        ratio = self.config.combat.defeat_restore_ratio
        character = self.character.copy()
        character.health = defeat_restore(character.max_health, ratio)
        character.magic_points = defeat_restore(character.max_magic_points, ratio)
        self.character = character
        self.state = CombatState.DEFEAT
        self.available_actions = []
        self.update = CombatUpdate("defeat", character.copy(), self.inventory.copy())
        self.log.add("You have been defeated!", LogCategory.SYSTEM)
        logger.info("%s was defeated by %s", character.name, self.enemy.name)
        if self.on_combat_end:
            self.on_combat_end("defeat")

    def collect_rewards(self) -> Optional[CombatUpdate]:
        """Apply pending rewards, end the session and return the new character and inventory."""
        if self.state != CombatState.VICTORY or self.rewards is None:
            return None
        character = self.character.copy()
        if self.player is not None:
            character.set_health(self.player.health)
            character.set_magic_points(self.player.magic_points)
        character.gold += self.rewards.gold
        level_up = add_character_experience(character, self.rewards.experience, self.config.progression)
        if level_up is not None:
            self.log.add(f"{character.name} leveled up to level {level_up.to_level}!", LogCategory.SYSTEM)

        inventory = self.inventory.copy()
        for item_id, qty in self.rewards.items:
            inventory.add(item_id, qty)

        self.character = character
        self.inventory = inventory
        self.update = CombatUpdate("victory", character.copy(), inventory.copy(), level_up)
        self.end()
        if self.on_combat_end:
            self.on_combat_end("victory")
        return self.update
