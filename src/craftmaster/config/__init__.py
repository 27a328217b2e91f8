from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from importlib.resources import files as resource_files
from typing import Any, Dict, Optional, Tuple

import yaml

from ..errors import ConfigError

logger = logging.getLogger(__name__)

ENV_VAR = "CM_CONFIG"


@dataclass(frozen=True)
class CombatTuning:
    flee_chance: float = 0.5
    enemy_special_chance: float = 0.3
    enemy_status_chance: float = 0.1
    enemy_status_duration: int = 2
    enemy_status_names: Tuple[str, ...] = ("Poison", "Bleed", "Weakness")
    gold_per_level: int = 10
    experience_per_level: int = 20
    reward_variance: float = 0.5
    health_potion_id: str = "health_potion"
    health_potion_chance: float = 0.5
    mana_potion_id: str = "mana_potion"
    mana_potion_chance: float = 0.3
    defeat_restore_ratio: float = 0.1


@dataclass(frozen=True)
class CraftingTuning:
    base_success: int = 90
    quick_base_success: int = 80
    min_success: int = 5
    max_success: int = 95
    mana_potion_id: str = "mana_potion"
    mana_potion_restore: int = 25
    cursed_ring_id: str = "cursed_energy_ring"


@dataclass(frozen=True)
class EquipmentTuning:
    ring_slots: int = 2

    def __post_init__(self):
        if self.ring_slots < 1:
            raise ConfigError("equipment.ring_slots must be at least 1")


@dataclass(frozen=True)
class GrowthConfig:
    """Stat growth applied on each character level-up."""

    threshold_multiplier: float = 1.5
    max_health: int = 10
    max_magic_points: int = 5
    strength: int = 1
    speed: int = 1

    def __post_init__(self):
        if self.threshold_multiplier < 1:
            raise ConfigError("progression.threshold_multiplier must be at least 1")


@dataclass(frozen=True)
class EngineConfig:
    """
    Engine configuration.

    The packaged craftmaster/config/defaults.yaml mirrors these defaults.
    Sections:
      - combat: flee/enemy AI chances, reward scaling and drop table
      - crafting: success chance bounds and mana potion settings
      - equipment: ring slot capacity of new characters
      - progression: stat growth on level-up
    """

    combat: CombatTuning = field(default_factory=CombatTuning)
    crafting: CraftingTuning = field(default_factory=CraftingTuning)
    equipment: EquipmentTuning = field(default_factory=EquipmentTuning)
    progression: GrowthConfig = field(default_factory=GrowthConfig)

    @staticmethod
    def default() -> "EngineConfig":
        return EngineConfig()

    @staticmethod
    def load(path: Optional[str] = None) -> "EngineConfig":
        """Load configuration from YAML.

        Resolution order: explicit path, the CM_CONFIG env var, then the
        embedded defaults.yaml resource.
        """
        path = path or os.getenv(ENV_VAR)
        if path is None:
            text = resource_files("craftmaster.config").joinpath("defaults.yaml").read_text(encoding="utf-8")
            logger.debug("Loaded embedded engine config resource")
        else:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read()
            logger.info("Loaded engine config from %s", path)
        try:
            raw = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in engine config: {exc}") from exc
        return EngineConfig.from_dict(raw)

    @staticmethod
    def from_dict(raw: Dict[str, Any]) -> "EngineConfig":
        if not isinstance(raw, dict):
            raise ConfigError("Engine config must be a mapping")
        sections = {
            "combat": CombatTuning,
            "crafting": CraftingTuning,
            "equipment": EquipmentTuning,
            "progression": GrowthConfig,
        }
        unknown = set(raw) - set(sections)
        if unknown:
            raise ConfigError(f"Unknown config sections: {sorted(unknown)}")
        built = {}
        for name, cls in sections.items():
            built[name] = _build_section(name, cls, raw.get(name) or {})
        return EngineConfig(**built)


def _build_section(name: str, cls, values: Dict[str, Any]):
    if not isinstance(values, dict):
        raise ConfigError(f"Config section '{name}' must be a mapping")
    known = {f.name for f in fields(cls)}
    unknown = set(values) - known
    if unknown:
        raise ConfigError(f"Unknown keys in '{name}': {sorted(unknown)}")
    values = dict(values)
    for key, value in values.items():
        if isinstance(value, list):
            values[key] = tuple(value)
    return cls(**values)


__all__ = ["EngineConfig", "CombatTuning", "CraftingTuning", "EquipmentTuning", "GrowthConfig"]
