from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import List, Tuple

from .entities import CombatEntity
from .log import LogCategory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusTick:
    """Entity after one round of status processing, plus the log lines it produced."""

    entity: CombatEntity
    messages: Tuple[Tuple[str, LogCategory], ...] = ()


def process_status_effects(
    entity: CombatEntity, damage_category: LogCategory = LogCategory.SYSTEM
) -> StatusTick:
    """Apply tick damage and advance durations for every active effect.

    Effects whose duration drops to 0 are removed. Health never goes below 0.
    `damage_category` tags the damage lines (the side credited with the damage).
    """
    if not entity.status_effects:
        return StatusTick(entity)

    health = entity.health
    kept = []
    messages: List[Tuple[str, LogCategory]] = []
    for effect in entity.status_effects:
        if effect.tick is not None:
            damage = max(0, math.floor(effect.tick()))
            health -= damage
            messages.append((f"{entity.name} takes {damage} damage from {effect.name}!", damage_category))
        remaining = effect.duration - 1
        if remaining > 0:
            kept.append(replace(effect, duration=remaining))
        else:
            messages.append((f"{effect.name} has worn off from {entity.name}!", LogCategory.SYSTEM))

    updated = replace(entity, health=max(0, health), status_effects=tuple(kept))
    logger.debug(
        "%s status tick: health %d -> %d, %d effects left", entity.name, entity.health, updated.health, len(kept)
    )
    return StatusTick(updated, tuple(messages))
