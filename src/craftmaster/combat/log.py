from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class LogCategory(Enum):
    PLAYER = "player"
    ENEMY = "enemy"
    SYSTEM = "system"
    LOOT = "loot"


@dataclass(frozen=True)
class CombatLogEntry:
    message: str
    timestamp: float
    category: LogCategory


class CombatLog:
    """In-memory combat log. Entries are also forwarded to standard logging."""

    def __init__(self, clock: Optional[Callable[[], float]] = None) -> None:
        self._clock = clock or time.time
        self._entries: List[CombatLogEntry] = []

    def add(self, message: str, category: LogCategory = LogCategory.SYSTEM) -> CombatLogEntry:
        entry = CombatLogEntry(message=message, timestamp=self._clock(), category=category)
        self._entries.append(entry)
        logger.debug("[%s] %s", category.value, message)
        return entry

    def entries(self) -> List[CombatLogEntry]:
        return list(self._entries)

    def messages(self) -> List[str]:
        return [e.message for e in self._entries]

    def clear(self) -> None:
        self._entries.clear()
