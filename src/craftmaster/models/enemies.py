from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, Tuple

from ..errors import UnknownCatalogEntry


@dataclass(frozen=True)
class EnemyTemplate:
    """Fixed base stats an enemy combatant is built from."""

    id: str
    name: str
    level: int
    health: int
    magic_points: int
    attack: int
    defense: int
    magic_attack: int
    magic_defense: int
    speed: int
    skills: Tuple[str, ...] = ()

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "EnemyTemplate":
        stats = data["stats"]
        return EnemyTemplate(
            id=data["id"],
            name=data["name"],
            level=int(data["level"]),
            health=int(data["health"]),
            magic_points=int(data["magicPoints"]),
            attack=int(stats["attack"]),
            defense=int(stats["defense"]),
            magic_attack=int(stats["magicAttack"]),
            magic_defense=int(stats["magicDefense"]),
            speed=int(stats["speed"]),
            skills=tuple(data.get("skills", ())),
        )


class EnemyCatalog:
    def __init__(self, enemies: Iterable[EnemyTemplate] = ()) -> None:
        self._enemies: Dict[str, EnemyTemplate] = {e.id: e for e in enemies}

    def get(self, enemy_id: str) -> EnemyTemplate:
        try:
            return self._enemies[enemy_id]
        except KeyError:
            raise UnknownCatalogEntry("enemy", enemy_id) from None

    def __iter__(self) -> Iterator[EnemyTemplate]:
        return iter(self._enemies.values())

    def __len__(self) -> int:
        return len(self._enemies)
