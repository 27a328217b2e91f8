from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional

from ..errors import UnknownCatalogEntry

logger = logging.getLogger(__name__)


class ItemType(Enum):
    INGREDIENT = "ingredient"
    WEAPON = "weapon"
    ARMOR = "armor"
    POTION = "potion"
    TOOL = "tool"
    MAGICAL = "magical"
    ACCESSORY = "accessory"
    CRAFTED = "crafted"


class Rarity(Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"
    MYTHIC = "mythic"

    @property
    def rank(self) -> int:
        return _RARITY_ORDER.index(self)

    def __lt__(self, other: "Rarity") -> bool:
        if not isinstance(other, Rarity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: "Rarity") -> bool:
        if not isinstance(other, Rarity):
            return NotImplemented
        return self.rank <= other.rank


_RARITY_ORDER = list(Rarity)


class EquipSlot(Enum):
    HEAD = "head"
    CHEST = "chest"
    LEGS = "legs"
    FEET = "feet"
    HANDS = "hands"
    WEAPON = "weapon"
    OFFHAND = "offhand"
    NECK = "neck"
    RINGS = "rings"


@dataclass(frozen=True)
class Item:
    """
    Immutable catalog entry. Equippable items carry a slot; stats map a
    display stat name ("Attack", "Fire Resistance", ...) to a signed bonus.
    """

    id: str
    name: str
    item_type: ItemType
    rarity: Rarity = Rarity.COMMON
    description: str = ""
    stats: Mapping[str, float] = field(default_factory=dict)
    slot: Optional[EquipSlot] = None
    special_ability: Optional[str] = None
    magic_value: Optional[int] = None

    @property
    def equippable(self) -> bool:
        return self.slot is not None

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Item":
        slot = data.get("slot")
        return Item(
            id=data["id"],
            name=data["name"],
            item_type=ItemType(data["type"]),
            rarity=Rarity(data.get("rarity", "common")),
            description=data.get("description", ""),
            stats=dict(data.get("stats") or {}),
            slot=EquipSlot(slot) if slot else None,
            special_ability=data.get("specialAbility"),
            magic_value=data.get("magicValue"),
        )


class ItemCatalog:
    """Read-only lookup of items by id. Unknown ids raise UnknownCatalogEntry."""

    def __init__(self, items: Iterable[Item] = ()) -> None:
        self._items: Dict[str, Item] = {}
        for item in items:
            self.register(item)

    def register(self, item: Item) -> None:
        if item.id in self._items:
            logger.warning("Overwriting item definition for id=%s", item.id)
        self._items[item.id] = item

    def get(self, item_id: str) -> Item:
        try:
            return self._items[item_id]
        except KeyError:
            raise UnknownCatalogEntry("item", item_id) from None

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)
