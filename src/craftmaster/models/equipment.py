from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from ..errors import EquipError, InventoryError
from .inventory import Inventory
from .items import EquipSlot, Item

logger = logging.getLogger(__name__)

FIXED_SLOTS = (
    EquipSlot.HEAD,
    EquipSlot.CHEST,
    EquipSlot.LEGS,
    EquipSlot.FEET,
    EquipSlot.HANDS,
    EquipSlot.WEAPON,
    EquipSlot.OFFHAND,
    EquipSlot.NECK,
)


class Equipment:
    """
    Equipped item ids per slot. Fixed slots hold a single id or None; rings
    are a list with a fixed capacity.
    """

    def __init__(self, ring_slots: int = 2) -> None:
        if ring_slots < 1:
            raise ValueError("ring_slots must be at least 1")
        self._slots: Dict[EquipSlot, Optional[str]] = {slot: None for slot in FIXED_SLOTS}
        self._rings: List[Optional[str]] = [None] * ring_slots

    @property
    def ring_capacity(self) -> int:
        return len(self._rings)

    @property
    def rings(self) -> Tuple[Optional[str], ...]:
        return tuple(self._rings)

    def get(self, slot: EquipSlot, ring_index: int = 0) -> Optional[str]:
        if slot == EquipSlot.RINGS:
            return self._rings[ring_index]
        return self._slots[slot]

    def equipped(self) -> Iterator[Tuple[str, str]]:
        """Yield (slot key, item id) for every occupied slot. Rings are keyed rings_<n>."""
        for slot, item_id in self._slots.items():
            if item_id is not None:
                yield slot.value, item_id
        for idx, item_id in enumerate(self._rings):
            if item_id is not None:
                yield f"rings_{idx}", item_id

    def copy(self) -> "Equipment":
        clone = Equipment(ring_slots=len(self._rings))
        clone._slots = dict(self._slots)
        clone._rings = list(self._rings)
        return clone

    def equip(self, inventory: Inventory, item: Item) -> Optional[str]:
        """
        Move one `item` from inventory into its slot. Returns the id of the
        replaced item (already returned to inventory), or None.

        Rings take the first empty ring slot, otherwise replace ring 0.
        """
        if item.slot is None:
            raise EquipError(f"Item {item.id} is not equippable")
        if not inventory.has(item.id):
            raise InventoryError(f"Item {item.id} not in inventory")

        if item.slot == EquipSlot.RINGS:
            try:
                idx = self._rings.index(None)
            except ValueError:
                idx = 0
            replaced = self._rings[idx]
            self._rings[idx] = item.id
        else:
            replaced = self._slots[item.slot]
            self._slots[item.slot] = item.id

        inventory.remove(item.id, 1)
        if replaced is not None:
            inventory.add(replaced, 1)
        logger.debug("Equipped %s in %s (replaced=%s)", item.id, item.slot.value, replaced)
        return replaced

    def unequip(self, inventory: Inventory, slot: EquipSlot, ring_index: int = 0) -> str:
        """Clear a slot and return its item to inventory. Returns the item id."""
        if slot == EquipSlot.RINGS:
            if not 0 <= ring_index < len(self._rings):
                raise EquipError(f"Ring slot {ring_index} out of range")
            item_id = self._rings[ring_index]
            if item_id is None:
                raise EquipError(f"Ring slot {ring_index} is empty")
            self._rings[ring_index] = None
        else:
            item_id = self._slots[slot]
            if item_id is None:
                raise EquipError(f"Slot {slot.value} is empty")
            self._slots[slot] = None
        inventory.add(item_id, 1)
        logger.debug("Unequipped %s from %s", item_id, slot.value)
        return item_id
