from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..errors import InventoryError

logger = logging.getLogger(__name__)


@dataclass
class InventoryEntry:
    item_id: str
    quantity: int = 1
    crafting_pattern: Optional[str] = None

    def __post_init__(self):
        if self.quantity < 0:
            raise InventoryError("Inventory quantity cannot be negative")


class Inventory:
    """
    Stack-based inventory keyed by (item id, crafting pattern).

    Items of the same id crafted with different grid patterns are kept as
    separate stacks. A stack that reaches zero is dropped.
    """

    def __init__(self, entries: Optional[List[InventoryEntry]] = None) -> None:
        self._entries: Dict[Tuple[str, Optional[str]], InventoryEntry] = {}
        for entry in entries or []:
            self.add(entry.item_id, entry.quantity, entry.crafting_pattern)

    def add(self, item_id: str, qty: int = 1, crafting_pattern: Optional[str] = None) -> None:
        if qty <= 0:
            return
        key = (item_id, crafting_pattern or None)
        entry = self._entries.get(key)
        if entry is None:
            self._entries[key] = InventoryEntry(item_id, qty, crafting_pattern or None)
        else:
            entry.quantity += qty

    def remove(self, item_id: str, qty: int = 1) -> None:
        """Remove qty of item_id, draining untagged stacks before patterned ones."""
        if qty <= 0:
            return
        if self.quantity(item_id) < qty:
            raise InventoryError(f"Item {item_id} not found or insufficient quantity")
        stacks = sorted(
            (e for e in self._entries.values() if e.item_id == item_id),
            key=lambda e: (e.crafting_pattern is not None, e.crafting_pattern or ""),
        )
        remaining = qty
        for entry in stacks:
            taken = min(entry.quantity, remaining)
            entry.quantity -= taken
            remaining -= taken
            if entry.quantity == 0:
                del self._entries[(entry.item_id, entry.crafting_pattern)]
            if remaining == 0:
                break

    def quantity(self, item_id: str) -> int:
        return sum(e.quantity for e in self._entries.values() if e.item_id == item_id)

    def has(self, item_id: str, qty: int = 1) -> bool:
        return self.quantity(item_id) >= qty

    def entries(self) -> List[InventoryEntry]:
        return [InventoryEntry(e.item_id, e.quantity, e.crafting_pattern) for e in self._entries.values()]

    def copy(self) -> "Inventory":
        return Inventory(self.entries())

    def __len__(self) -> int:
        return len(self._entries)
