from __future__ import annotations

from typing import Iterator, List, Optional, Sequence

from ..errors import InventoryError
from ..models.inventory import Inventory
from .patterns import GRID_SIZE


class CraftingGrid:
    """Nine cells, each empty or holding one item id.

    Placing an ingredient takes one from the inventory; returning it puts
    it back.
    """

    def __init__(self, cells: Optional[Sequence[Optional[str]]] = None) -> None:
        cells = list(cells) if cells is not None else [None] * GRID_SIZE
        if len(cells) != GRID_SIZE:
            raise ValueError(f"Crafting grid must have {GRID_SIZE} cells, got {len(cells)}")
        self._cells: List[Optional[str]] = cells

    @property
    def cells(self) -> List[Optional[str]]:
        return list(self._cells)

    def items(self) -> List[str]:
        return [c for c in self._cells if c is not None]

    def is_empty(self) -> bool:
        return not self.items()

    def place(self, index: int, item_id: str, inventory: Inventory) -> Optional[str]:
        """Put one item_id from inventory in a cell. A displaced item goes back to inventory."""
        self._check(index)
        if not inventory.has(item_id):
            raise InventoryError(f"Item {item_id} not in inventory")
        inventory.remove(item_id, 1)
        displaced = self._cells[index]
        if displaced is not None:
            inventory.add(displaced, 1)
        self._cells[index] = item_id
        return displaced

    def move(self, source: int, target: int) -> None:
        """Swap two cells."""
        self._check(source)
        self._check(target)
        self._cells[source], self._cells[target] = self._cells[target], self._cells[source]

    def take(self, index: int, inventory: Inventory) -> Optional[str]:
        """Return a cell's item to inventory and empty the cell."""
        self._check(index)
        item_id = self._cells[index]
        if item_id is not None:
            inventory.add(item_id, 1)
            self._cells[index] = None
        return item_id

    def clear(self) -> None:
        self._cells = [None] * GRID_SIZE

    def copy(self) -> "CraftingGrid":
        return CraftingGrid(self._cells)

    def _check(self, index: int) -> None:
        if not 0 <= index < GRID_SIZE:
            raise IndexError(f"Grid index {index} out of range")

    def __iter__(self) -> Iterator[Optional[str]]:
        return iter(self._cells)

    def __len__(self) -> int:
        return GRID_SIZE

    def __getitem__(self, index: int) -> Optional[str]:
        return self._cells[index]
