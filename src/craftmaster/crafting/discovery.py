from __future__ import annotations

import logging
from typing import Iterable, Iterator, List

logger = logging.getLogger(__name__)


class DiscoveredRecipes:
    """Ids of secret recipes the player has found. Adding is append-if-absent."""

    def __init__(self, ids: Iterable[str] = ()) -> None:
        self._ids: List[str] = []
        for recipe_id in ids:
            self.add(recipe_id)

    def add(self, recipe_id: str) -> bool:
        if recipe_id in self._ids:
            return False
        self._ids.append(recipe_id)
        logger.info("Discovered secret recipe %s", recipe_id)
        return True

    def ids(self) -> List[str]:
        return list(self._ids)

    def __contains__(self, recipe_id: object) -> bool:
        return recipe_id in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def __len__(self) -> int:
        return len(self._ids)
