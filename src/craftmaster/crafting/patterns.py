from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple

from ..models.items import ItemType

logger = logging.getLogger(__name__)

GRID_SIZE = 9


class PatternType(Enum):
    LINEAR = "linear"
    DIAGONAL = "diagonal"
    SQUARE = "square"
    CROSS = "cross"
    TRIANGLE = "triangle"
    CIRCLE = "circle"
    L_SHAPE = "l_shape"


def _sets(*groups: Sequence[int]) -> Tuple[FrozenSet[int], ...]:
    return tuple(frozenset(g) for g in groups)


# Cell indices run row-major:
#   0 1 2
#   3 4 5
#   6 7 8
PATTERN_CELLS: Dict[PatternType, Tuple[FrozenSet[int], ...]] = {
    PatternType.LINEAR: _sets((0, 1, 2), (3, 4, 5), (6, 7, 8), (0, 3, 6), (1, 4, 7), (2, 5, 8)),
    PatternType.DIAGONAL: _sets((0, 4, 8), (2, 4, 6)),
    PatternType.SQUARE: _sets((0, 1, 3, 4), (1, 2, 4, 5), (3, 4, 6, 7), (4, 5, 7, 8)),
    PatternType.CROSS: _sets((1, 3, 4, 5, 7)),
    PatternType.TRIANGLE: _sets((0, 1, 2, 4), (0, 3, 6, 4), (2, 5, 8, 4), (6, 7, 8, 4)),
    # center is ignored
    PatternType.CIRCLE: _sets((0, 1, 2, 3, 5, 6, 7, 8)),
    PatternType.L_SHAPE: _sets((0, 3, 6, 7), (2, 5, 8, 7), (0, 3, 6, 1), (2, 5, 8, 1)),
}


@dataclass(frozen=True)
class PatternBonus:
    pattern: PatternType
    item_type: ItemType
    stat_bonus: Mapping[str, int]
    rarity_boost: float
    description: str


PATTERN_BONUSES: Tuple[PatternBonus, ...] = (
    PatternBonus(PatternType.LINEAR, ItemType.WEAPON, {"Attack": 5, "Damage": 10}, 1,
                 "A straight line of materials focuses striking power"),
    PatternBonus(PatternType.CROSS, ItemType.WEAPON, {"Crit Chance": 5, "Crit Damage": 15}, 2,
                 "A cross arrangement sharpens critical strikes"),
    PatternBonus(PatternType.DIAGONAL, ItemType.WEAPON, {"Speed": 3, "Attack": 3}, 1.5,
                 "A diagonal flow makes the weapon light and quick"),
    PatternBonus(PatternType.SQUARE, ItemType.ARMOR, {"Defense": 8, "Health": 15}, 1.5,
                 "A solid block of materials hardens the armor"),
    PatternBonus(PatternType.CIRCLE, ItemType.ARMOR, {"Magic Defense": 10, "Elemental Resistance": 5}, 2,
                 "A closed ring wards off magic"),
    PatternBonus(PatternType.TRIANGLE, ItemType.ACCESSORY, {"Magic Power": 8, "MP Regeneration": 3}, 1.5,
                 "A triangle channels arcane energy"),
    PatternBonus(PatternType.LINEAR, ItemType.POTION, {"Effect Strength": 15, "Duration": 10}, 1,
                 "Ingredients in a line blend evenly"),
)


@dataclass(frozen=True)
class PatternMatch:
    pattern: PatternType
    cells: FrozenSet[int]


@dataclass(frozen=True)
class GridAnalysis:
    matches: Tuple[PatternMatch, ...] = ()
    bonuses: Tuple[PatternBonus, ...] = ()
    highlights: Mapping[int, Tuple[str, ...]] = field(default_factory=dict)

    @property
    def patterns(self) -> List[PatternType]:
        return [m.pattern for m in self.matches]

    @property
    def tag(self) -> Optional[str]:
        """Comma-joined pattern names recorded on crafted items, or None."""
        if not self.matches:
            return None
        return ",".join(m.pattern.value for m in self.matches)


class CraftingGridAnalyzer:
    """Detect geometric patterns of filled cells on the 3x3 crafting grid."""

    def __init__(self, bonuses: Sequence[PatternBonus] = PATTERN_BONUSES) -> None:
        self.bonuses = tuple(bonuses)

    @staticmethod
    def filled(grid: Sequence[Optional[str]]) -> FrozenSet[int]:
        if len(grid) != GRID_SIZE:
            raise ValueError(f"Crafting grid must have {GRID_SIZE} cells, got {len(grid)}")
        return frozenset(i for i, cell in enumerate(grid) if cell is not None)

    def detect(self, grid: Sequence[Optional[str]]) -> List[PatternMatch]:
        filled = self.filled(grid)
        matches = []
        for pattern, cell_sets in PATTERN_CELLS.items():
            hit = [cells for cells in cell_sets if cells <= filled]
            if hit:
                matches.append(PatternMatch(pattern, frozenset().union(*hit)))
        return matches

    def bonuses_for(self, matches: Sequence[PatternMatch], item_type: Optional[ItemType]) -> List[PatternBonus]:
        found = {m.pattern for m in matches}
        return [b for b in self.bonuses if b.item_type == item_type and b.pattern in found]

    @staticmethod
    def highlights(matches: Sequence[PatternMatch]) -> Dict[int, Tuple[str, ...]]:
        cells: Dict[int, List[str]] = {}
        for match in matches:
            for idx in sorted(match.cells):
                cells.setdefault(idx, []).append(match.pattern.value)
        return {idx: tuple(names) for idx, names in sorted(cells.items())}

    def analyze(self, grid: Sequence[Optional[str]], item_type: Optional[ItemType] = None) -> GridAnalysis:
        matches = self.detect(grid)
        analysis = GridAnalysis(
            matches=tuple(matches),
            bonuses=tuple(self.bonuses_for(matches, item_type)),
            highlights=self.highlights(matches),
        )
        logger.debug("Grid patterns: %s", [p.value for p in analysis.patterns])
        return analysis
