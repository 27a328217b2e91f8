from .controls import CraftingControls, crafted_rarity, magic_cost, special_skill_chance
from .discovery import DiscoveredRecipes
from .grid import CraftingGrid
from .patterns import PATTERN_BONUSES, CraftingGridAnalyzer, GridAnalysis, PatternBonus, PatternType
from .resolver import CraftingResolver, CraftResult, CraftStatus, PotionResult

__all__ = [
    "CraftingControls",
    "crafted_rarity",
    "magic_cost",
    "special_skill_chance",
    "DiscoveredRecipes",
    "CraftingGrid",
    "PATTERN_BONUSES",
    "CraftingGridAnalyzer",
    "GridAnalysis",
    "PatternBonus",
    "PatternType",
    "CraftingResolver",
    "CraftResult",
    "CraftStatus",
    "PotionResult",
]
