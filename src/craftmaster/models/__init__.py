from .character import Character, CraftingSkill, SkillProgress, starting_character
from .enemies import EnemyCatalog, EnemyTemplate
from .equipment import Equipment
from .inventory import Inventory, InventoryEntry
from .items import EquipSlot, Item, ItemCatalog, ItemType, Rarity
from .recipes import Recipe, RecipeBook

__all__ = [
    "Character",
    "CraftingSkill",
    "SkillProgress",
    "starting_character",
    "EnemyCatalog",
    "EnemyTemplate",
    "Equipment",
    "Inventory",
    "InventoryEntry",
    "EquipSlot",
    "Item",
    "ItemCatalog",
    "ItemType",
    "Rarity",
    "Recipe",
    "RecipeBook",
]
