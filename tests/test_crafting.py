import pytest

from craftmaster.crafting import (
    CraftingControls,
    CraftingGrid,
    CraftingResolver,
    CraftStatus,
    DiscoveredRecipes,
    crafted_rarity,
    magic_cost,
    special_skill_chance,
)
from craftmaster.crafting.controls import grid_success_chance
from craftmaster.errors import InventoryError, UnknownCatalogEntry
from craftmaster.models import Character, CraftingSkill, Inventory, InventoryEntry, Rarity, Recipe, SkillProgress
from craftmaster.models import starting_character
from craftmaster.utils.random_provider import SequenceRandom


def row(*item_ids):
    return list(item_ids) + [None] * (9 - len(item_ids))


def resolver_for(items, recipes, values=(), discovered=None):
    return CraftingResolver(recipes, items, rng=SequenceRandom(values), discovered=discovered)


def with_cursed_ring(items, character):
    inv = Inventory([InventoryEntry("cursed_energy_ring", 1)])
    character.equipment.equip(inv, items.get("cursed_energy_ring"))
    return character


def test_recipe_matching_ignores_order(recipes):
    assert recipes.match(row("iron", "iron", "wood")).id == "sword"
    assert recipes.match([None, "wood", None, "iron", None, None, None, None, "iron"]).id == "sword"


def test_recipe_matching_requires_exact_multiset(recipes):
    assert recipes.match(row("iron", "wood")) is None
    assert recipes.match(row("iron", "iron", "wood", "wood")) is None
    assert recipes.match([None] * 9) is None


def test_success_chance_floors_at_five():
    recipe = Recipe(id="impossible", name="Impossible", inputs=("wood",), output="axe",
                    required_skills={CraftingSkill.METALWORKING: 100})
    novice = Character(name="Novice", skills={CraftingSkill.METALWORKING: SkillProgress(0, 0)})
    assert grid_success_chance(recipe, novice, CraftingControls()) == 5


def test_success_chance_caps_at_ninety_five(recipes):
    assert grid_success_chance(recipes.get("wooden_axe"), starting_character(), CraftingControls()) == 95


def test_success_chance_stability_and_curse(items, recipes):
    resolver = resolver_for(items, recipes)
    staff = recipes.get("staff")
    hero = starting_character()

    # skills 3+2 against 2+1 requirement: +10 over base, then stability 0 costs 25
    assert resolver.success_chance(staff, hero, CraftingControls(stability=0)) == 75
    # curse is ignored without the ring
    assert resolver.success_chance(staff, hero, CraftingControls(stability=0, curse=50)) == 75

    cursed = with_cursed_ring(items, starting_character())
    assert resolver.success_chance(staff, cursed, CraftingControls(stability=0, curse=50)) == 70


def test_magic_cost(items, recipes):
    resolver = resolver_for(items, recipes)
    staff = recipes.get("staff")
    controls = CraftingControls(magic=45, curse=35)

    assert magic_cost(staff, controls) == 10 + 10 + 3
    assert resolver.magic_cost(staff, starting_character(), controls) == 20
    assert resolver.magic_cost(staff, with_cursed_ring(items, starting_character()), controls) == 23


def test_controls_are_range_checked():
    with pytest.raises(ValueError):
        CraftingControls(magic=101)
    with pytest.raises(ValueError):
        CraftingControls(stability=-1)


def test_successful_craft(items, recipes):
    resolver = resolver_for(items, recipes, [0.5])
    hero = starting_character()
    inventory = Inventory()

    result = resolver.craft(hero, inventory, row("wood", "wood", "stone"))

    assert result.success
    assert result.status == CraftStatus.SUCCESS
    assert result.item_id == "axe"
    assert result.pattern == "linear"
    assert [(e.item_id, e.quantity, e.crafting_pattern) for e in result.inventory.entries()] == [
        ("axe", 1, "linear")
    ]
    assert result.character.skills[CraftingSkill.METALWORKING] == SkillProgress(3, 165)
    assert result.grid.is_empty()
    assert result.rarity == Rarity.UNCOMMON
    assert {s.id for s in result.special_skill_options} == {"firebolt", "ice_spike", "poison_blade"}
    # inputs untouched
    assert len(inventory) == 0
    assert hero.skills[CraftingSkill.METALWORKING].experience == 150


def test_failed_craft_still_costs_magic(items, recipes):
    resolver = resolver_for(items, recipes, [0.99])
    result = resolver.craft(starting_character(), Inventory(), row("wood", "wood", "crystal"))

    assert result.status == CraftStatus.FAILED
    assert result.character.magic_points == 40
    assert result.magic_spent == 10
    assert len(result.inventory) == 0
    assert result.grid.is_empty()
    assert result.character.skills[CraftingSkill.MAGICWORKING] == SkillProgress(2, 80)


def test_no_recipe_consumes_nothing(items, recipes):
    resolver = resolver_for(items, recipes)
    grid = row("stone")
    result = resolver.craft(starting_character(), Inventory(), grid)

    assert result.status == CraftStatus.NO_RECIPE
    assert result.grid.cells == grid
    assert result.character.magic_points == 50


def test_insufficient_magic_mutates_nothing(items, recipes):
    resolver = resolver_for(items, recipes)
    hero = starting_character()
    hero.magic_points = 5

    result = resolver.craft(hero, Inventory(), row("wood", "wood", "crystal"))

    assert result.status == CraftStatus.INSUFFICIENT_MAGIC
    assert result.character.magic_points == 5
    assert result.grid.items() == ["wood", "wood", "crystal"]


def test_craft_levels_up_skill(items, recipes):
    resolver = resolver_for(items, recipes, [0.0])
    hero = starting_character()
    hero.skills[CraftingSkill.METALWORKING] = SkillProgress(1, 90)

    result = resolver.craft(hero, Inventory(), row("wood", "wood", "stone"))

    assert result.character.skills[CraftingSkill.METALWORKING] == SkillProgress(2, 5)
    assert result.skill_level_ups[CraftingSkill.METALWORKING].to_level == 2


def test_secret_recipe_discovered_with_its_pattern(items, recipes):
    discovered = DiscoveredRecipes()
    resolver = resolver_for(items, recipes, [0.0], discovered=discovered)
    assert "cursed_energy_ring" not in {r.id for r in resolver.visible_recipes()}

    result = resolver.craft(starting_character(), Inventory(), row("iron", "cursed_energy", "cursed_energy"))

    assert result.success
    assert result.discovered
    assert "cursed_energy_ring" in discovered
    assert "cursed_energy_ring" in {r.id for r in resolver.visible_recipes()}


def test_secret_recipe_without_its_pattern_is_not_discovered(items, recipes):
    discovered = DiscoveredRecipes()
    resolver = resolver_for(items, recipes, [0.0], discovered=discovered)
    grid = ["iron", None, None, None, "cursed_energy", None, None, None, "cursed_energy"]

    result = resolver.craft(starting_character(), Inventory(), grid)

    assert result.success
    assert result.pattern == "diagonal"
    assert not result.discovered
    assert len(discovered) == 0


def test_discovery_is_append_if_absent():
    discovered = DiscoveredRecipes(["void_crystal"])
    assert discovered.add("void_crystal") is False
    assert discovered.add("phoenix_feather") is True
    assert discovered.ids() == ["void_crystal", "phoenix_feather"]


def test_crafted_rarity_thresholds():
    hero = starting_character()
    assert crafted_rarity(hero, CraftingControls(), []) == Rarity.UNCOMMON
    assert crafted_rarity(hero, CraftingControls(stability=0), []) == Rarity.COMMON
    master = Character(name="Master", skills={s: SkillProgress(10, 0) for s in CraftingSkill})
    assert crafted_rarity(master, CraftingControls(magic=100, stability=100), []) == Rarity.LEGENDARY


def test_special_skill_chance():
    hero = starting_character()
    assert special_skill_chance(hero, CraftingControls(), Rarity.RARE) == pytest.approx(45.0)
    assert special_skill_chance(hero, CraftingControls(magic=100, stability=100), Rarity.LEGENDARY) == 95


def test_quick_craft_success(items, recipes):
    resolver = resolver_for(items, recipes, [0.5])
    inventory = Inventory([InventoryEntry("wood", 2), InventoryEntry("stone", 1)])

    result = resolver.quick_craft(starting_character(), inventory, "wooden_axe")

    assert result.success
    assert result.chance == 85
    assert result.inventory.quantity("axe") == 1
    assert not result.inventory.has("wood")
    assert inventory.quantity("wood") == 2


def test_quick_craft_failure_uses_ingredients(items, recipes):
    resolver = resolver_for(items, recipes, [0.9])
    inventory = Inventory([InventoryEntry("wood", 2), InventoryEntry("stone", 1)])

    result = resolver.quick_craft(starting_character(), inventory, "wooden_axe")

    assert result.status == CraftStatus.FAILED
    assert len(result.inventory) == 0


def test_quick_craft_missing_ingredients(items, recipes):
    resolver = resolver_for(items, recipes)
    result = resolver.quick_craft(starting_character(), Inventory([InventoryEntry("wood", 1)]), "wooden_axe")
    assert result.status == CraftStatus.MISSING_INGREDIENTS
    assert result.inventory.quantity("wood") == 1


def test_quick_craft_chance_uses_optimal_controls(items, recipes):
    resolver = resolver_for(items, recipes)
    staff = recipes.get("staff")
    controls = CraftingControls(magic=55, stability=20)
    # +5 +5 for skills, +5 for magic within 10, -5 for stability 40 away
    assert resolver.quick_success_chance(staff, starting_character(), controls) == 90


def test_quick_craft_unknown_recipe_fails_fast(items, recipes):
    resolver = resolver_for(items, recipes)
    with pytest.raises(UnknownCatalogEntry):
        resolver.quick_craft(starting_character(), Inventory(), "philosophers_stone")


def test_mana_potion_restores_up_to_max(items, recipes):
    resolver = resolver_for(items, recipes)
    hero = starting_character()
    hero.magic_points = 40
    result = resolver.consume_mana_potion(hero, Inventory([InventoryEntry("mana_potion", 2)]))

    assert result.consumed
    assert result.restored == 10
    assert result.character.magic_points == 50
    assert result.inventory.quantity("mana_potion") == 1

    empty = resolver.consume_mana_potion(hero, Inventory())
    assert not empty.consumed


def test_grid_place_and_take():
    inventory = Inventory([InventoryEntry("wood", 1), InventoryEntry("iron", 1)])
    grid = CraftingGrid()

    grid.place(0, "wood", inventory)
    assert not inventory.has("wood")
    assert grid.place(0, "iron", inventory) == "wood"
    assert inventory.quantity("wood") == 1

    grid.move(0, 4)
    assert grid[4] == "iron"
    assert grid.take(4, inventory) == "iron"
    assert grid.is_empty()
    assert inventory.quantity("iron") == 1

    with pytest.raises(InventoryError):
        grid.place(1, "crystal", inventory)
    with pytest.raises(IndexError):
        grid.take(9, inventory)


@pytest.mark.parametrize("grid", [[None] * 9, row("wood", "iron"), row("wood", "wood", "stone")])
def test_explicit_recipe_must_match_the_grid(items, recipes, grid):
    resolver = resolver_for(items, recipes)
    hero = starting_character()

    result = resolver.craft(hero, Inventory(), grid, recipe=recipes.get("sword"))

    assert result.status == CraftStatus.NO_RECIPE
    assert result.grid.cells == grid
    assert result.character.magic_points == hero.magic_points
    assert len(result.inventory) == 0


def test_explicit_recipe_crafts_when_grid_matches(items, recipes):
    resolver = resolver_for(items, recipes, [0.5])
    result = resolver.craft(starting_character(), Inventory(), row("iron", "wood", "iron"), recipe=recipes.get("sword"))

    assert result.success
    assert result.item_id == "sword"
