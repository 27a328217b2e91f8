import json

import pytest

from craftmaster.data import load_enemies, load_items, load_recipes, validate
from craftmaster.errors import CatalogValidationError, UnknownCatalogEntry
from craftmaster.models import EquipSlot, ItemType, Rarity


def test_bundled_catalogs_load(items, recipes, enemies):
    assert len(recipes) == 14
    assert len(enemies) == 3
    assert "shadow_blade" in items


def test_recipes_reference_known_items(items, recipes):
    for recipe in recipes:
        assert recipe.output in items, recipe.id
        for ingredient in recipe.inputs:
            assert ingredient in items, (recipe.id, ingredient)


def test_secret_recipes_declare_a_pattern(recipes):
    secrets = [r for r in recipes if r.is_secret]
    assert len(secrets) == 6
    assert all(r.pattern_type for r in secrets)


def test_item_fields_are_parsed(items):
    ring = items.get("cursed_energy_ring")
    assert ring.slot == EquipSlot.RINGS
    assert ring.stats == {"Magic Power": 5, "Health": -10}
    assert ring.equippable

    staff = items.get("staff")
    assert staff.item_type == ItemType.WEAPON
    assert staff.special_ability == "firebolt"

    assert not items.get("wood").equippable
    assert items.get("wood").rarity == Rarity.COMMON


def test_goblin_template(enemies):
    goblin = enemies.get("goblin")
    assert goblin.name == "Forest Goblin"
    assert (goblin.level, goblin.health, goblin.magic_points) == (3, 50, 20)
    assert (goblin.attack, goblin.defense, goblin.magic_attack, goblin.magic_defense, goblin.speed) == (
        12, 8, 5, 5, 15,
    )
    assert goblin.skills == ("poison_blade",)


@pytest.mark.parametrize(
    "lookup",
    [
        lambda items, recipes, enemies: items.get("excalibur"),
        lambda items, recipes, enemies: recipes.get("excalibur"),
        lambda items, recipes, enemies: enemies.get("dragon"),
    ],
)
def test_unknown_ids_raise(lookup, items, recipes, enemies):
    with pytest.raises(UnknownCatalogEntry):
        lookup(items, recipes, enemies)


def test_invalid_catalog_reports_every_error():
    data = [
        {"id": "wood", "name": "Wood", "type": "timber"},
        {"id": "Bad Id", "name": "", "type": "ingredient", "colour": "red"},
    ]
    with pytest.raises(CatalogValidationError) as exc:
        validate("items", data)
    assert len(exc.value.errors) >= 4
    report = exc.value.to_human()
    assert report.startswith("Catalog 'items' failed validation")
    assert " - at 0/type:" in report


def test_load_from_path(tmp_path):
    path = tmp_path / "enemies.json"
    path.write_text(json.dumps([
        {"id": "rat", "name": "Giant Rat", "level": 1, "health": 10, "magicPoints": 0,
         "stats": {"attack": 2, "defense": 1, "magicAttack": 0, "magicDefense": 0, "speed": 3}},
    ]))
    catalog = load_enemies(str(path))
    assert [e.id for e in catalog] == ["rat"]
    assert catalog.get("rat").skills == ()


def test_load_from_path_validates(tmp_path):
    path = tmp_path / "recipes.json"
    path.write_text(json.dumps([{"id": "axe", "name": "Axe", "output": "axe"}]))
    with pytest.raises(CatalogValidationError):
        load_recipes(str(path))


def test_loaders_return_fresh_catalogs():
    assert load_items() is not load_items()
