import pytest

from craftmaster.crafting.patterns import CraftingGridAnalyzer, PatternType
from craftmaster.models import ItemType


def grid_with(cells, item="wood"):
    return [item if i in cells else None for i in range(9)]


analyzer = CraftingGridAnalyzer()


def names(grid):
    return {m.pattern for m in analyzer.detect(grid)}


def test_top_row_is_linear_only():
    assert names(grid_with({0, 1, 2})) == {PatternType.LINEAR}


def test_empty_grid_matches_nothing():
    assert names([None] * 9) == set()


@pytest.mark.parametrize(
    "cells,expected",
    [
        ({0, 4, 8}, PatternType.DIAGONAL),
        ({4, 5, 7, 8}, PatternType.SQUARE),
        ({1, 3, 4, 5, 7}, PatternType.CROSS),
        ({0, 3, 6, 4}, PatternType.TRIANGLE),
        ({0, 1, 2, 3, 5, 6, 7, 8}, PatternType.CIRCLE),
        ({2, 5, 8, 1}, PatternType.L_SHAPE),
    ],
)
def test_each_pattern_is_detected(cells, expected):
    assert expected in names(grid_with(cells))


def test_circle_ignores_centre():
    with_centre = names(grid_with(set(range(9))))
    assert with_centre == set(PatternType)


def test_cross_needs_every_arm():
    assert PatternType.CROSS not in names(grid_with({1, 3, 4, 5}))


def test_bonuses_filtered_by_item_type():
    grid = grid_with({0, 1, 2, 4, 7})  # top row + middle column, with the centre
    weapon = analyzer.analyze(grid, ItemType.WEAPON)
    potion = analyzer.analyze(grid, ItemType.POTION)

    assert [b.item_type for b in weapon.bonuses] == [ItemType.WEAPON]
    assert weapon.bonuses[0].pattern == PatternType.LINEAR
    assert dict(potion.bonuses[0].stat_bonus) == {"Effect Strength": 15, "Duration": 10}
    assert analyzer.analyze(grid, None).bonuses == ()


def test_highlights_and_tag():
    analysis = analyzer.analyze(grid_with({0, 1, 2, 4, 8}))
    assert analysis.tag == "linear,diagonal,triangle"
    assert analysis.highlights[0] == ("linear", "diagonal", "triangle")
    assert analysis.highlights[8] == ("diagonal",)
    assert 3 not in analysis.highlights


def test_grid_size_is_checked():
    with pytest.raises(ValueError):
        analyzer.detect(["wood"] * 4)
