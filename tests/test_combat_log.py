from itertools import count

from craftmaster.combat.log import CombatLog, LogCategory


def test_entries_are_timestamped_and_categorised():
    ticks = count(100)
    log = CombatLog(clock=lambda: next(ticks))

    log.add("Combat started with Forest Goblin!")
    log.add("Gained 30 gold and 60 experience!", LogCategory.LOOT)

    entries = log.entries()
    assert [(e.timestamp, e.category) for e in entries] == [(100, LogCategory.SYSTEM), (101, LogCategory.LOOT)]
    assert log.messages()[1] == "Gained 30 gold and 60 experience!"


def test_entries_returns_a_copy_and_clear_empties():
    log = CombatLog(clock=lambda: 0.0)
    log.add("Failed to flee!")
    log.entries().clear()
    assert len(log.entries()) == 1

    log.clear()
    assert log.messages() == []
