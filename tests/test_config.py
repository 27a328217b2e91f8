import io
import logging

import pytest

from craftmaster.config import ENV_VAR, EngineConfig
from craftmaster.errors import ConfigError
from craftmaster.logging_config import LOGGER_NAME, configure_logging, resolve_level
from craftmaster.models import starting_character


def test_embedded_defaults_match_dataclass_defaults(monkeypatch):
    monkeypatch.delenv(ENV_VAR, raising=False)
    assert EngineConfig.load() == EngineConfig.default()


def test_partial_override_from_path(tmp_path):
    path = tmp_path / "tuning.yaml"
    path.write_text(
        "combat:\n"
        "  flee_chance: 0.25\n"
        "  enemy_status_names: [Burn]\n"
        "equipment:\n"
        "  ring_slots: 4\n"
    )
    config = EngineConfig.load(str(path))
    assert config.combat.flee_chance == 0.25
    assert config.combat.enemy_status_names == ("Burn",)
    assert config.combat.gold_per_level == 10
    assert config.equipment.ring_slots == 4
    assert config.crafting.mana_potion_restore == 25


def test_env_var_points_at_config(tmp_path, monkeypatch):
    path = tmp_path / "env.yaml"
    path.write_text("crafting:\n  max_success: 99\n")
    monkeypatch.setenv(ENV_VAR, str(path))
    assert EngineConfig.load().crafting.max_success == 99


@pytest.mark.parametrize(
    "raw",
    [
        {"marketplace": {}},
        {"combat": {"flee_odds": 0.1}},
        {"equipment": {"ring_slots": 0}},
        {"crafting": [1, 2]},
        [],
    ],
)
def test_invalid_config_rejected(raw):
    with pytest.raises(ConfigError):
        EngineConfig.from_dict(raw)


def test_invalid_yaml_rejected(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("combat: [unclosed\n")
    with pytest.raises(ConfigError):
        EngineConfig.load(str(path))


def test_ring_slots_size_new_characters(tmp_path):
    path = tmp_path / "rings.yaml"
    path.write_text("equipment:\n  ring_slots: 10\n")

    hero = starting_character(EngineConfig.load(str(path)))

    assert hero.equipment.ring_capacity == 10
    assert hero.equipment.rings == (None,) * 10
    assert starting_character().equipment.ring_capacity == 2


def test_progression_section_is_loaded(tmp_path):
    path = tmp_path / "growth.yaml"
    path.write_text("progression:\n  max_health: 20\n")
    growth = EngineConfig.load(str(path)).progression
    assert growth.max_health == 20
    assert growth.threshold_multiplier == 1.5
    with pytest.raises(ConfigError):
        EngineConfig.from_dict({"progression": {"threshold_multiplier": 0.5}})


@pytest.fixture
def engine_logger():
    logger = logging.getLogger(LOGGER_NAME)
    saved = (logger.level, list(logger.handlers), logger.propagate)
    yield logger
    logger.setLevel(saved[0])
    logger.handlers[:] = saved[1]
    logger.propagate = saved[2]


def test_configure_logging_targets_engine_namespace(engine_logger, monkeypatch):
    root_handlers = list(logging.getLogger().handlers)
    stream = io.StringIO()
    monkeypatch.setenv("CM_LOG_LEVEL", "debug")

    configure_logging(stream=stream)
    configure_logging(stream=stream)
    logging.getLogger("craftmaster.crafting.resolver").debug("Crafted %s", "axe")

    assert engine_logger.level == logging.DEBUG
    assert [h.get_name() for h in engine_logger.handlers].count(LOGGER_NAME) == 1
    assert logging.getLogger().handlers == root_handlers
    assert stream.getvalue().count("craftmaster.crafting.resolver: Crafted axe") == 1


@pytest.mark.parametrize(
    "value,expected",
    [(None, logging.WARNING), ("chatty", logging.WARNING), ("error", logging.ERROR)],
)
def test_log_level_env_var(monkeypatch, value, expected):
    if value is None:
        monkeypatch.delenv("CM_LOG_LEVEL", raising=False)
    else:
        monkeypatch.setenv("CM_LOG_LEVEL", value)
    assert resolve_level(logging.WARNING) == expected
