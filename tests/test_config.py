"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from unotable.config import Config, RulesConfig, load_config


def test_defaults():
    config = Config()
    assert config.rules.player_count == 2
    assert config.rules.hand_size == 7
    assert config.rules.human_seats == [0]
    assert config.rules.draw_stacking_enabled is True
    assert config.rules.jump_in_enabled is False
    assert config.rules.uno_penalty == 2
    assert config.logging.level == "WARNING"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"player_count": 5},
        {"player_count": 1},
        {"player_count": 2, "human_seats": [2]},
        {"player_count": 3, "human_seats": [1, 1]},
    ],
)
def test_invalid_rules(kwargs):
    with pytest.raises(ValidationError):
        RulesConfig(**kwargs)


def test_is_computer():
    rules = RulesConfig(player_count=3, human_seats=[1])
    assert rules.is_computer(0)
    assert not rules.is_computer(1)


def test_load_config_from_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "rules:\n"
        "  player_count: 4\n"
        "  jump_in_enabled: true\n"
        "llm:\n"
        "  provider: groq\n"
        "  model: llama-3.1-8b-instant\n"
        "logging:\n"
        "  level: DEBUG\n"
    )
    config = load_config(path)
    assert config.rules.player_count == 4
    assert config.rules.jump_in_enabled is True
    assert config.llm.provider == "groq"
    assert config.llm.model == "llama-3.1-8b-instant"
    assert config.logging.level == "DEBUG"


def test_load_config_missing_or_empty(tmp_path):
    assert load_config(None) == Config()
    assert load_config(tmp_path / "nope.yaml") == Config()
    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    assert load_config(empty) == Config()


def test_load_config_rejects_bad_rules(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("rules:\n  player_count: 9\n")
    with pytest.raises(ValidationError):
        load_config(path)
