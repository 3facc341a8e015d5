# tests/test_config.py
import os

import pytest

from thunee_engine.config import (
    GameConfig,
    config_to_dict,
    dict_to_config,
    load_config_from_env,
    preset,
)


def test_presets():
    assert preset("standard") == GameConfig()
    basic = preset("basic")
    assert not basic.enable_royals and not basic.enable_jodi and not basic.enable_kunuck
    strict = preset("strict")
    assert strict.enable_call_and_loss and strict.enable_first_third_only_jodi_calls
    with pytest.raises(ValueError):
        preset("house")


def test_config_is_validated_and_immutable():
    with pytest.raises(ValueError):
        GameConfig(match_target=0)
    config = GameConfig()
    with pytest.raises(AttributeError):
        config.enable_royals = False
    assert config.with_changes(match_target=13).match_target == 13
    assert config.match_target == 12


def test_dict_round_trip_ignores_unknown_keys():
    data = config_to_dict(GameConfig.strict())
    data["unused"] = 1
    assert dict_to_config(data) == GameConfig.strict()


def test_env_overrides_base_preset():
    environ = {
        "THUNEE_PRESET": "basic",
        "THUNEE_ENABLE_JODI": "yes",
        "THUNEE_MATCH_TARGET": "15",
    }
    config = load_config_from_env(environ=environ)
    assert config.enable_jodi
    assert not config.enable_royals
    assert config.match_target == 15


def test_env_rejects_bad_values():
    with pytest.raises(ValueError):
        load_config_from_env(environ={"THUNEE_ENABLE_ROYALS": "maybe"})
    with pytest.raises(ValueError):
        load_config_from_env(environ={"THUNEE_MATCH_TARGET": "twelve"})


def test_env_file_is_loaded(tmp_path, monkeypatch):
    monkeypatch.delenv("THUNEE_ENABLE_DOUBLE", raising=False)
    monkeypatch.delenv("THUNEE_PRESET", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("THUNEE_ENABLE_DOUBLE=false\n", encoding="utf-8")

    try:
        config = load_config_from_env(env_file)
    finally:
        os.environ.pop("THUNEE_ENABLE_DOUBLE", None)
    assert not config.enable_double
