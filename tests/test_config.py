from pathlib import Path

import pytest
import yaml

from herd.config import BehaviorConfig, load_behavior_config

SHIPPED_CONFIG = Path(__file__).resolve().parent.parent / "config" / "behavior.yaml"


def test_defaults_match_tuning():
    config = BehaviorConfig()
    assert config.engine.cadence_ticks == 300
    assert config.engine.profile_key == "herdmind/Profile"
    assert config.high_energy.late_cutoff == 2300
    assert config.mischievous.hide_enabled is False
    assert config.affectionate.run_speed_reset_ticks == 90
    assert config.morning_bonus.chance == pytest.approx(0.15)


def test_from_dict_overrides_and_ignores_unknown_keys():
    config = BehaviorConfig.from_dict(
        {
            "idle": {"rest_chance": 0.5, "nap_length": 3},
            "weather": {"rain": True},
            "resource_seeking": {"patch_type_bonus": {"clover": 1.0}},
        }
    )
    assert config.idle.rest_chance == pytest.approx(0.5)
    assert not hasattr(config.idle, "nap_length")
    # dict values merge with the defaults
    assert config.resource_seeking.patch_type_bonus == {
        "grass": 0.0,
        "blue_grass": 2.0,
        "clover": 1.0,
    }


@pytest.mark.parametrize(
    "data",
    [
        {"idle": {"rest_chance": 1.5}},
        {"affectionate": {"hangout_same_home_bonus": -0.1}},
        {"engine": {"cadence_ticks": 0}},
        {"mischievous": {"door_revert_ticks": -5}},
        {"idle": "fast"},
        {"engine": {"cadence_ticks": "300"}},
        {"idle": {"wander_chance": "0.2"}},
        {"high_energy": {"burst_radius": 2.5}},
        {"mischievous": {"hide_enabled": "yes"}},
        {"engine": {"profile_key": 7}},
        {"resource_seeking": {"patch_type_bonus": {"clover": "lots"}}},
    ],
)
def test_invalid_values_raise(data):
    with pytest.raises(ValueError):
        BehaviorConfig.from_dict(data)


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_behavior_config(tmp_path / "nope.yaml")


def test_load_empty_file_uses_defaults(tmp_path):
    path = tmp_path / "behavior.yaml"
    path.write_text("", encoding="utf-8")
    assert load_behavior_config(path) == BehaviorConfig()


def test_load_bad_yaml_reraises(tmp_path):
    path = tmp_path / "behavior.yaml"
    path.write_text("idle: [unclosed", encoding="utf-8")
    with pytest.raises(yaml.YAMLError):
        load_behavior_config(path)


def test_load_overrides(tmp_path):
    path = tmp_path / "behavior.yaml"
    path.write_text("engine:\n  cadence_ticks: 120\nmorning_bonus:\n  chance: 1.0\n", encoding="utf-8")
    config = load_behavior_config(path)
    assert config.engine.cadence_ticks == 120
    assert config.morning_bonus.chance == 1.0
    assert config.idle == BehaviorConfig().idle


def test_shipped_config_loads():
    config = load_behavior_config(SHIPPED_CONFIG)
    assert config.engine.cadence_ticks == 300
    assert config.resource_seeking.patch_type_bonus["blue_grass"] == pytest.approx(2.0)


def test_numbers_are_coerced_to_field_types():
    config = BehaviorConfig.from_dict(
        {"idle": {"leash_radius": 4, "wander_radius": 3.0}, "engine": {"cadence_ticks": 120.0}}
    )
    assert isinstance(config.idle.leash_radius, float)
    assert config.idle.wander_radius == 3
    assert isinstance(config.idle.wander_radius, int)
    assert isinstance(config.engine.cadence_ticks, int)


def test_load_wrong_type_is_a_value_error(tmp_path):
    path = tmp_path / "behavior.yaml"
    path.write_text('engine:\n  cadence_ticks: "300"\n', encoding="utf-8")
    with pytest.raises(ValueError, match="engine.cadence_ticks"):
        load_behavior_config(path)
