"""Typed configuration for the behaviour engine.

All probabilities, cooldowns, radii and delays used by the profile handlers
live here.  The defaults reproduce the tuning the behaviours were play-tested
with; ``config/behavior.yaml`` overrides any subset of them.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict

import structlog
import yaml

log = structlog.get_logger()


def _check_probability(section: str, name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{section}.{name} must be within [0, 1], got {value}")


def _check_non_negative(section: str, name: str, value: float) -> None:
    if value < 0:
        raise ValueError(f"{section}.{name} must not be negative, got {value}")


def _coerce(section: str, name: str, current: Any, value: Any) -> Any:
    """Check ``value`` against the type of the field default it replaces."""
    where = f"{section}.{name}"
    if isinstance(current, bool):
        if not isinstance(value, bool):
            raise ValueError(f"{where} must be true or false, got {value!r}")
        return value
    if isinstance(current, (int, float)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{where} must be a number, got {value!r}")
        if isinstance(current, int):
            if isinstance(value, float) and not value.is_integer():
                raise ValueError(f"{where} must be a whole number, got {value!r}")
            return int(value)
        return float(value)
    if isinstance(current, str):
        if not isinstance(value, str):
            raise ValueError(f"{where} must be a string, got {value!r}")
        return value
    if isinstance(current, dict):
        # mapping values merge over the defaults
        if value is None:
            return dict(current)
        if not isinstance(value, dict):
            raise ValueError(f"{where} must be a mapping, got {value!r}")
        merged = dict(current)
        for key, item in value.items():
            merged[str(key)] = _coerce(section, f"{name}.{key}", 0.0, item)
        return merged
    return value


@dataclass
class EngineConfig:
    # orchestrator runs on every Nth tick (300 ticks ~ 5 s at 60 ticks/s)
    cadence_ticks: int = 300
    profile_key: str = "herdmind/Profile"
    emote_key: str = "herdmind/LastEmote"
    emote_cooldown_ticks: int = 600
    agent_added_delay_ticks: int = 60
    max_pathfinding_per_tick: int = 50

    def validate(self) -> None:
        if self.cadence_ticks <= 0:
            raise ValueError("engine.cadence_ticks must be positive")
        if not self.profile_key:
            raise ValueError("engine.profile_key must not be empty")
        _check_non_negative("engine", "emote_cooldown_ticks", self.emote_cooldown_ticks)
        _check_non_negative("engine", "agent_added_delay_ticks", self.agent_added_delay_ticks)
        _check_non_negative("engine", "max_pathfinding_per_tick", self.max_pathfinding_per_tick)


@dataclass
class IdleConfig:
    speed: int = 1
    rest_chance: float = 0.05
    return_home_chance: float = 0.5
    wander_chance: float = 0.2
    leash_radius: float = 6.0
    wander_radius: int = 2


@dataclass
class HighEnergyConfig:
    speed: int = 3
    burst_speed: int = 5
    burst_chance: float = 0.7
    explore_chance: float = 0.7
    burst_radius: int = 4
    explore_radius: int = 8
    explore_attempts: int = 12
    burst_cooldown_ticks: int = 300
    explore_cooldown_ticks: int = 300
    burst_duration_ticks: int = 120
    # time of day (HHMM) at and after which nothing is offered
    late_cutoff: int = 2300


@dataclass
class MischievousConfig:
    speed: int = 2
    gate_chance: float = 0.02
    door_chance: float = 0.01
    hop_chance: float = 0.01
    hide_chance: float = 0.20
    gate_cooldown_ticks: int = 600
    door_cooldown_ticks: int = 900
    hop_cooldown_ticks: int = 900
    hide_cooldown_ticks: int = 600
    gate_radius: int = 2
    door_radius: float = 6.0
    door_revert_ticks: int = 120
    hop_peak: int = 18
    hop_pixels_per_tick: float = 4.0
    hop_landing_slack_ticks: int = 2
    hide_enabled: bool = False
    hide_player_radius: float = 10.0
    hide_search_radius: float = 12.0
    hide_speed: int = 3
    hide_speed_reset_ticks: int = 132


@dataclass
class AffectionateConfig:
    player_radius: float = 8.0
    buddy_radius: float = 8.0
    run_speed: int = 3
    rest_speed: int = 2
    run_chance: float = 0.25
    run_cooldown_ticks: int = 0
    run_speed_reset_ticks: int = 90
    hangout_base_chance: float = 0.05
    hangout_same_home_bonus: float = 0.10
    hangout_same_species_bonus: float = 0.15
    hangout_cooldown_ticks: int = 0
    hangout_check_ticks: int = 60
    hangout_emote_radius: float = 2.0
    friendship_chance: float = 0.05
    friendship_gain: int = 1
    max_friendship: int = 1000


@dataclass
class ResourceSeekingConfig:
    speed: int = 2
    max_fullness: int = 255
    patch_scan_radius: float = 6.0
    crowd_penalty: float = 1.5
    crowd_penalty_radius: float = 2.0
    patch_type_bonus: Dict[str, float] = field(
        default_factory=lambda: {"grass": 0.0, "blue_grass": 2.0}
    )
    pursue_chance: float = 0.4
    pursue_cooldown_ticks: int = 300
    arrival_check_ticks: int = 180
    arrival_radius: float = 1.0
    fullness_per_bite: int = 64
    doorway_chance: float = 0.3
    doorway_cooldown_ticks: int = 600
    morning_start: int = 600
    morning_end: int = 900
    crowd_radius: float = 3.0
    avoid_chance: float = 0.5
    avoid_step: int = 3


@dataclass
class MorningBonusConfig:
    chance: float = 0.15


_PROBABILITY_SUFFIX = "_chance"
_BONUS_SUFFIX = "_bonus"


@dataclass
class BehaviorConfig:
    engine: EngineConfig = field(default_factory=EngineConfig)
    idle: IdleConfig = field(default_factory=IdleConfig)
    high_energy: HighEnergyConfig = field(default_factory=HighEnergyConfig)
    mischievous: MischievousConfig = field(default_factory=MischievousConfig)
    affectionate: AffectionateConfig = field(default_factory=AffectionateConfig)
    resource_seeking: ResourceSeekingConfig = field(default_factory=ResourceSeekingConfig)
    morning_bonus: MorningBonusConfig = field(default_factory=MorningBonusConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "BehaviorConfig":
        """Build a config from a nested mapping, falling back to defaults."""
        config = cls()
        for section_name, section_data in (data or {}).items():
            if section_name not in _SECTION_NAMES:
                log.warning("Unknown config section ignored", section=section_name)
                continue
            if section_data is None:
                continue
            if not isinstance(section_data, dict):
                raise ValueError(f"Config section '{section_name}' must be a mapping")
            section = getattr(config, section_name)
            known = {f.name: f for f in fields(section)}
            for key, value in section_data.items():
                if key not in known:
                    log.warning(
                        "Unknown config key ignored", section=section_name, key=key
                    )
                    continue
                value = _coerce(section_name, key, getattr(section, key), value)
                setattr(section, key, value)
        config.validate()
        return config

    def validate(self) -> None:
        self.engine.validate()
        for section_name in _SECTION_NAMES:
            section = getattr(self, section_name)
            for f in fields(section):
                value = getattr(section, f.name)
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    continue
                if f.name.endswith(_PROBABILITY_SUFFIX) or f.name.endswith(_BONUS_SUFFIX):
                    _check_probability(section_name, f.name, value)
                else:
                    _check_non_negative(section_name, f.name, value)


_SECTION_NAMES = tuple(f.name for f in fields(BehaviorConfig))


def load_behavior_config(config_path: Path) -> BehaviorConfig:
    """Load a YAML behaviour config file."""
    config_path = Path(config_path)
    if not config_path.is_file():
        log.error("Behavior config file not found", path=str(config_path))
        raise FileNotFoundError(f"Behavior configuration file not found: {config_path}")
    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        log.error(
            "Error parsing YAML for behavior config",
            path=str(config_path),
            error=str(e),
            exc_info=True,
        )
        raise
    if data is None:
        log.warning("Behavior config file is empty, using defaults", path=str(config_path))
        return BehaviorConfig()
    if not isinstance(data, dict):
        raise ValueError(f"Behavior config must be a mapping: {config_path}")
    config = BehaviorConfig.from_dict(data)
    log.info("Behavior config loaded", path=str(config_path))
    return config


__all__ = [
    "AffectionateConfig",
    "BehaviorConfig",
    "EngineConfig",
    "HighEnergyConfig",
    "IdleConfig",
    "MischievousConfig",
    "MorningBonusConfig",
    "ResourceSeekingConfig",
    "load_behavior_config",
]
