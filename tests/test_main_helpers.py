from pathlib import Path

import pytest

import main
from game_rng import GameRNG
from herd.config import BehaviorConfig


def test_parse_args_defaults():
    args = main.parse_args([])
    assert args.days == 3
    assert args.ticks_per_day == 3600
    assert args.seed is None
    assert args.config == main.CONFIG_FILE
    assert args.log_level == "INFO"


def test_parse_args_overrides():
    args = main.parse_args(["--days", "2", "--ticks-per-day", "50", "--seed", "9", "--config", "x.yaml"])
    assert args.days == 2
    assert args.ticks_per_day == 50
    assert args.seed == 9
    assert args.config == Path("x.yaml")


def test_demo_world_layout():
    world = main.build_demo_world(GameRNG(3))
    assert len(world.agents) == 12
    assert len(world.farm.buildings) == 2
    indoors = [a for a in world.agents if not a.location.outdoors]
    assert len(indoors) == 2
    assert any(getattr(o, "is_gate", False) for o in world.farm.objects.values())
    assert world.farm.pieces_of_hay == 6


def test_run_tags_everyone_and_welcomes_newcomer():
    engine = main.run(2, 120, BehaviorConfig(), seed=11)
    world = engine.world
    assert world.clock.day == 2
    assert len(world.agents) == 13
    assert all(engine.assigner.profile_of(a) is not None for a in world.agents)
    assert any(m.startswith("Newbie seems") for m in world.messages)


def test_main_rejects_bad_days():
    with pytest.raises(SystemExit):
        main.main(["--days", "0", "--config", str(main.CONFIG_FILE)])
