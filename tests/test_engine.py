from game_rng import GameRNG
from herd.ai.common import path_to
from herd.config import BehaviorConfig
from herd.constants import BehaviorProfile
from herd.engine import BehaviorEngine
from farm_helpers import PROFILE_KEY, ScriptedRNG, add_animal, make_engine, make_world


def test_orchestrator_runs_only_on_cadence_ticks():
    world = make_world()
    add_animal(world, (5, 5), profile=BehaviorProfile.IDLE)
    engine = make_engine(world)

    assert engine.on_update_ticked(1) is None
    assert engine.on_update_ticked(299) is None
    report = engine.on_update_ticked(300)
    assert report is not None
    assert report.evaluated == 1
    assert engine.last_report is report


def test_tick_advances_clock_and_evaluates():
    world = make_world()
    add_animal(world, (5, 5), profile=BehaviorProfile.IDLE)
    config = BehaviorConfig.from_dict({"engine": {"cadence_ticks": 10}})
    engine = BehaviorEngine(world, config, GameRNG(3))

    reports = [engine.tick() for _ in range(30)]
    assert world.ticks == 30
    assert sum(1 for r in reports if r is not None) == 3


def test_day_start_assigns_quietly_then_feeds():
    world = make_world(hay=2)
    greedy = add_animal(world, (1, 1), profile=BehaviorProfile.RESOURCE_SEEKING, name="Greedy")
    fresh = add_animal(world, (2, 2), name="Fresh")
    # pick index 0 (Idle) for Fresh; every probability gate passes
    engine = make_engine(world, rng=ScriptedRNG(chances=True))

    consumed = engine.on_day_started()

    assert fresh.tags[PROFILE_KEY] == "Idle"
    assert greedy.tags[PROFILE_KEY] == "ResourceSeeking"
    assert consumed == 1
    assert world.farm.pieces_of_hay == 1
    assert world.messages == ["Greedy devoured an extra serving of hay!"]


def test_agent_added_assigns_after_delay_with_announcement():
    world = make_world()
    newcomer = add_animal(world, (1, 1), name="Newbie")
    engine = make_engine(world, rng=ScriptedRNG(picks=[3]))

    engine.on_agent_added()
    engine.on_update_ticked(59)
    assert PROFILE_KEY not in newcomer.tags

    engine.on_update_ticked(60)
    assert newcomer.tags[PROFILE_KEY] == "Affectionate"
    assert world.messages == ["Newbie seems affectionate!"]


def test_start_day_rolls_the_clock():
    world = make_world()
    engine = make_engine(world)
    world.clock.time_of_day = 1800
    engine.start_day()
    assert world.clock.day == 2
    assert world.time_of_day == 600


def test_engine_applies_pathing_budget_from_config():
    world = make_world()
    config = BehaviorConfig.from_dict({"engine": {"max_pathfinding_per_tick": 1}})
    first = add_animal(world, (1, 1))
    second = add_animal(world, (3, 3))
    engine = BehaviorEngine(world, config, ScriptedRNG())
    ctx = engine.behaviors.build_context(world)

    assert path_to(first, (2, 1), ctx)
    assert not path_to(second, (4, 3), ctx)
    assert second.controller is None
    world.advance_tick()
    assert path_to(second, (4, 3), ctx)
