from herd.constants import BehaviorProfile, Emote
from farm_helpers import ScriptedRNG, add_animal, add_house, make_context, make_engine, make_world

IDLE = BehaviorProfile.IDLE


def _handler(engine):
    return engine.handlers[IDLE]


def test_far_from_open_door_offers_return_home():
    world = make_world()
    home = add_house(world, x=2, y=2, w=4, h=3, door=(1, 2))
    agent = add_animal(world, (15, 15), profile=IDLE, home=home)
    engine = make_engine(world)
    candidates = _handler(engine).build_feasible(agent, make_context(engine))

    assert len(candidates) == 2
    assert agent.speed == 1
    assert candidates[1]()
    assert agent.controller.target == home.approach_tile()


def test_closed_door_means_wander_instead():
    world = make_world()
    home = add_house(world, x=2, y=2, w=4, h=3, door=(1, 2))
    home.door_open = False
    agent = add_animal(world, (15, 15), profile=IDLE, home=home)
    engine = make_engine(world, rng=ScriptedRNG(offsets=[(1, 0)]))
    candidates = _handler(engine).build_feasible(agent, make_context(engine))

    assert candidates[1]()
    assert agent.controller.target == (16, 15)
    assert agent.current_emote == Emote.MUSIC


def test_near_home_wanders():
    world = make_world()
    home = add_house(world, x=2, y=2, w=4, h=3, door=(1, 2))
    agent = add_animal(world, (4, 7), profile=IDLE, home=home)
    engine = make_engine(world, rng=ScriptedRNG(offsets=[(-1, 0)]))
    candidates = _handler(engine).build_feasible(agent, make_context(engine))
    assert candidates[1]()
    assert agent.controller.target == (3, 7)


def test_wander_refuses_blocked_target():
    world = make_world()
    agent = add_animal(world, (5, 5), profile=IDLE)
    world.farm.set_blocked((6, 5))
    engine = make_engine(world, rng=ScriptedRNG(offsets=[(1, 0)]))
    assert not _handler(engine).try_wander_near(agent, make_context(engine))
    assert agent.controller is None


def test_rest_halts_and_sleeps():
    world = make_world()
    agent = add_animal(world, (5, 5), profile=IDLE)
    engine = make_engine(world)
    ctx = make_context(engine)
    _handler(engine).try_wander_near(agent, ctx)
    assert _handler(engine).try_rest(agent, ctx)
    assert agent.controller is None
    assert agent.current_emote == Emote.SLEEP
