from herd.config import BehaviorConfig
from herd.constants import BehaviorProfile, Emote
from herd.world.location import BigCraftable, Fence, Tree
from farm_helpers import add_animal, add_house, make_context, make_engine, make_world

MISCHIEVOUS = BehaviorProfile.MISCHIEVOUS


def _handler(engine):
    return engine.handlers[MISCHIEVOUS]


def test_hop_offered_only_with_clear_landing():
    world = make_world()
    world.farm.objects[(6, 5)] = Fence()
    agent = add_animal(world, (5, 5), profile=MISCHIEVOUS)
    engine = make_engine(world)
    handler = _handler(engine)

    assert handler.hop_target(world.farm, agent.tile) == ((6, 5), (7, 5))
    assert len(handler.build_feasible(agent, make_context(engine))) == 1

    world.farm.terrain_features[(7, 5)] = Tree()
    assert handler.hop_target(world.farm, agent.tile) is None
    assert handler.build_feasible(agent, make_context(engine)) == []


def test_hop_arcs_then_lands():
    world = make_world()
    world.farm.objects[(6, 5)] = Fence()
    agent = add_animal(world, (5, 5), profile=MISCHIEVOUS)
    engine = make_engine(world)

    assert _handler(engine).try_fence_hop(agent, make_context(engine))
    assert agent.hop_offset == (128, 0)
    # 128 px at 4 px/tick
    assert engine.arcs.get(agent.agent_id).duration_ticks == 32

    engine.arcs.update(16)
    assert agent.y_jump_offset == -18
    engine.scheduler.process(33)
    assert agent.tile == (5, 5)

    engine.arcs.update(34)
    engine.scheduler.process(34)
    assert agent.tile == (7, 5)
    assert agent.hop_offset == (0.0, 0.0)
    assert agent.y_jump_offset == 0
    assert "thudStep" in [entry[2] for entry in world.sound_log]
    assert agent.current_emote == Emote.QUESTION


def test_hop_abandoned_when_landing_fills_up():
    world = make_world()
    world.farm.objects[(6, 5)] = Fence()
    agent = add_animal(world, (5, 5), profile=MISCHIEVOUS)
    engine = make_engine(world)
    _handler(engine).try_fence_hop(agent, make_context(engine))

    world.farm.objects[(7, 5)] = BigCraftable()
    engine.scheduler.process(34)
    assert agent.tile == (5, 5)
    assert agent.hop_offset == (0.0, 0.0)


def test_hop_never_lands_in_front_of_own_door():
    world = make_world()
    home = add_house(world, x=2, y=2, w=4, h=3, door=(1, 2))
    door_x, door_y = home.approach_tile()
    world.farm.objects[(door_x - 1, door_y)] = Fence()
    agent = add_animal(world, (door_x - 2, door_y), profile=MISCHIEVOUS, home=home)
    engine = make_engine(world)
    assert not _handler(engine).try_fence_hop(agent, make_context(engine))
    assert agent.agent_id not in engine.arcs


def test_gate_prank_toggles_gate():
    world = make_world()
    gate = Fence(is_gate=True)
    world.farm.objects[(6, 5)] = gate
    agent = add_animal(world, (5, 5), profile=MISCHIEVOUS)
    engine = make_engine(world)
    ctx = make_context(engine)
    handler = _handler(engine)

    assert handler.nearby_gate(world.farm, agent.tile, 2) == (6, 5)
    assert handler.try_gate_prank(agent, (6, 5), ctx)
    assert gate.gate_open
    assert agent.current_emote == Emote.QUESTION
    assert [entry[2] for entry in world.sound_log] == ["doorCreak"]
    # on cooldown now
    assert not handler.try_gate_prank(agent, (6, 5), ctx)
    assert gate.gate_open


def test_door_prank_reverts():
    world = make_world()
    home = add_house(world, x=2, y=2, w=4, h=3, door=(1, 2))
    agent = add_animal(world, (3, 6), profile=MISCHIEVOUS, home=home)
    engine = make_engine(world)
    handler = _handler(engine)
    assert handler.near_home_door(agent) is not None

    assert handler.try_door_prank(agent, make_context(engine))
    assert home.door_open is False
    engine.scheduler.process(119)
    assert home.door_open is False
    engine.scheduler.process(120)
    assert home.door_open is True


def test_door_revert_skipped_when_building_removed():
    world = make_world()
    home = add_house(world, x=2, y=2, w=4, h=3, door=(1, 2))
    agent = add_animal(world, (3, 6), profile=MISCHIEVOUS, home=home)
    engine = make_engine(world)
    _handler(engine).try_door_prank(agent, make_context(engine))

    world.farm.remove_building(home)
    world.agents.remove(agent.agent_id)
    engine.scheduler.process(120)
    assert home.door_open is False


def test_no_pranks_indoors():
    world = make_world()
    home = add_house(world, interior=True)
    home.interior.objects[(2, 1)] = Fence(is_gate=True)
    agent = add_animal(world, (1, 1), profile=MISCHIEVOUS, home=home, location=home.interior)
    engine = make_engine(world)
    assert _handler(engine).build_feasible(agent, make_context(engine)) == []


def test_hide_needs_to_be_enabled():
    world = make_world(player_tile=(5, 5))
    world.farm.objects[(5, 8)] = BigCraftable()
    agent = add_animal(world, (5, 7), profile=MISCHIEVOUS)

    engine = make_engine(world)
    assert _handler(engine).build_feasible(agent, make_context(engine)) == []

    config = BehaviorConfig.from_dict({"mischievous": {"hide_enabled": True}})
    engine = make_engine(world, config=config)
    handler = _handler(engine)
    assert handler.find_hide_spot(agent, make_context(engine)) == (5, 9)
    candidates = handler.build_feasible(agent, make_context(engine))
    assert len(candidates) == 1
    assert candidates[0]()
    assert agent.controller.target == (5, 9)
    assert agent.speed == 3


def test_shared_home_door_is_flipped_once_until_reverted():
    world = make_world()
    home = add_house(world, x=2, y=2, w=4, h=3, door=(1, 2))
    first = add_animal(world, (3, 6), profile=MISCHIEVOUS, home=home)
    second = add_animal(world, (4, 6), profile=MISCHIEVOUS, home=home)
    engine = make_engine(world)
    handler = _handler(engine)
    ctx = make_context(engine)

    assert handler.try_door_prank(first, ctx)
    assert handler.near_home_door(second) is None
    assert not handler.try_door_prank(second, ctx)
    assert home.door_open is False

    engine.scheduler.process(500)
    assert home.door_open is True
    # the door can be pranked again once the revert has run
    assert handler.near_home_door(second) is not None


def test_door_prank_rechecks_distance():
    world = make_world()
    home = add_house(world, x=2, y=2, w=4, h=3, door=(1, 2))
    agent = add_animal(world, (15, 15), profile=MISCHIEVOUS, home=home)
    engine = make_engine(world)

    assert not _handler(engine).try_door_prank(agent, make_context(engine))
    assert home.door_open is True
    assert engine.scheduler.pending == 0
