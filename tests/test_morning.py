from herd.constants import BehaviorProfile
from herd.systems.morning import MorningBonusService
from farm_helpers import PROFILE_KEY, ScriptedRNG, add_animal, make_world


def test_pool_of_one_feeds_only_one_animal():
    world = make_world(hay=1)
    for x in range(3):
        add_animal(world, (x, 0), profile=BehaviorProfile.RESOURCE_SEEKING, name=f"Greedy{x}")

    consumed = MorningBonusService(chance=0.15).apply(world, PROFILE_KEY, ScriptedRNG(chances=True))

    assert consumed == 1
    assert world.farm.pieces_of_hay == 0
    assert world.messages == ["Greedy0 devoured an extra serving of hay!"]


def test_empty_pool_never_goes_negative():
    world = make_world(hay=0)
    add_animal(world, (0, 0), profile=BehaviorProfile.RESOURCE_SEEKING)
    consumed = MorningBonusService().apply(world, PROFILE_KEY, ScriptedRNG(chances=True))
    assert consumed == 0
    assert world.farm.pieces_of_hay == 0
    assert world.messages == []


def test_only_resource_seekers_roll():
    world = make_world(hay=5)
    add_animal(world, (0, 0), profile=BehaviorProfile.IDLE)
    add_animal(world, (1, 0), profile="Greedy")
    add_animal(world, (2, 0))
    consumed = MorningBonusService().apply(world, PROFILE_KEY, ScriptedRNG(chances=True))
    assert consumed == 1
    assert world.farm.pieces_of_hay == 4


def test_failed_rolls_consume_nothing():
    world = make_world(hay=5)
    for x in range(3):
        add_animal(world, (x, 0), profile=BehaviorProfile.RESOURCE_SEEKING)
    rng = ScriptedRNG(chances=[False, True, False])
    assert MorningBonusService().apply(world, PROFILE_KEY, rng) == 1
    assert world.farm.pieces_of_hay == 4
