"""Tiny worlds and a scripted random source shared by the tests."""

from herd.config import BehaviorConfig
from herd.constants import BehaviorProfile
from herd.engine import BehaviorEngine
from herd.world.location import Building, Farm, make_interior
from herd.world.world_state import Farmer, WorldState

PROFILE_KEY = "herdmind/Profile"


class ScriptedRNG:
    """Deterministic stand-in for GameRNG.

    ``chances`` is either a bool returned by every probability gate or a list
    consumed one gate at a time (``False`` once exhausted).  ``choice`` picks
    the first item unless ``picks`` supplies indices.
    """

    def __init__(self, chances=True, offsets=None, picks=None):
        self.chances = chances
        self.offsets = list(offsets or [])
        self.picks = list(picks or [])
        self.initial_seed = 0

    def chance(self, probability):
        if probability <= 0:
            return False
        if isinstance(self.chances, list):
            return self.chances.pop(0) if self.chances else False
        return self.chances

    def choice(self, items):
        if not items:
            raise ValueError("items empty")
        if self.picks:
            return items[self.picks.pop(0)]
        return items[0]

    def get_int(self, a, b):
        return a

    def get_float(self, a=0.0, b=1.0):
        return a

    def get_offset(self, radius):
        return self.offsets.pop(0) if self.offsets else (0, 0)

    def shuffle(self, seq):
        pass


def make_world(width=20, height=20, hay=0, player_tile=(0, 0)):
    farm = Farm("Farm", width, height, pieces_of_hay=hay)
    return WorldState(farm, Farmer("Farmer", farm, player_tile))


def add_house(world, building_type="Barn", x=2, y=2, w=4, h=3, door=(1, 2), interior=False):
    building = Building(building_type, x, y, w, h, animal_door=door)
    if interior:
        make_interior(building)
    world.farm.add_building(building)
    return building


def add_animal(world, tile, profile=None, name=None, species="cow", location=None, **fields):
    agent = world.agents.create(
        name or f"animal{len(world.agents) + 1}",
        species,
        location or world.farm,
        tile,
        **fields,
    )
    if profile is not None:
        agent.tags[PROFILE_KEY] = profile.value if isinstance(profile, BehaviorProfile) else profile
    return agent


def make_engine(world, rng=None, config=None):
    return BehaviorEngine(world, config or BehaviorConfig(), rng or ScriptedRNG())


def make_context(engine):
    return engine.behaviors.build_context(engine.world)
