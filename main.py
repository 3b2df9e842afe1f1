# main.py
"""Headless demo: a small farm whose animals run on the behaviour engine."""

import argparse
import sys
from pathlib import Path
from typing import List

import numpy as np
import polars as pl
import structlog

from game_rng import GameRNG
from herd.config import BehaviorConfig, load_behavior_config
from herd.engine import BehaviorEngine
from herd.world.location import (
    BigCraftable,
    Building,
    Farm,
    Fence,
    GrassPatch,
    Tree,
    make_interior,
)
from herd.world.world_state import Farmer, WorldState
from utils.logging_utils import setup_logging

# --- Paths relative to this script's location ---
SCRIPT_DIR = Path(__file__).parent.resolve()
CONFIG_DIR = SCRIPT_DIR / "config"
CONFIG_FILE = CONFIG_DIR / "behavior.yaml"
# --- End Paths ---

log = structlog.get_logger()

FARM_WIDTH = 30
FARM_HEIGHT = 20

BARN_ANIMALS = [("Bessie", "cow"), ("Clover", "cow"), ("Nibbles", "goat"), ("Woolly", "sheep"), ("Patch", "goat"), ("Daisy", "cow")]
COOP_ANIMALS = [("Henrietta", "chicken"), ("Pip", "chicken"), ("Quackers", "duck"), ("Thumper", "rabbit"), ("Goldie", "chicken"), ("Puddles", "duck")]


def build_demo_world(rng: GameRNG) -> WorldState:
    """Lay out a barn, a coop, a fenced paddock with a gate, trees and grass."""
    farm = Farm("Farm", FARM_WIDTH, FARM_HEIGHT, pieces_of_hay=6)
    # a pond in the top-right corner
    farm.passable[1:4, 24:28] = False

    barn = Building("Barn", 3, 3, 7, 4, animal_door=(3, 3))
    coop = Building("Coop", 14, 4, 6, 3, animal_door=(2, 2))
    for building in (barn, coop):
        make_interior(building)
        farm.add_building(building)

    for x in range(2, 28):
        farm.objects[(x, 14)] = Fence(is_gate=(x == 15))
    farm.objects[(22, 9)] = BigCraftable("chest")
    for tile in ((1, 1), (11, 1), (21, 7), (6, 17), (25, 16)):
        farm.terrain_features[tile] = Tree()

    placed = 0
    while placed < 10:
        tile = (rng.get_int(1, FARM_WIDTH - 2), rng.get_int(8, FARM_HEIGHT - 2))
        if tile[1] == 14 or not farm.is_walkable(tile) or tile in farm.terrain_features:
            continue
        kind = "blue_grass" if rng.chance(0.2) else "grass"
        farm.terrain_features[tile] = GrassPatch(kind=kind, amount=rng.get_int(2, 5))
        placed += 1

    player = Farmer("Farmer", farm, (12, 10))
    world = WorldState(farm, player)
    _populate(world, barn, BARN_ANIMALS, rng)
    _populate(world, coop, COOP_ANIMALS, rng)
    return world


def _populate(world: WorldState, home: Building, animals, rng: GameRNG) -> None:
    farm = world.farm
    door_x, door_y = home.approach_tile()
    for index, (name, species) in enumerate(animals):
        # the first animal of each house starts indoors
        if index == 0 and home.interior is not None:
            world.agents.create(name, species, home.interior, (2, 2), home=home)
            continue
        for _ in range(50):
            tile = (door_x + rng.get_int(-4, 4), door_y + rng.get_int(0, 4))
            if farm.is_walkable(tile):
                break
        else:
            tile = (door_x, door_y)
        world.agents.create(name, species, farm, tile, home=home)


def print_farm(world: WorldState) -> None:
    """Print an ASCII view of the farm with animals on top."""
    farm = world.farm
    grid = np.full((farm.height, farm.width), ".", dtype="<U1")
    grid[~farm.passable] = "~"
    for building in farm.buildings:
        grid[
            building.tile_y : building.tile_y + building.tiles_high,
            building.tile_x : building.tile_x + building.tiles_wide,
        ] = "#"
        door_x, door_y = building.door_tile()
        grid[door_y, door_x] = "D" if building.door_open else "d"
    for (x, y), feature in farm.terrain_features.items():
        grid[y, x] = "T" if isinstance(feature, Tree) else ","
    for (x, y), obj in farm.objects.items():
        if isinstance(obj, Fence):
            grid[y, x] = ("/" if obj.gate_open else "+") if obj.is_gate else "="
        else:
            grid[y, x] = "C"
    for agent in world.agents.in_location(farm):
        grid[agent.tile[1], agent.tile[0]] = agent.species[0].upper()
    px, py = world.player.tile
    grid[py, px] = "@"

    print("\n--- Farm ---")
    for row in grid:
        print("".join(row))
    print("------------\n")


def print_summary(engine: BehaviorEngine) -> None:
    world = engine.world
    census = world.agents.census(engine.profile_key)
    stats = pl.DataFrame(
        {
            "agent_id": [a.agent_id for a in world.agents],
            "friendship": [a.friendship for a in world.agents],
            "fullness": [a.fullness for a in world.agents],
        }
    )
    table = census.join(stats, on="agent_id", how="left").sort("agent_id")
    print(table.select(["agent_id", "species", "location", "profile", "friendship", "fullness"]))
    print(census.group_by("profile").agg(pl.len().alias("animals")).sort("profile"))
    patches = sum(1 for f in world.farm.terrain_features.values() if isinstance(f, GrassPatch))
    print(f"Hay left: {world.farm.pieces_of_hay}  Grass patches left: {patches}")
    print(f"Messages posted: {len(world.messages)}  Sounds played: {len(world.sound_log)}")
    for message in world.messages[-10:]:
        print(f"  {message}")


def run(days: int, ticks_per_day: int, config: BehaviorConfig, seed: int | None) -> BehaviorEngine:
    rng = GameRNG(seed)
    log.info("Using seed", seed=rng.initial_seed)
    world = build_demo_world(rng)
    engine = BehaviorEngine(world, config, rng)

    for day in range(days):
        if day == 0:
            engine.on_day_started()
        else:
            world.farm.pieces_of_hay += 3
            engine.start_day()
        if day == 1:
            # a new arrival mid-run goes through the announced assignment path
            world.agents.create("Newbie", "chicken", world.farm, (16, 9), home=world.farm.buildings[1])
            engine.on_agent_added()
        for _ in range(ticks_per_day):
            engine.tick()
        log.info("Day finished", day=world.clock.day, time=world.time_of_day, hay=world.farm.pieces_of_hay)
    return engine


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the farm-animal behaviour engine headless.")
    parser.add_argument("--days", type=int, default=3, help="number of in-world days to simulate")
    parser.add_argument("--ticks-per-day", type=int, default=3600, help="host ticks per day (60 per second)")
    parser.add_argument("--seed", type=int, default=None, help="random seed (random when omitted)")
    parser.add_argument("--config", type=Path, default=CONFIG_FILE, help="behaviour YAML file")
    parser.add_argument("--log-level", default="INFO", help="DEBUG, INFO, WARNING ...")
    parser.add_argument("--json-logs", action="store_true", help="emit JSON log lines")
    return parser.parse_args(argv)


def main(argv: List[str] | None = None) -> None:
    """Main entry point for the application."""
    args = parse_args(argv)
    setup_logging(args.log_level, json=args.json_logs)
    log.info("Application starting...", config=str(args.config))

    try:
        config = load_behavior_config(args.config)
        if args.days < 1 or args.ticks_per_day < 1:
            raise ValueError("--days and --ticks-per-day must be positive")
        engine = run(args.days, args.ticks_per_day, config, args.seed)
    # --- Exception Handling ---
    except FileNotFoundError as e:
        log.critical("Required file not found during init", error=str(e), exc_info=True)
        sys.exit(f"Initialization failed: File not found - {e}")
    except ValueError as e:
        log.critical("Invalid configuration", error=str(e), exc_info=True)
        sys.exit(f"Configuration failed: {e}")
    # --- End Exception Handling ---

    print_farm(engine.world)
    print_summary(engine)


if __name__ == "__main__":
    main()
