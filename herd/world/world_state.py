# herd/world/world_state.py
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Tuple

import structlog

from herd.constants import TILE_SIZE
from herd.entities.registry import AgentRegistry
from herd.world.location import Farm, Location, Tile
from herd.world.pathing import MovementSystem

log = structlog.get_logger()

DAY_START_TIME = 600
DAY_END_TIME = 2600


class WorldClock:
    """Logical tick counter plus the in-world time of day (HHMM)."""

    def __init__(self, ticks_per_ten_minutes: int = 420, time_of_day: int = DAY_START_TIME):
        if ticks_per_ten_minutes <= 0:
            raise ValueError("ticks_per_ten_minutes must be positive")
        self.ticks = 0
        self.day = 1
        self.time_of_day = time_of_day
        self.ticks_per_ten_minutes = ticks_per_ten_minutes
        self._ticks_into_slot = 0

    def advance(self) -> int:
        """Advance one tick; returns the new tick count."""
        self.ticks += 1
        self._ticks_into_slot += 1
        if self._ticks_into_slot >= self.ticks_per_ten_minutes:
            self._ticks_into_slot = 0
            self.advance_time(10)
        return self.ticks

    def advance_time(self, minutes: int) -> None:
        total = (self.time_of_day // 100) * 60 + self.time_of_day % 100 + minutes
        self.time_of_day = min(DAY_END_TIME, (total // 60) * 100 + total % 60)

    def start_day(self) -> None:
        self.day += 1
        self.time_of_day = DAY_START_TIME
        self._ticks_into_slot = 0


@dataclass
class Farmer:
    name: str
    location: Location | None
    tile: Tile


@dataclass
class Viewport:
    """Visible area in tiles."""

    x: int = 0
    y: int = 0
    width: int = 20
    height: int = 12

    def contains_pixel(self, px: float, py: float, margin: float = 0.0) -> bool:
        left = self.x * TILE_SIZE - margin
        top = self.y * TILE_SIZE - margin
        right = (self.x + self.width) * TILE_SIZE + margin
        bottom = (self.y + self.height) * TILE_SIZE + margin
        return left <= px < right and top <= py < bottom


def tile_to_world(tile: Tile) -> Tuple[float, float]:
    """Pixel centre of ``tile``."""
    return tile[0] * TILE_SIZE + TILE_SIZE / 2, tile[1] * TILE_SIZE + TILE_SIZE / 2


class WorldState:
    """Root of everything the behaviour engine can query or mutate."""

    def __init__(
        self,
        farm: Farm,
        player: Farmer,
        clock: WorldClock | None = None,
        registry: AgentRegistry | None = None,
        viewport: Viewport | None = None,
        max_pathfinding_per_tick: int = 50,
        movement: MovementSystem | None = None,
    ) -> None:
        self.farm = farm
        self.player = player
        self.clock = clock or WorldClock()
        self.agents = registry or AgentRegistry()
        self.current_location: Location | None = player.location
        self.viewport = viewport or Viewport(0, 0, farm.width, farm.height)
        self.movement = movement or MovementSystem()
        self.max_pathfinding_per_tick = max_pathfinding_per_tick
        self._pathfinds_this_tick = 0
        self.messages: List[str] = []
        self.sound_log: Deque[Tuple[int, str, str, Tile]] = deque(maxlen=200)
        log.info(
            "WorldState initialized",
            farm=farm.name,
            size=(farm.width, farm.height),
            buildings=len(farm.buildings),
        )

    @property
    def ticks(self) -> int:
        return self.clock.ticks

    @property
    def time_of_day(self) -> int:
        return self.clock.time_of_day

    def has_building(self, building) -> bool:
        return any(b is building for b in self.farm.buildings)

    # --- Observation -----------------------------------------------------

    def is_on_screen(self, location: Location | None, tile: Tile, margin: float = 0.0) -> bool:
        """Whether ``tile`` is inside the observed location's viewport."""
        if location is None or location is not self.current_location:
            return False
        px, py = tile_to_world(tile)
        return self.viewport.contains_pixel(px, py, margin)

    def play_sound(self, location: Location | None, tile: Tile, cue: str) -> None:
        self.sound_log.append((self.clock.ticks, location.name if location else "", cue, tile))
        log.debug("Sound played", cue=cue, tile=tile)

    def show_global_message(self, text: str) -> None:
        self.messages.append(text)
        log.info("Global message", text=text)

    # --- Pathing budget --------------------------------------------------

    def try_begin_pathfind(self) -> bool:
        """Consume one unit of this tick's path-computation budget."""
        if self._pathfinds_this_tick >= self.max_pathfinding_per_tick:
            return False
        self._pathfinds_this_tick += 1
        return True

    # --- Host tick -------------------------------------------------------

    def advance_tick(self) -> int:
        self._pathfinds_this_tick = 0
        now = self.clock.advance()
        self.movement.advance(self)
        return now

    def start_day(self) -> None:
        self.clock.start_day()
        log.info("Day started", day=self.clock.day)


__all__ = [
    "DAY_END_TIME",
    "DAY_START_TIME",
    "Farmer",
    "Viewport",
    "WorldClock",
    "WorldState",
    "tile_to_world",
]
