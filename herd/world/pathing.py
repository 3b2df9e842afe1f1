# herd/world/pathing.py
"""Path controllers and the per-tick movement step.

Each animal owns at most one :class:`PathController`.  Assigning a new
controller to ``agent.controller`` supersedes whatever the old one was doing;
there is no other cancellation channel.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, List, Optional, Tuple

import heapq

import numpy as np
import structlog

from herd.constants import Facing, facing_for_delta

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from herd.entities.agent import Agent
    from herd.world.location import Location, Tile
    from herd.world.world_state import WorldState

log = structlog.get_logger(__name__)

# (dx, dy)
DIRECTIONS_4: Final[np.ndarray] = np.array(
    [[0, -1], [1, 0], [0, 1], [-1, 0]], dtype=np.int8
)
DEFAULT_BASE_STEP_TICKS: Final[int] = 16


def find_path(
    walkable: np.ndarray, start: "Tile", target: "Tile"
) -> Optional[List["Tile"]]:
    """Shortest 4-connected path from ``start`` to ``target``.

    Returns the tiles to visit, excluding ``start``.  A blocked ``target``
    (a door, a gate) is still a valid goal: the path then ends on the
    cheapest walkable tile next to it.  ``None`` means unreachable.
    """
    height, width = walkable.shape
    sx, sy = start
    tx, ty = target
    if not (0 <= tx < width and 0 <= ty < height):
        return None
    if start == target:
        return []

    goal_blocked = not walkable[ty, tx]
    cost_field = np.full(walkable.shape, np.inf, dtype=np.float32)
    came_from: dict[Tuple[int, int], Tuple[int, int]] = {}
    cost_field[sy, sx] = 0.0
    pq: list[tuple[float, int, int]] = [(0.0, sx, sy)]

    reached: Tuple[int, int] | None = None
    while pq:
        cost, x, y = heapq.heappop(pq)
        if cost > cost_field[y, x]:
            continue
        if (x, y) == (tx, ty):
            reached = (x, y)
            break
        if goal_blocked and abs(x - tx) + abs(y - ty) == 1:
            reached = (x, y)
            break
        for dx, dy in DIRECTIONS_4:
            nx, ny = x + int(dx), y + int(dy)
            if not (0 <= nx < width and 0 <= ny < height):
                continue
            if not walkable[ny, nx]:
                continue
            new_cost = cost + 1.0
            if new_cost < cost_field[ny, nx]:
                cost_field[ny, nx] = new_cost
                came_from[(nx, ny)] = (x, y)
                heapq.heappush(pq, (new_cost, nx, ny))

    if reached is None:
        return None
    path: List[Tuple[int, int]] = []
    node = reached
    while node != (sx, sy):
        path.append(node)
        node = came_from[node]
    path.reverse()
    return path


class PathController:
    """Walks one agent towards a target tile inside a single location."""

    def __init__(
        self,
        agent: "Agent",
        location: "Location",
        target: "Tile",
        end_facing: Facing = Facing.DOWN,
    ) -> None:
        self.agent_id = agent.agent_id
        self.location = location
        self.target: Tuple[int, int] = (int(target[0]), int(target[1]))
        self.end_facing = end_facing
        path = find_path(location.walkable_mask(), agent.tile, self.target)
        self.reachable = path is not None
        self._path: List[Tuple[int, int]] = path or []
        log.debug(
            "Path computed",
            agent_id=self.agent_id,
            target=self.target,
            steps=len(self._path),
            reachable=self.reachable,
        )

    @property
    def finished(self) -> bool:
        return not self._path

    def peek(self) -> Tuple[int, int] | None:
        return self._path[0] if self._path else None

    def pop(self) -> Tuple[int, int] | None:
        return self._path.pop(0) if self._path else None


class MovementSystem:
    """Steps every controlled agent along its path once per tick."""

    def __init__(self, base_step_ticks: int = DEFAULT_BASE_STEP_TICKS) -> None:
        if base_step_ticks <= 0:
            raise ValueError("base_step_ticks must be positive")
        self.base_step_ticks = base_step_ticks

    def step_interval(self, speed: int) -> int:
        return max(1, self.base_step_ticks // max(1, speed))

    def advance(self, world: "WorldState") -> None:
        for agent in world.agents:
            controller = agent.controller
            if controller is None:
                continue
            if controller.location is not agent.location:
                agent.halt()
                continue
            agent.move_progress += 1
            if agent.move_progress < self.step_interval(agent.speed):
                continue
            agent.move_progress = 0
            next_tile = controller.peek()
            if next_tile is None:
                self._finish(agent, controller)
                continue
            if not agent.location.is_walkable(next_tile):
                # Something closed the way since the path was computed.
                log.debug("Path blocked, stopping", agent_id=agent.agent_id, tile=next_tile)
                agent.halt()
                continue
            dx, dy = next_tile[0] - agent.tile[0], next_tile[1] - agent.tile[1]
            agent.face_direction(facing_for_delta(dx, dy))
            agent.set_tile(next_tile)
            controller.pop()
            if controller.finished:
                self._finish(agent, controller)

    @staticmethod
    def _finish(agent: "Agent", controller: PathController) -> None:
        agent.face_direction(controller.end_facing)
        if agent.controller is controller:
            agent.controller = None


__all__ = ["MovementSystem", "PathController", "find_path"]
