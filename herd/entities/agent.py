from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Tuple

from herd.constants import Emote, Facing

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from herd.world.location import Building, Location
    from herd.world.pathing import PathController


@dataclass(eq=False)
class Agent:
    """A farm animal.

    The world owns the animal's lifetime; the behaviour engine only reads and
    mutates these fields.  ``tags`` is the persistent string map where the
    behaviour profile and auxiliary cooldown stamps are stored.
    """

    agent_id: int
    name: str
    species: str
    location: "Location | None"
    tile: Tuple[int, int]
    speed: int = 2
    home: "Building | None" = None
    friendship: int = 0
    fullness: int = 255
    tags: Dict[str, str] = field(default_factory=dict)
    controller: "PathController | None" = None
    # visual state
    y_jump_offset: int = 0
    hop_offset: Tuple[float, float] = (0.0, 0.0)
    facing: Facing = Facing.DOWN
    current_emote: Emote | None = None
    emote_history: List[Emote] = field(default_factory=list)
    move_progress: int = 0

    @property
    def display_name(self) -> str:
        return self.name

    def distance_to(self, tile: Tuple[float, float]) -> float:
        return math.hypot(tile[0] - self.tile[0], tile[1] - self.tile[1])

    def do_emote(self, emote: Emote) -> None:
        self.current_emote = emote
        self.emote_history.append(emote)

    def halt(self) -> None:
        self.controller = None
        self.move_progress = 0

    def face_direction(self, facing: Facing) -> None:
        self.facing = facing

    def set_tile(self, tile: Tuple[int, int]) -> None:
        self.tile = (int(tile[0]), int(tile[1]))
