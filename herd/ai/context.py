"""Per-cycle evaluation context shared by every profile handler."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, List, Protocol

if TYPE_CHECKING:  # pragma: no cover - type checking only
    import polars as pl
    from game_rng import GameRNG
    from herd.constants import BehaviorProfile
    from herd.entities.agent import Agent
    from herd.systems.cooldowns import CooldownTracker, EmoteCooldown
    from herd.systems.hop_arc import ArcAnimationService
    from herd.systems.scheduler import DeferredActionScheduler
    from herd.world.tiles import TileService
    from herd.world.world_state import WorldState

# A candidate action: returns True if it actually fired.
Candidate = Callable[[], bool]


@dataclass
class AIContext:
    """Rebuilt at the start of every evaluation cycle; never persisted."""

    rng: "GameRNG"
    world: "WorldState"
    profile_key: str
    cooldowns: "CooldownTracker"
    tiles: "TileService"
    scheduler: "DeferredActionScheduler"
    emotes: "EmoteCooldown"
    arcs: "ArcAnimationService"
    census: "pl.DataFrame"
    now: int


class BehaviorHandler(Protocol):
    profile: "BehaviorProfile"

    def build_feasible(self, agent: "Agent", ctx: AIContext) -> List[Candidate]:
        """Return the structurally feasible candidates for ``agent`` this cycle."""
        ...


__all__ = ["AIContext", "BehaviorHandler", "Candidate"]
