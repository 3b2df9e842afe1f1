"""Vertical-offset interpolation for animals mid-hop.

The tile change of a hop happens at a single instant (a deferred action); this
service only produces the smooth rise-and-fall drawn in between.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict

import structlog

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from herd.entities.agent import Agent
    from herd.entities.registry import AgentRegistry
    from herd.world.world_state import WorldClock

log = structlog.get_logger()


@dataclass(frozen=True)
class ArcEntry:
    agent_id: int
    start_tick: int
    duration_ticks: int
    peak: int

    def progress(self, now: int) -> float:
        return (now - self.start_tick) / float(self.duration_ticks)


def arc_offset(t: float, peak: int) -> int:
    """Offset at normalised progress ``t``; negative is up on screen."""
    return -int(math.sin(math.pi * t) * peak)


def duration_for_distance(pixels: float, pixels_per_tick: float) -> int:
    """Ticks needed to cover ``pixels`` at ``pixels_per_tick``, at least one."""
    if pixels_per_tick <= 0:
        raise ValueError("pixels_per_tick must be positive")
    return max(1, math.ceil(abs(pixels) / pixels_per_tick))


class ArcAnimationService:
    def __init__(self, clock: "WorldClock", registry: "AgentRegistry") -> None:
        self.clock = clock
        self.registry = registry
        self._arcs: Dict[int, ArcEntry] = {}

    def __contains__(self, agent_id: object) -> bool:
        return agent_id in self._arcs

    def __len__(self) -> int:
        return len(self._arcs)

    def get(self, agent_id: int) -> ArcEntry | None:
        return self._arcs.get(agent_id)

    def start(self, agent: "Agent", duration_ticks: int, peak: int = 30) -> None:
        if agent is None:
            return
        entry = ArcEntry(agent.agent_id, self.clock.ticks, max(1, int(duration_ticks)), peak)
        self._arcs[agent.agent_id] = entry
        log.debug(
            "Arc started",
            agent_id=agent.agent_id,
            duration=entry.duration_ticks,
            peak=peak,
        )

    def update(self, now: int | None = None) -> None:
        if not self._arcs:
            return
        if now is None:
            now = self.clock.ticks
        done = []
        for agent_id, entry in self._arcs.items():
            agent = self.registry.resolve(agent_id)
            if agent is None:
                done.append(agent_id)
                continue
            t = entry.progress(now)
            if t >= 1.0:
                agent.y_jump_offset = 0
                done.append(agent_id)
            else:
                agent.y_jump_offset = arc_offset(max(0.0, t), entry.peak)
        for agent_id in done:
            del self._arcs[agent_id]


__all__ = ["ArcAnimationService", "ArcEntry", "arc_offset", "duration_for_distance"]
