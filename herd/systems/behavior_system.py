"""Evaluation orchestrator: one behaviour attempt per animal per cycle."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict

import structlog

from herd.ai import AIContext, BehaviorHandler, get_handler
from herd.constants import BehaviorProfile

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from game_rng import GameRNG
    from herd.systems.cooldowns import CooldownTracker, EmoteCooldown
    from herd.systems.hop_arc import ArcAnimationService
    from herd.systems.scheduler import DeferredActionScheduler
    from herd.world.tiles import TileService
    from herd.world.world_state import WorldState

log = structlog.get_logger()


@dataclass
class CycleReport:
    evaluated: int = 0
    skipped: int = 0
    attempted: int = 0
    fired: int = 0
    failed: int = 0


class BehaviorSystem:
    def __init__(
        self,
        handlers: Dict[BehaviorProfile, BehaviorHandler],
        rng: "GameRNG",
        profile_key: str,
        cooldowns: "CooldownTracker",
        tiles: "TileService",
        scheduler: "DeferredActionScheduler",
        emotes: "EmoteCooldown",
        arcs: "ArcAnimationService",
    ) -> None:
        self.handlers = handlers
        self.rng = rng
        self.profile_key = profile_key
        self.cooldowns = cooldowns
        self.tiles = tiles
        self.scheduler = scheduler
        self.emotes = emotes
        self.arcs = arcs

    def build_context(self, world: "WorldState") -> AIContext:
        return AIContext(
            rng=self.rng,
            world=world,
            profile_key=self.profile_key,
            cooldowns=self.cooldowns,
            tiles=self.tiles,
            scheduler=self.scheduler,
            emotes=self.emotes,
            arcs=self.arcs,
            census=world.agents.census(self.profile_key),
            now=world.ticks,
        )

    def run_cycle(self, world: "WorldState") -> CycleReport:
        """Give every tagged animal at most one behaviour attempt.

        A fault in one animal's evaluation is logged and does not stop the
        rest of the herd from being evaluated.
        """
        report = CycleReport()
        ctx = self.build_context(world)

        for agent in world.agents:
            if agent.location is None:
                continue
            report.evaluated += 1
            try:
                raw = agent.tags.get(self.profile_key)
                profile = BehaviorProfile.parse(raw)
                if profile is None:
                    if raw is not None:
                        log.debug("Unparsable profile tag", agent_id=agent.agent_id, value=raw)
                    report.skipped += 1
                    continue
                handler = get_handler(self.handlers, profile)
                if handler is None:
                    report.skipped += 1
                    continue

                candidates = handler.build_feasible(agent, ctx)
                if not candidates:
                    continue
                action = self.rng.choice(candidates)
                report.attempted += 1
                if action():
                    report.fired += 1
            except Exception as err:
                report.failed += 1
                log.error(
                    "Behavior evaluation failed",
                    agent_id=agent.agent_id,
                    name=agent.name,
                    error=str(err),
                    exc_info=True,
                )

        log.debug(
            "Behavior cycle complete",
            tick=ctx.now,
            evaluated=report.evaluated,
            skipped=report.skipped,
            attempted=report.attempted,
            fired=report.fired,
            failed=report.failed,
        )
        return report


__all__ = ["BehaviorSystem", "CycleReport"]
