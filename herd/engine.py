"""Host-facing entry point: wires the services and exposes lifecycle hooks."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from game_rng import GameRNG
from herd.ai import build_handlers
from herd.config import BehaviorConfig
from herd.systems.assignment import ProfileAssigner
from herd.systems.behavior_system import BehaviorSystem, CycleReport
from herd.systems.cooldowns import CooldownTracker, EmoteCooldown
from herd.systems.hop_arc import ArcAnimationService
from herd.systems.morning import MorningBonusService
from herd.systems.scheduler import DeferredActionScheduler
from herd.world.tiles import TileService

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from herd.world.world_state import WorldState

log = structlog.get_logger()


class BehaviorEngine:
    """Owns every behaviour service for one world.

    The host calls :meth:`on_day_started` at the start of each in-world day,
    :meth:`on_update_ticked` once per tick and :meth:`on_agent_added` whenever
    animals are bought or born.
    """

    def __init__(
        self,
        world: "WorldState",
        config: BehaviorConfig | None = None,
        rng: "GameRNG | None" = None,
    ) -> None:
        if rng is None:
            rng = GameRNG()
        self.world = world
        self.config = config or BehaviorConfig()
        self.rng = rng

        engine_cfg = self.config.engine
        world.max_pathfinding_per_tick = engine_cfg.max_pathfinding_per_tick
        self.profile_key = engine_cfg.profile_key

        self.tiles = TileService()
        self.cooldowns = CooldownTracker(world.clock)
        self.emotes = EmoteCooldown(world.clock, engine_cfg.emote_key, engine_cfg.emote_cooldown_ticks)
        self.scheduler = DeferredActionScheduler(world.clock)
        self.arcs = ArcAnimationService(world.clock, world.agents)
        self.assigner = ProfileAssigner(self.profile_key)
        self.morning = MorningBonusService(self.config.morning_bonus.chance)
        self.handlers = build_handlers(self.config, self.tiles)
        self.behaviors = BehaviorSystem(
            self.handlers,
            rng,
            self.profile_key,
            self.cooldowns,
            self.tiles,
            self.scheduler,
            self.emotes,
            self.arcs,
        )
        self.last_report: CycleReport | None = None
        log.info(
            "BehaviorEngine initialized",
            cadence=engine_cfg.cadence_ticks,
            profile_key=self.profile_key,
            handlers=len(self.handlers),
        )

    # --- Hooks -----------------------------------------------------------

    def on_day_started(self) -> int:
        """Assign missing profiles quietly, then roll the morning hay bonus."""
        assigned = self.assigner.assign_all(self.world.agents, self.rng)
        if assigned:
            log.info("Profiles assigned at day start", count=assigned)
        return self.morning.apply(self.world, self.profile_key, self.rng)

    def on_update_ticked(self, tick: int | None = None) -> CycleReport | None:
        """Per-tick work; returns the cycle report on evaluation ticks."""
        if tick is None:
            tick = self.world.ticks
        self.scheduler.process(tick)
        self.arcs.update(tick)
        if tick % self.config.engine.cadence_ticks != 0:
            return None
        self.last_report = self.behaviors.run_cycle(self.world)
        return self.last_report

    def on_agent_added(self) -> int:
        """Schedule an announced assignment pass for newly arrived animals."""
        world = self.world

        def _assign_new() -> None:
            count = self.assigner.assign_all(world.agents, self.rng, world, announce=True)
            log.debug("Deferred assignment pass", assigned=count)

        return self.scheduler.after(
            self.config.engine.agent_added_delay_ticks, _assign_new, label="assign_new_agents"
        )

    # --- Host helpers ----------------------------------------------------

    def start_day(self) -> int:
        self.world.start_day()
        return self.on_day_started()

    def tick(self) -> CycleReport | None:
        now = self.world.advance_tick()
        return self.on_update_ticked(now)


__all__ = ["BehaviorEngine"]
