"""High-energy profile: fast, restless, quiet only late at night."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Tuple

import structlog

from herd.ai.common import clamp_to_map, emote_on_screen, path_to, reset_speed_later
from herd.constants import BehaviorProfile, Emote

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from herd.ai.context import AIContext, Candidate
    from herd.config import HighEnergyConfig
    from herd.entities.agent import Agent

log = structlog.get_logger()


class HighEnergyHandler:
    profile = BehaviorProfile.HIGH_ENERGY

    def __init__(self, config: "HighEnergyConfig") -> None:
        self.config = config

    def build_feasible(self, agent: "Agent", ctx: "AIContext") -> List["Candidate"]:
        actions: List["Candidate"] = []
        agent.speed = self.config.speed
        location = agent.location
        if location is None or ctx.world.time_of_day >= self.config.late_cutoff:
            return actions

        dx, dy = ctx.rng.get_offset(self.config.burst_radius)
        burst_target = clamp_to_map(location, (agent.tile[0] + dx, agent.tile[1] + dy))
        actions.append(lambda: self.try_burst(agent, burst_target, ctx))

        explore_target = self._pick_explore_target(agent, ctx)
        if explore_target is not None:
            actions.append(lambda: self.try_explore(agent, explore_target, ctx))
        return actions

    def _pick_explore_target(self, agent: "Agent", ctx: "AIContext") -> Tuple[int, int] | None:
        """A random clear tile farther out than a burst would reach."""
        radius = self.config.explore_radius
        min_dist = min(self.config.burst_radius, radius)
        for _ in range(self.config.explore_attempts):
            dx, dy = ctx.rng.get_offset(radius)
            tile = (agent.tile[0] + dx, agent.tile[1] + dy)
            if agent.distance_to(tile) < max(1, min_dist):
                continue
            if ctx.tiles.is_clear_tile(agent.location, tile):
                return tile
        return None

    def try_burst(self, agent: "Agent", target: Tuple[int, int], ctx: "AIContext") -> bool:
        if not ctx.cooldowns.allow(agent.agent_id, self.config.burst_cooldown_ticks, "burst"):
            return False
        if not ctx.rng.chance(self.config.burst_chance):
            return False
        location = agent.location
        if location is None or not location.is_tile_on_map(target):
            return False
        agent.speed = self.config.burst_speed
        path_to(agent, target, ctx)
        emote_on_screen(agent, Emote.HAPPY, ctx)
        reset_speed_later(ctx, agent.agent_id, self.config.speed, self.config.burst_duration_ticks)
        log.debug("Energetic burst", agent_id=agent.agent_id, target=target)
        return True

    def try_explore(self, agent: "Agent", target: Tuple[int, int], ctx: "AIContext") -> bool:
        if not ctx.cooldowns.allow(agent.agent_id, self.config.explore_cooldown_ticks, "explore"):
            return False
        if not ctx.rng.chance(self.config.explore_chance):
            return False
        if not ctx.tiles.is_clear_tile(agent.location, target):
            return False
        path_to(agent, target, ctx)
        log.debug("Energetic explore", agent_id=agent.agent_id, target=target)
        return True


__all__ = ["HighEnergyHandler"]
