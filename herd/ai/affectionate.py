"""Affectionate profile: seeks out the player and same-profile buddies."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import polars as pl
import structlog

from herd.ai.common import EMOTE_MARGIN, emote_on_screen, path_to, reset_speed_later, sound_on_screen
from herd.constants import BehaviorProfile, Emote
from herd.entities.registry import with_distance

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from herd.ai.context import AIContext, Candidate
    from herd.config import AffectionateConfig
    from herd.entities.agent import Agent

log = structlog.get_logger()


class AffectionateHandler:
    profile = BehaviorProfile.AFFECTIONATE

    def __init__(self, config: "AffectionateConfig") -> None:
        self.config = config

    def build_feasible(self, agent: "Agent", ctx: "AIContext") -> List["Candidate"]:
        actions: List["Candidate"] = []
        location = agent.location
        if location is None:
            return actions

        if self._player_nearby(agent, ctx):
            actions.append(lambda: self.try_run_to_player(agent, ctx))

        buddy_id = self.nearest_buddy(agent, ctx)
        if buddy_id is not None:
            actions.append(lambda: self.try_buddy_hangout(agent, buddy_id, ctx))

        actions.append(lambda: self.try_friendship_tick(agent, ctx))
        return actions

    def _player_nearby(self, agent: "Agent", ctx: "AIContext") -> bool:
        player = ctx.world.player
        return (
            player.location is agent.location
            and agent.distance_to(player.tile) < self.config.player_radius
        )

    def nearest_buddy(self, agent: "Agent", ctx: "AIContext") -> int | None:
        """Id of the closest other affectionate animal in range, if any.

        Ties on distance go to the lower id so the pick is stable.
        """
        nearby = (
            with_distance(ctx.census, agent.location.name, agent.tile)
            .filter(
                (pl.col("agent_id") != agent.agent_id)
                & (pl.col("profile") == BehaviorProfile.AFFECTIONATE.value)
                & (pl.col("dist") < self.config.buddy_radius)
            )
            .sort(["dist", "agent_id"])
        )
        if nearby.height == 0:
            return None
        return int(nearby["agent_id"][0])

    def hangout_chance(self, agent: "Agent", buddy: "Agent") -> float:
        chance = self.config.hangout_base_chance
        if (
            agent.home is not None
            and buddy.home is not None
            and agent.home.building_type == buddy.home.building_type
        ):
            chance += self.config.hangout_same_home_bonus
        if agent.species == buddy.species:
            chance += self.config.hangout_same_species_bonus
        return chance

    def try_run_to_player(self, agent: "Agent", ctx: "AIContext") -> bool:
        if not ctx.cooldowns.allow(agent.agent_id, self.config.run_cooldown_ticks, "run_to_player"):
            return False
        if not ctx.rng.chance(self.config.run_chance):
            return False
        if not self._player_nearby(agent, ctx):
            return False

        player = ctx.world.player
        agent.speed = self.config.run_speed
        path_to(agent, player.tile, ctx)

        if ctx.emotes.can_emote(agent) and emote_on_screen(agent, Emote.HEART, ctx):
            sound_on_screen(ctx, agent.location, agent.tile, "smallSelect")
            ctx.emotes.mark(agent)

        reset_speed_later(ctx, agent.agent_id, self.config.rest_speed, self.config.run_speed_reset_ticks)
        log.debug("Affection run to player", agent_id=agent.agent_id, target=player.tile)
        return True

    def try_buddy_hangout(self, agent: "Agent", buddy_id: int, ctx: "AIContext") -> bool:
        if not ctx.cooldowns.allow(agent.agent_id, self.config.hangout_cooldown_ticks, "hangout"):
            return False
        buddy = ctx.world.agents.resolve(buddy_id)
        if buddy is None:
            return False
        if not ctx.rng.chance(self.hangout_chance(agent, buddy)):
            return False
        if buddy.location is not agent.location:
            return False

        agent.speed = self.config.rest_speed
        path_to(agent, buddy.tile, ctx)

        world = ctx.world
        emotes = ctx.emotes
        agent_id = agent.agent_id
        radius = self.config.hangout_emote_radius

        def _greet() -> None:
            first = world.agents.resolve(agent_id)
            second = world.agents.resolve(buddy_id)
            if first is None or second is None or first.location is not second.location:
                return
            if first.distance_to(second.tile) > radius:
                return
            if not world.is_on_screen(first.location, first.tile, EMOTE_MARGIN):
                return
            if emotes.can_emote(first) and emotes.can_emote(second):
                first.do_emote(Emote.HEART)
                second.do_emote(Emote.HEART)
                emotes.mark(first)
                emotes.mark(second)
                log.debug("Buddies greeted", agent_id=agent_id, buddy_id=buddy_id)

        ctx.scheduler.after(self.config.hangout_check_ticks, _greet, label="buddy_greet")
        log.debug("Affection buddy hangout", agent_id=agent_id, buddy_id=buddy_id)
        return True

    def try_friendship_tick(self, agent: "Agent", ctx: "AIContext") -> bool:
        if not ctx.rng.chance(self.config.friendship_chance):
            return False
        agent.friendship = min(self.config.max_friendship, agent.friendship + self.config.friendship_gain)
        return True


__all__ = ["AffectionateHandler"]
