"""Idle (low-energy) profile.

Idle animals move slowly, nap often and drift back towards their house
when they have wandered too far from an open door.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Tuple

import structlog

from herd.ai.common import clamp_to_map, emote_on_screen, path_to
from herd.constants import BehaviorProfile, Emote

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from herd.ai.context import AIContext, Candidate
    from herd.config import IdleConfig
    from herd.entities.agent import Agent

log = structlog.get_logger()


class IdleHandler:
    profile = BehaviorProfile.IDLE

    def __init__(self, config: "IdleConfig") -> None:
        self.config = config

    def build_feasible(self, agent: "Agent", ctx: "AIContext") -> List["Candidate"]:
        actions: List["Candidate"] = []
        agent.speed = self.config.speed

        actions.append(lambda: self.try_rest(agent, ctx))

        door = self._open_door_outside(agent)
        if door is not None and agent.distance_to(door) > self.config.leash_radius:
            actions.append(lambda: self.try_return_home(agent, ctx))
        else:
            actions.append(lambda: self.try_wander_near(agent, ctx))
        return actions

    @staticmethod
    def _open_door_outside(agent: "Agent") -> Tuple[int, int] | None:
        """The tile in front of the home's open door, if the animal is outside it."""
        home = agent.home
        if home is None or not home.door_open:
            return None
        if agent.location is None or home.parent_location is not agent.location:
            return None
        return home.approach_tile()

    def try_rest(self, agent: "Agent", ctx: "AIContext") -> bool:
        if not ctx.rng.chance(self.config.rest_chance):
            return False
        agent.halt()
        emote_on_screen(agent, Emote.SLEEP, ctx)
        log.debug("Idle rest", agent_id=agent.agent_id)
        return True

    def try_return_home(self, agent: "Agent", ctx: "AIContext") -> bool:
        if not ctx.rng.chance(self.config.return_home_chance):
            return False
        door = self._open_door_outside(agent)
        if door is None:
            return False
        path_to(agent, door, ctx)
        log.debug("Idle return home", agent_id=agent.agent_id, door=door)
        return True

    def try_wander_near(self, agent: "Agent", ctx: "AIContext") -> bool:
        if not ctx.rng.chance(self.config.wander_chance):
            return False
        location = agent.location
        if location is None:
            return False
        dx, dy = ctx.rng.get_offset(self.config.wander_radius)
        target = clamp_to_map(location, (agent.tile[0] + dx, agent.tile[1] + dy))
        if not location.is_walkable(target):
            return False
        path_to(agent, target, ctx)
        emote_on_screen(agent, Emote.MUSIC, ctx)
        log.debug("Idle wander", agent_id=agent.agent_id, target=target)
        return True


__all__ = ["IdleHandler"]
