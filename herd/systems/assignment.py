"""Profile assignment for animals that do not have one yet."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

import structlog

from herd.constants import ALL_PROFILES, BehaviorProfile

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from game_rng import GameRNG
    from herd.entities.agent import Agent
    from herd.world.world_state import WorldState

log = structlog.get_logger()


class ProfileAssigner:
    def __init__(self, profile_key: str) -> None:
        self.profile_key = profile_key

    def profile_of(self, agent: "Agent") -> BehaviorProfile | None:
        return BehaviorProfile.parse(agent.tags.get(self.profile_key))

    def assign_if_missing(
        self,
        agent: "Agent",
        rng: "GameRNG",
        world: "WorldState | None" = None,
        announce: bool = False,
    ) -> BehaviorProfile | None:
        """Give ``agent`` a uniformly drawn profile unless it already has a tag.

        Any existing tag counts, parsable or not, so a value written by a newer
        build is never clobbered.  Returns the new profile, or ``None`` when
        nothing changed.
        """
        if self.profile_key in agent.tags:
            return None
        profile = rng.choice(ALL_PROFILES)
        agent.tags[self.profile_key] = profile.value
        if announce and world is not None:
            world.show_global_message(f"{agent.display_name} seems {profile.label}!")
        log.info(
            "Profile assigned",
            agent_id=agent.agent_id,
            name=agent.name,
            profile=profile.value,
        )
        return profile

    def assign_all(
        self,
        agents: Iterable["Agent"],
        rng: "GameRNG",
        world: "WorldState | None" = None,
        announce: bool = False,
    ) -> int:
        assigned = 0
        for agent in agents:
            if self.assign_if_missing(agent, rng, world, announce) is not None:
                assigned += 1
        return assigned


__all__ = ["ProfileAssigner"]
