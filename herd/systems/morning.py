"""Once-per-day hay bonus for resource-seeking animals."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from herd.constants import BehaviorProfile

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from game_rng import GameRNG
    from herd.world.world_state import WorldState

log = structlog.get_logger()


class MorningBonusService:
    def __init__(self, chance: float = 0.15) -> None:
        self.chance = chance

    def apply(self, world: "WorldState", profile_key: str, rng: "GameRNG") -> int:
        """Let each greedy animal try to eat one extra unit of hay.

        Every eligible animal rolls independently; a success with an empty
        pool is logged and consumes nothing.  Returns units consumed.
        """
        farm = world.farm
        total_hay = farm.pieces_of_hay
        consumed = 0
        for agent in world.agents:
            if BehaviorProfile.parse(agent.tags.get(profile_key)) is not BehaviorProfile.RESOURCE_SEEKING:
                continue
            if not rng.chance(self.chance):
                continue
            if total_hay > 0:
                total_hay -= 1
                consumed += 1
                world.show_global_message(
                    f"{agent.display_name} devoured an extra serving of hay!"
                )
            else:
                log.debug(
                    "Tried to eat more hay but there was none left",
                    agent_id=agent.agent_id,
                    name=agent.name,
                )
        farm.pieces_of_hay = max(0, total_hay)
        log.info("Morning hay bonus applied", consumed=consumed, remaining=farm.pieces_of_hay)
        return consumed


__all__ = ["MorningBonusService"]
