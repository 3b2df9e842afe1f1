"""Small helpers shared by the profile handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Tuple

import structlog

from herd.constants import Emote, Facing
from herd.world.pathing import PathController

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from herd.ai.context import AIContext
    from herd.entities.agent import Agent
    from herd.world.location import Location

log = structlog.get_logger()

ORTHOGONAL: Tuple[Tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))

# Pixel margins around the viewport used for emote and sound gating.
EMOTE_MARGIN = 128
SOUND_MARGIN = 64


def emote_on_screen(agent: "Agent", emote: Emote, ctx: "AIContext") -> bool:
    if ctx.world.is_on_screen(agent.location, agent.tile, EMOTE_MARGIN):
        agent.do_emote(emote)
        return True
    return False


def sound_on_screen(
    ctx: "AIContext", location: "Location | None", tile: Tuple[int, int], cue: str
) -> bool:
    if ctx.world.is_on_screen(location, tile, SOUND_MARGIN):
        ctx.world.play_sound(location, tile, cue)
        return True
    return False


def path_to(
    agent: "Agent",
    target: Tuple[int, int],
    ctx: "AIContext",
    end_facing: Facing = Facing.DOWN,
) -> bool:
    """Give ``agent`` a fresh controller towards ``target``.

    Returns ``False`` without touching the agent when this tick's pathing
    budget is spent.
    """
    if agent.location is None:
        return False
    if not ctx.world.try_begin_pathfind():
        log.debug("Pathing budget exhausted", agent_id=agent.agent_id)
        return False
    agent.controller = PathController(agent, agent.location, target, end_facing)
    agent.move_progress = 0
    return True


def clamp_to_map(location: "Location", tile: Tuple[int, int]) -> Tuple[int, int]:
    x = min(max(0, tile[0]), location.width - 1)
    y = min(max(0, tile[1]), location.height - 1)
    return x, y


def reset_speed_later(ctx: "AIContext", agent_id: int, speed: int, delay: int) -> None:
    registry = ctx.world.agents

    def _reset() -> None:
        agent = registry.resolve(agent_id)
        if agent is not None:
            agent.speed = speed

    ctx.scheduler.after(delay, _reset, label="speed_reset")


def random_adjacent_clear_tile(agent: "Agent", ctx: "AIContext") -> Tuple[int, int] | None:
    options = [(agent.tile[0] + dx, agent.tile[1] + dy) for dx, dy in ORTHOGONAL]
    ctx.rng.shuffle(options)
    for tile in options:
        if ctx.tiles.is_clear_tile(agent.location, tile):
            return tile
    return None


__all__ = [
    "ORTHOGONAL",
    "clamp_to_map",
    "emote_on_screen",
    "path_to",
    "random_adjacent_clear_tile",
    "reset_speed_later",
    "sound_on_screen",
]
