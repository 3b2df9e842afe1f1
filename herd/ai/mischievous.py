"""Mischievous profile: gate pranks, door pranks and fence hops.

Every prank is rare and sits behind its own per-animal cooldown.  Door pranks
and hops are two-phase: the visible effect happens now and a deferred action
reverts the door or lands the hop a little later.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Set, Tuple

import structlog

from herd.ai.common import (
    EMOTE_MARGIN,
    ORTHOGONAL,
    SOUND_MARGIN,
    emote_on_screen,
    path_to,
    reset_speed_later,
    sound_on_screen,
)
from herd.constants import TILE_SIZE, BehaviorProfile, Emote, facing_for_delta
from herd.systems.hop_arc import duration_for_distance
from herd.world.location import BigCraftable, Fence, Tree

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from herd.ai.context import AIContext, Candidate
    from herd.config import MischievousConfig
    from herd.entities.agent import Agent
    from herd.world.location import Building, Location
    from herd.world.tiles import TileService

log = structlog.get_logger()

Tile = Tuple[int, int]


class MischievousHandler:
    profile = BehaviorProfile.MISCHIEVOUS

    def __init__(self, config: "MischievousConfig", tiles: "TileService") -> None:
        self.config = config
        self.tiles = tiles
        # homes whose door is flipped and waiting for its revert
        self._pending_doors: Set["Building"] = set()

    def build_feasible(self, agent: "Agent", ctx: "AIContext") -> List["Candidate"]:
        actions: List["Candidate"] = []
        location = agent.location
        if location is None:
            return actions

        agent.speed = self.config.speed

        if self.config.hide_enabled:
            hide_tile = self.find_hide_spot(agent, ctx)
            if hide_tile is not None:
                actions.append(lambda: self.try_hide(agent, hide_tile, ctx))

        # pranks only make sense outdoors
        if not location.outdoors:
            return actions

        gate_tile = self.nearby_gate(location, agent.tile, self.config.gate_radius)
        if gate_tile is not None:
            actions.append(lambda: self.try_gate_prank(agent, gate_tile, ctx))
        if self.near_home_door(agent) is not None:
            actions.append(lambda: self.try_door_prank(agent, ctx))
        if self.hop_target(location, agent.tile) is not None:
            actions.append(lambda: self.try_fence_hop(agent, ctx))
        return actions

    # ---------- structural checks ----------

    @staticmethod
    def nearby_gate(location: "Location", center: Tile, radius: int) -> Tile | None:
        """Closest gate within a square of ``radius`` around ``center``."""
        best: Tile | None = None
        best_dist = None
        for dy in range(-radius, radius + 1):
            for dx in range(-radius, radius + 1):
                tile = (center[0] + dx, center[1] + dy)
                obj = location.objects.get(tile)
                if isinstance(obj, Fence) and obj.is_gate:
                    dist = dx * dx + dy * dy
                    if best_dist is None or dist < best_dist:
                        best, best_dist = tile, dist
        return best

    def near_home_door(self, agent: "Agent") -> Tile | None:
        """Closest tile on or around the home's animal door, within range."""
        home, location = agent.home, agent.location
        if home is None or location is None or not location.outdoors:
            return None
        if home.parent_location is not location or home in self._pending_doors:
            return None
        door = home.door_tile()
        candidates = [door] + [(door[0] + dx, door[1] + dy) for dx, dy in ORTHOGONAL]
        best = min(candidates, key=agent.distance_to)
        if agent.distance_to(best) <= self.config.door_radius:
            return best
        return None

    def hop_target(self, location: "Location", center: Tile) -> Tuple[Tile, Tile] | None:
        """First adjacent fence whose far side is clear, as ``(fence, landing)``."""
        for dx, dy in ORTHOGONAL:
            fence_tile = (center[0] + dx, center[1] + dy)
            if not isinstance(location.objects.get(fence_tile), Fence):
                continue
            landing = (center[0] + 2 * dx, center[1] + 2 * dy)
            if self.tiles.is_clear_tile(location, landing):
                return fence_tile, landing
        return None

    def find_hide_spot(self, agent: "Agent", ctx: "AIContext") -> Tile | None:
        """A clear tile behind nearby cover, farther from the player than now."""
        location = agent.location
        player = ctx.world.player
        if location is None or player.location is not location:
            return None
        if agent.distance_to(player.tile) > self.config.hide_player_radius:
            return None

        cover = [
            tile
            for tile, obj in location.objects.items()
            if isinstance(obj, BigCraftable)
        ]
        if location.outdoors:
            cover.extend(
                tile
                for tile, feature in location.terrain_features.items()
                if isinstance(feature, Tree)
            )
        cover = [c for c in cover if agent.distance_to(c) <= self.config.hide_search_radius]

        px, py = player.tile
        current = agent.distance_to(player.tile)
        best: Tile | None = None
        best_score = None
        for cx, cy in sorted(cover):
            diff_x, diff_y = cx - px, cy - py
            if abs(diff_x) >= abs(diff_y):
                step = ((diff_x > 0) - (diff_x < 0), 0)
            else:
                step = (0, (diff_y > 0) - (diff_y < 0))
            if step == (0, 0):
                continue
            candidate = (cx + step[0], cy + step[1])
            if not self.tiles.is_clear_tile(location, candidate):
                continue
            from_player = ((candidate[0] - px) ** 2 + (candidate[1] - py) ** 2) ** 0.5
            if from_player <= current + 0.5:
                continue
            score = agent.distance_to(candidate)
            if best_score is None or score < best_score:
                best, best_score = candidate, score
        return best

    # ---------- actions ----------

    def try_hide(self, agent: "Agent", hide_tile: Tile, ctx: "AIContext") -> bool:
        if not ctx.cooldowns.allow(agent.agent_id, self.config.hide_cooldown_ticks, "hide"):
            return False
        if not ctx.rng.chance(self.config.hide_chance):
            return False
        if not self.tiles.is_clear_tile(agent.location, hide_tile):
            return False
        agent.speed = max(agent.speed, self.config.hide_speed)
        path_to(agent, hide_tile, ctx)
        emote_on_screen(agent, Emote.EXCLAMATION, ctx)
        reset_speed_later(ctx, agent.agent_id, self.config.speed, self.config.hide_speed_reset_ticks)
        log.debug("Mischief hide", agent_id=agent.agent_id, tile=hide_tile)
        return True

    def try_gate_prank(self, agent: "Agent", gate_tile: Tile, ctx: "AIContext") -> bool:
        if not ctx.cooldowns.allow(agent.agent_id, self.config.gate_cooldown_ticks, "gate"):
            return False
        if not ctx.rng.chance(self.config.gate_chance):
            return False
        location = agent.location
        gate = location.objects.get(gate_tile) if location else None
        if not (isinstance(gate, Fence) and gate.is_gate):
            return False
        path_to(agent, gate_tile, ctx)
        now_open = gate.toggle_gate()
        emote_on_screen(agent, Emote.QUESTION, ctx)
        sound_on_screen(ctx, location, gate_tile, "doorCreak")
        log.debug("Mischief gate prank", agent_id=agent.agent_id, gate=gate_tile, open=now_open)
        return True

    def try_door_prank(self, agent: "Agent", ctx: "AIContext") -> bool:
        if not ctx.cooldowns.allow(agent.agent_id, self.config.door_cooldown_ticks, "door"):
            return False
        if not ctx.rng.chance(self.config.door_chance):
            return False
        home = agent.home
        if home is None or not ctx.world.has_building(home):
            return False
        if self.near_home_door(agent) is None:
            return False

        original = home.door_open
        home.door_open = not original
        self._pending_doors.add(home)
        door_tile = home.door_tile()
        location = home.parent_location
        emote_on_screen(agent, Emote.EXCLAMATION, ctx)
        sound_on_screen(ctx, location, door_tile, "doorCreak")

        world = ctx.world
        agent_id = agent.agent_id

        def _revert() -> None:
            self._pending_doors.discard(home)
            if not world.has_building(home):
                return
            home.door_open = original
            if world.is_on_screen(location, door_tile, SOUND_MARGIN):
                world.play_sound(location, door_tile, "doorCreak")
            prankster = world.agents.resolve(agent_id)
            if prankster is not None and world.is_on_screen(prankster.location, prankster.tile, EMOTE_MARGIN):
                prankster.do_emote(Emote.QUESTION)

        ctx.scheduler.after(self.config.door_revert_ticks, _revert, label="door_revert")
        log.debug("Mischief door prank", agent_id=agent_id, open=home.door_open)
        return True

    def try_fence_hop(self, agent: "Agent", ctx: "AIContext") -> bool:
        if not ctx.cooldowns.allow(agent.agent_id, self.config.hop_cooldown_ticks, "hop"):
            return False
        if not ctx.rng.chance(self.config.hop_chance):
            return False
        location = agent.location
        if location is None:
            return False
        found = self.hop_target(location, agent.tile)
        if found is None:
            return False
        _, landing = found
        home = agent.home
        if home is not None and home.parent_location is location and landing == home.approach_tile():
            return False

        emote_on_screen(agent, Emote.EXCLAMATION, ctx)
        sound_on_screen(ctx, location, agent.tile, "dwop")
        self.start_hop(agent, landing, ctx)
        return True

    def start_hop(self, agent: "Agent", landing: Tile, ctx: "AIContext") -> None:
        location = agent.location
        dx, dy = landing[0] - agent.tile[0], landing[1] - agent.tile[1]
        agent.face_direction(facing_for_delta(dx, dy))
        agent.halt()
        agent.hop_offset = (dx * TILE_SIZE, dy * TILE_SIZE)

        pixels = max(abs(dx), abs(dy)) * TILE_SIZE
        duration = duration_for_distance(pixels, self.config.hop_pixels_per_tick)
        ctx.arcs.start(agent, duration, peak=self.config.hop_peak)

        world = ctx.world
        tiles = self.tiles
        agent_id = agent.agent_id

        def _land() -> None:
            hopper = world.agents.resolve(agent_id)
            if hopper is None:
                return
            hopper.hop_offset = (0.0, 0.0)
            hopper.y_jump_offset = 0
            if hopper.location is not location or not tiles.is_clear_tile(location, landing):
                log.debug("Hop landing abandoned", agent_id=agent_id, landing=landing)
                return
            hopper.set_tile(landing)
            if world.is_on_screen(location, landing, SOUND_MARGIN):
                world.play_sound(location, landing, "thudStep")
            if world.is_on_screen(location, landing, EMOTE_MARGIN):
                hopper.do_emote(Emote.QUESTION)

        ctx.scheduler.after(duration + self.config.hop_landing_slack_ticks, _land, label="hop_land")
        log.debug("Mischief fence hop", agent_id=agent_id, landing=landing, duration=duration)


__all__ = ["MischievousHandler"]
