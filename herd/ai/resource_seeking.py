"""Resource-seeking (greedy) profile.

Greedy animals graze the best nearby patch, camp the doorway on mornings
when the door is open, and shoulder their way out of crowds.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Tuple

import polars as pl
import structlog

from herd.ai.common import (
    EMOTE_MARGIN,
    emote_on_screen,
    path_to,
    random_adjacent_clear_tile,
)
from herd.constants import BehaviorProfile, Emote
from herd.entities.registry import with_distance
from herd.world.location import GrassPatch

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from herd.ai.context import AIContext, Candidate
    from herd.config import ResourceSeekingConfig
    from herd.entities.agent import Agent

log = structlog.get_logger()

Tile = Tuple[int, int]


class ResourceSeekingHandler:
    profile = BehaviorProfile.RESOURCE_SEEKING

    def __init__(self, config: "ResourceSeekingConfig") -> None:
        self.config = config

    def build_feasible(self, agent: "Agent", ctx: "AIContext") -> List["Candidate"]:
        actions: List["Candidate"] = []
        location = agent.location
        if location is None:
            return actions

        agent.speed = self.config.speed

        if location.outdoors and agent.fullness < self.config.max_fullness:
            patch_tile = self.best_patch(agent, ctx)
            if patch_tile is not None:
                actions.append(lambda: self.try_pursue_patch(agent, patch_tile, ctx))

        if self._can_camp_doorway(agent, ctx):
            actions.append(lambda: self.try_camp_doorway(agent, ctx))

        centroid = self.crowd_centroid(agent, ctx)
        if centroid is not None:
            actions.append(lambda: self.try_avoid_crowd(agent, centroid, ctx))
        return actions

    # ---------- structural checks ----------

    def best_patch(self, agent: "Agent", ctx: "AIContext") -> Tile | None:
        """Highest scoring grazable patch within the scan radius.

        score = -distance - crowd_penalty * (animals near the patch) + type bonus
        """
        location = agent.location
        cfg = self.config
        rows = [
            (tile[0], tile[1], feature.kind, agent.distance_to(tile), float(cfg.patch_type_bonus.get(feature.kind, 0.0)))
            for tile, feature in location.terrain_features.items()
            if isinstance(feature, GrassPatch)
            and feature.amount > 0
            and agent.distance_to(tile) <= cfg.patch_scan_radius
        ]
        if not rows:
            return None
        patches = pl.DataFrame(
            rows,
            schema={"px": pl.Int32, "py": pl.Int32, "kind": pl.Utf8, "dist": pl.Float64, "bonus": pl.Float64},
            orient="row",
        )

        others = ctx.census.filter(
            (pl.col("location") == location.name) & (pl.col("agent_id") != agent.agent_id)
        ).select(["x", "y"])
        if others.height:
            radius_sq = cfg.crowd_penalty_radius ** 2
            crowd = (
                patches.select(["px", "py"])
                .join(others, how="cross")
                .filter(
                    (pl.col("x") - pl.col("px")).cast(pl.Float64) ** 2
                    + (pl.col("y") - pl.col("py")).cast(pl.Float64) ** 2
                    <= radius_sq
                )
                .group_by(["px", "py"])
                .agg(pl.len().alias("crowd"))
            )
            patches = patches.join(crowd, on=["px", "py"], how="left").with_columns(
                pl.col("crowd").fill_null(0)
            )
        else:
            patches = patches.with_columns(pl.lit(0).alias("crowd"))

        ranked = patches.with_columns(
            (-pl.col("dist") - cfg.crowd_penalty * pl.col("crowd").cast(pl.Float64) + pl.col("bonus")).alias("score")
        ).sort(["score", "dist", "px", "py"], descending=[True, False, False, False])
        best = ranked.row(0, named=True)
        return int(best["px"]), int(best["py"])

    def _can_camp_doorway(self, agent: "Agent", ctx: "AIContext") -> bool:
        home = agent.home
        location = agent.location
        if home is None or location is None or location.outdoors:
            return False
        if home.interior is not location or location.entry_tile is None:
            return False
        if not home.door_open:
            return False
        return self.config.morning_start <= ctx.world.time_of_day < self.config.morning_end

    def crowd_centroid(self, agent: "Agent", ctx: "AIContext") -> Tuple[float, float] | None:
        neighbours = with_distance(ctx.census, agent.location.name, agent.tile).filter(
            (pl.col("agent_id") != agent.agent_id) & (pl.col("dist") < self.config.crowd_radius)
        )
        if neighbours.height == 0:
            return None
        return float(neighbours["x"].mean()), float(neighbours["y"].mean())

    # ---------- actions ----------

    def try_pursue_patch(self, agent: "Agent", patch_tile: Tile, ctx: "AIContext") -> bool:
        if not ctx.cooldowns.allow(agent.agent_id, self.config.pursue_cooldown_ticks, "pursue"):
            return False
        if not ctx.rng.chance(self.config.pursue_chance):
            return False
        location = agent.location
        patch = location.terrain_features.get(patch_tile) if location else None
        if not isinstance(patch, GrassPatch) or patch.amount <= 0:
            return False
        if agent.fullness >= self.config.max_fullness:
            return False

        path_to(agent, patch_tile, ctx)

        world = ctx.world
        cfg = self.config
        agent_id = agent.agent_id

        def _arrive() -> None:
            grazer = world.agents.resolve(agent_id)
            if grazer is None or grazer.location is not location:
                return
            current = location.terrain_features.get(patch_tile)
            if not isinstance(current, GrassPatch) or current.amount <= 0:
                return
            if grazer.distance_to(patch_tile) > cfg.arrival_radius:
                log.debug("Patch not reached in time", agent_id=agent_id, patch=patch_tile)
                return
            current.amount -= 1
            if current.amount <= 0:
                del location.terrain_features[patch_tile]
            grazer.fullness = min(cfg.max_fullness, grazer.fullness + cfg.fullness_per_bite)
            if world.is_on_screen(location, grazer.tile, EMOTE_MARGIN):
                grazer.do_emote(Emote.HAPPY)
            log.debug("Patch grazed", agent_id=agent_id, patch=patch_tile, left=current.amount)

        ctx.scheduler.after(cfg.arrival_check_ticks, _arrive, label="graze_arrival")
        log.debug("Greedy pursue patch", agent_id=agent_id, patch=patch_tile)
        return True

    def try_camp_doorway(self, agent: "Agent", ctx: "AIContext") -> bool:
        if not ctx.cooldowns.allow(agent.agent_id, self.config.doorway_cooldown_ticks, "doorway"):
            return False
        if not ctx.rng.chance(self.config.doorway_chance):
            return False
        if not self._can_camp_doorway(agent, ctx):
            return False
        path_to(agent, agent.location.entry_tile, ctx)
        log.debug("Greedy camps doorway", agent_id=agent.agent_id)
        return True

    def try_avoid_crowd(self, agent: "Agent", centroid: Tuple[float, float], ctx: "AIContext") -> bool:
        if not ctx.rng.chance(self.config.avoid_chance):
            return False
        location = agent.location
        if location is None:
            return False

        away_x = agent.tile[0] - centroid[0]
        away_y = agent.tile[1] - centroid[1]
        length = (away_x * away_x + away_y * away_y) ** 0.5
        target: Tile | None = None
        if length > 1e-6:
            step = self.config.avoid_step
            target = (
                int(round(agent.tile[0] + away_x / length * step)),
                int(round(agent.tile[1] + away_y / length * step)),
            )
            if not ctx.tiles.is_clear_tile(location, target):
                target = None
        if target is None:
            target = random_adjacent_clear_tile(agent, ctx)
        if target is None:
            return False

        path_to(agent, target, ctx)
        emote_on_screen(agent, Emote.QUESTION, ctx)
        log.debug("Greedy avoids crowd", agent_id=agent.agent_id, target=target)
        return True


__all__ = ["ResourceSeekingHandler"]
