# herd/entities/registry.py
from typing import Any, Dict, Iterator, List, Self

import polars as pl
import structlog

from herd.constants import BehaviorProfile
from herd.entities.agent import Agent

log = structlog.get_logger()

CENSUS_SCHEMA: dict[str, pl.DataType] = {
    "agent_id": pl.Int64,
    "location": pl.Utf8,
    "x": pl.Int32,
    "y": pl.Int32,
    "species": pl.Utf8,
    "home_type": pl.Utf8,
    "profile": pl.Utf8,
}


class AgentRegistry:
    """Arena of the live animals, keyed by id.

    Anything that must survive past a single call (deferred actions, hop arcs)
    keeps the id and goes through :meth:`resolve`, which returns ``None`` once
    the animal has been removed from the world.
    """

    def __init__(self: Self):
        self._agents: Dict[int, Agent] = {}
        self._next_agent_id: int = 1
        log.debug("AgentRegistry initialized")

    def _get_next_id(self: Self) -> int:
        while self._next_agent_id in self._agents:
            self._next_agent_id += 1
        current_id = self._next_agent_id
        self._next_agent_id += 1
        return current_id

    def create(self: Self, name: str, species: str, location: Any, tile, **fields: Any) -> Agent:
        agent = Agent(
            agent_id=self._get_next_id(),
            name=name,
            species=species,
            location=location,
            tile=(int(tile[0]), int(tile[1])),
            **fields,
        )
        self.add(agent)
        return agent

    def add(self: Self, agent: Agent) -> Agent:
        if agent.agent_id in self._agents:
            raise ValueError(f"Agent id {agent.agent_id} already registered")
        self._agents[agent.agent_id] = agent
        log.info(
            "Agent registered",
            agent_id=agent.agent_id,
            name=agent.name,
            species=agent.species,
            location=agent.location.name if agent.location else None,
        )
        return agent

    def remove(self: Self, agent_id: int) -> Agent | None:
        agent = self._agents.pop(agent_id, None)
        if agent is None:
            log.warning("Attempted to remove unknown agent", agent_id=agent_id)
            return None
        agent.location = None
        agent.halt()
        log.info("Agent removed", agent_id=agent_id, name=agent.name)
        return agent

    def resolve(self: Self, agent_id: int) -> Agent | None:
        """Return the live agent for ``agent_id`` or ``None``."""
        agent = self._agents.get(agent_id)
        if agent is None or agent.location is None:
            return None
        return agent

    def __contains__(self: Self, agent_id: object) -> bool:
        return agent_id in self._agents

    def __iter__(self: Self) -> Iterator[Agent]:
        # Snapshot so handlers may add or remove animals mid-iteration.
        return iter(list(self._agents.values()))

    def __len__(self: Self) -> int:
        return len(self._agents)

    def in_location(self: Self, location: Any) -> List[Agent]:
        return [a for a in self._agents.values() if a.location is location]

    def census(self: Self, profile_key: str) -> pl.DataFrame:
        """Snapshot of every placed animal for neighbour queries.

        ``profile`` holds the parsed profile value, or null when the tag is
        missing or unparsable.
        """
        rows: Dict[str, list] = {name: [] for name in CENSUS_SCHEMA}
        for agent in self._agents.values():
            if agent.location is None:
                continue
            profile = BehaviorProfile.parse(agent.tags.get(profile_key))
            rows["agent_id"].append(agent.agent_id)
            rows["location"].append(agent.location.name)
            rows["x"].append(agent.tile[0])
            rows["y"].append(agent.tile[1])
            rows["species"].append(agent.species)
            rows["home_type"].append(agent.home.building_type if agent.home else None)
            rows["profile"].append(profile.value if profile else None)
        return pl.DataFrame(rows, schema=CENSUS_SCHEMA)


def with_distance(census: pl.DataFrame, location_name: str, tile) -> pl.DataFrame:
    """Rows in ``location_name`` with a ``dist`` column measured from ``tile``."""
    x, y = tile
    return census.filter(pl.col("location") == location_name).with_columns(
        (
            ((pl.col("x") - x).cast(pl.Float64) ** 2 + (pl.col("y") - y).cast(pl.Float64) ** 2)
            .sqrt()
            .alias("dist")
        )
    )


__all__ = ["AgentRegistry", "CENSUS_SCHEMA", "with_distance"]
