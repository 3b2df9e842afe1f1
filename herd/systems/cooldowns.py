"""Per-agent minimum-interval gates.

Two flavours are provided: :class:`CooldownTracker` keeps stamps in memory
(lost on restart), while :class:`EmoteCooldown` writes its stamp into the
animal's tag map so it survives a save.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Hashable, Tuple

import structlog

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from herd.entities.agent import Agent
    from herd.world.world_state import WorldClock

log = structlog.get_logger()


class CooldownTracker:
    def __init__(self, clock: "WorldClock") -> None:
        self.clock = clock
        self._stamps: Dict[Tuple[Hashable, int], int] = {}

    def allow(self, agent_id: int, min_interval: int, channel: Hashable = None) -> bool:
        """Stamp and return ``True`` if ``agent_id`` is off cooldown.

        Off cooldown means no stamp exists for ``(channel, agent_id)`` or more
        than ``min_interval`` ticks have passed since it was written.  A
        refused call leaves the stamp untouched.
        """
        now = self.clock.ticks
        key = (channel, agent_id)
        last = self._stamps.get(key)
        if last is not None and now - last <= min_interval:
            return False
        self._stamps[key] = now
        return True

    def last_fired(self, agent_id: int, channel: Hashable = None) -> int | None:
        return self._stamps.get((channel, agent_id))

    def __len__(self) -> int:
        return len(self._stamps)


class EmoteCooldown:
    def __init__(self, clock: "WorldClock", key: str, min_interval: int = 600) -> None:
        self.clock = clock
        self.key = key
        self.min_interval = min_interval

    def can_emote(self, agent: "Agent") -> bool:
        stamp = agent.tags.get(self.key)
        if stamp is None:
            return True
        try:
            last = int(stamp)
        except ValueError:
            log.debug("Unparsable emote stamp ignored", agent_id=agent.agent_id, stamp=stamp)
            return True
        return self.clock.ticks - last > self.min_interval

    def mark(self, agent: "Agent") -> None:
        agent.tags[self.key] = str(self.clock.ticks)


__all__ = ["CooldownTracker", "EmoteCooldown"]
