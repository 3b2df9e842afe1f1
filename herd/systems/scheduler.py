"""Deferred actions on the logical tick clock.

Two-phase behaviours (a door that swings back, a hop that lands) register a
callback here instead of waiting.  Callbacks run synchronously from the host
tick once their delay has elapsed and must re-resolve whatever they captured,
since the animal or building may be gone by then.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, List, Tuple

import heapq

import structlog

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from herd.world.world_state import WorldClock

log = structlog.get_logger()

DeferredCallback = Callable[[], None]


class DeferredActionScheduler:
    def __init__(self, clock: "WorldClock") -> None:
        self.clock = clock
        self._queue: List[Tuple[int, int, str, DeferredCallback]] = []
        self._next_id: int = 1

    @property
    def pending(self) -> int:
        return len(self._queue)

    def after(self, delay: int, callback: DeferredCallback, label: str | None = None) -> int:
        """Run ``callback`` once, no sooner than ``delay`` ticks from now."""
        due = self.clock.ticks + max(0, int(delay))
        action_id = self._next_id
        self._next_id += 1
        heapq.heappush(self._queue, (due, action_id, label or "deferred", callback))
        log.debug("Deferred action scheduled", action_id=action_id, due=due, label=label)
        return action_id

    def process(self, now: int | None = None) -> int:
        """Fire every callback due at or before ``now``; returns how many ran."""
        if now is None:
            now = self.clock.ticks
        fired = 0
        while self._queue and self._queue[0][0] <= now:
            due, action_id, label, callback = heapq.heappop(self._queue)
            fired += 1
            try:
                callback()
            except Exception as err:
                log.error(
                    "Deferred action failed",
                    action_id=action_id,
                    label=label,
                    due=due,
                    error=str(err),
                    exc_info=True,
                )
        return fired


__all__ = ["DeferredActionScheduler", "DeferredCallback"]
