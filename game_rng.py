"""Shared random source for the behaviour engine.

Every probabilistic decision in the engine (profile draws, probability gates,
candidate selection, random wander targets) goes through a :class:`GameRNG`
instance that is passed explicitly through the evaluation context.  Nothing in
the engine reaches for a module-level generator, so tests can hand in a seeded
instance or a scripted double with the same method names.
"""

from __future__ import annotations

import random
from typing import Any, Dict, List, Optional, Sequence, Tuple, TypeVar

import numpy as np

T = TypeVar("T")


class GameRNG:
    def __init__(self, seed: Optional[int] = None) -> None:
        self.initial_seed = seed if seed is not None else random.randint(0, 2**32 - 1)
        self.rng = np.random.default_rng(self.initial_seed)

    # ------------------------------------------------------------------
    # basic random helpers
    # ------------------------------------------------------------------
    def get_int(self, a: int, b: int) -> int:
        """Return an integer in the closed range ``[a, b]``."""
        if a > b:
            raise ValueError("a <= b")
        return int(self.rng.integers(a, b + 1))

    def get_float(self, a: float = 0.0, b: float = 1.0) -> float:
        """Return a float in the half-open range ``[a, b)``."""
        if a > b:
            raise ValueError("a <= b")
        return a + (b - a) * float(self.rng.random())

    def chance(self, probability: float) -> bool:
        """Roll a probability gate.

        ``True`` when a uniform draw falls strictly below ``probability``;
        probabilities of 0 never pass and 1 always passes.
        """
        if probability <= 0.0:
            return False
        if probability >= 1.0:
            return True
        return self.get_float() < probability

    def choice(self, items: Sequence[T]) -> T:
        """Pick one element of ``items`` uniformly."""
        if not items:
            raise ValueError("items empty")
        return items[self.get_int(0, len(items) - 1)]

    def get_offset(self, radius: int) -> Tuple[int, int]:
        """Return a random ``(dx, dy)`` with both components in ``[-radius, radius]``."""
        if radius < 0:
            raise ValueError("radius >= 0")
        return self.get_int(-radius, radius), self.get_int(-radius, radius)

    # ------------------------------------------------------------------
    # sequence utilities
    # ------------------------------------------------------------------
    def shuffle(self, seq: List[Any]) -> None:
        self.rng.shuffle(seq)

    # ------------------------------------------------------------------
    # state management
    # ------------------------------------------------------------------
    def get_state(self) -> Dict[str, Any]:
        return {
            "random_state": self.rng.bit_generator.state,
            "initial_seed": self.initial_seed,
        }

    def set_state(self, state: Dict[str, Any]) -> None:
        if "random_state" in state:
            self.rng.bit_generator.state = state["random_state"]
        if "initial_seed" in state:
            self.initial_seed = state["initial_seed"]


__all__ = ["GameRNG"]
