from enum import Enum, IntEnum
from typing import Final


TICKS_PER_SECOND: Final[int] = 60
# Pixel size of one tile; hop offsets and on-screen checks work in pixels.
TILE_SIZE: Final[int] = 64


class BehaviorProfile(str, Enum):
    """Closed set of behaviour profiles an animal can carry."""

    IDLE = "Idle"
    HIGH_ENERGY = "HighEnergy"
    MISCHIEVOUS = "Mischievous"
    AFFECTIONATE = "Affectionate"
    RESOURCE_SEEKING = "ResourceSeeking"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def parse(cls, text: object) -> "BehaviorProfile | None":
        """Return the profile stored in ``text`` or ``None`` if unparsable.

        Accepts the persisted value, the enum name and the labels written by
        older saves (``Lazy``, ``Energetic``, ``Greedy``), ignoring case.
        """
        if not isinstance(text, str):
            return None
        key = text.strip().lower().replace("-", "").replace("_", "")
        return _PARSE_TABLE.get(key)


_LABELS: Final[dict[BehaviorProfile, str]] = {
    BehaviorProfile.IDLE: "idle",
    BehaviorProfile.HIGH_ENERGY: "high-energy",
    BehaviorProfile.MISCHIEVOUS: "mischievous",
    BehaviorProfile.AFFECTIONATE: "affectionate",
    BehaviorProfile.RESOURCE_SEEKING: "greedy",
}

_LEGACY_NAMES: Final[dict[str, BehaviorProfile]] = {
    "lazy": BehaviorProfile.IDLE,
    "energetic": BehaviorProfile.HIGH_ENERGY,
    "greedy": BehaviorProfile.RESOURCE_SEEKING,
}

_PARSE_TABLE: Final[dict[str, BehaviorProfile]] = {
    **{p.value.lower(): p for p in BehaviorProfile},
    **{p.name.lower().replace("_", ""): p for p in BehaviorProfile},
    **_LEGACY_NAMES,
}

ALL_PROFILES: Final[tuple[BehaviorProfile, ...]] = tuple(BehaviorProfile)


class Emote(IntEnum):
    """Emote bubble identifiers shown above animals."""

    QUESTION = 8
    HEART = 12
    EXCLAMATION = 16
    HAPPY = 20
    MUSIC = 24
    SLEEP = 4


class Facing(IntEnum):
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3


def facing_for_delta(dx: int, dy: int) -> Facing:
    """Pick the facing for a movement delta, preferring the horizontal axis on ties."""
    if abs(dx) >= abs(dy):
        return Facing.RIGHT if dx >= 0 else Facing.LEFT
    return Facing.DOWN if dy >= 0 else Facing.UP


__all__ = [
    "ALL_PROFILES",
    "BehaviorProfile",
    "Emote",
    "Facing",
    "TICKS_PER_SECOND",
    "TILE_SIZE",
    "facing_for_delta",
]
