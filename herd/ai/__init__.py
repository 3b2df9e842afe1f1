"""AI package providing one behaviour handler per profile.

Each handler turns an animal plus the per-cycle :class:`AIContext` into a
list of structurally feasible candidate actions.  The orchestrator picks one
of them at random and invokes it; the candidate itself rolls its cooldown and
probability gates and reports whether it actually fired.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict

import structlog

from herd.constants import BehaviorProfile

from .affectionate import AffectionateHandler
from .context import AIContext, BehaviorHandler, Candidate
from .energetic import HighEnergyHandler
from .idle import IdleHandler
from .mischievous import MischievousHandler
from .resource_seeking import ResourceSeekingHandler

if TYPE_CHECKING:  # pragma: no cover - for type checking
    from herd.config import BehaviorConfig
    from herd.world.tiles import TileService

log = structlog.get_logger()


def build_handlers(
    config: "BehaviorConfig", tiles: "TileService"
) -> Dict[BehaviorProfile, BehaviorHandler]:
    """Instantiate the handler table from the loaded configuration."""
    return {
        BehaviorProfile.IDLE: IdleHandler(config.idle),
        BehaviorProfile.HIGH_ENERGY: HighEnergyHandler(config.high_energy),
        BehaviorProfile.MISCHIEVOUS: MischievousHandler(config.mischievous, tiles),
        BehaviorProfile.AFFECTIONATE: AffectionateHandler(config.affectionate),
        BehaviorProfile.RESOURCE_SEEKING: ResourceSeekingHandler(config.resource_seeking),
    }


def get_handler(
    handlers: Dict[BehaviorProfile, BehaviorHandler], profile: BehaviorProfile | None
) -> BehaviorHandler | None:
    """Return the handler for ``profile``.

    Unlike entity AI types there is no sensible default: an animal whose
    profile has no handler simply does nothing this cycle.
    """
    handler = handlers.get(profile) if profile is not None else None
    if handler is None:
        log.debug("No handler for profile", profile=profile)
    return handler


__all__ = [
    "AIContext",
    "AffectionateHandler",
    "BehaviorHandler",
    "Candidate",
    "HighEnergyHandler",
    "IdleHandler",
    "MischievousHandler",
    "ResourceSeekingHandler",
    "build_handlers",
    "get_handler",
]
