"""Keep a leashed entity's own moves inside its leash radius."""

from __future__ import annotations

from typing import Any, Optional
import logging

from ...config import CONFIG, LeashConfig
from ...core.events import ProposeMove
from .constraint import clamp, within
from .geometry import center_of, current_center, top_left
from .relation import get_leash

logger = logging.getLogger(__name__)


class LeashEnforcementSystem:
    """Veto or clamp proposals that would carry a target beyond its leash.

    ``exceed_behavior`` picks between ``"block"`` (the move is rejected) and
    ``"clamp"`` (the move stops at the boundary). ``enforcement_metric``
    picks the authoritative distance rule: the scene grid (``"grid"``) or
    straight pixels (``"pixel"``). Internal updates are never intercepted.
    """

    def __init__(self, scene: Any, settings: LeashConfig | None = None) -> None:
        self.scene = scene
        self.settings = settings or CONFIG.leash

    def on_propose(self, event: ProposeMove) -> Optional[bool]:
        if event.internal or event.vetoed:
            return None
        if event.x is None and event.y is None:
            return None

        leash = get_leash(self.scene, event.entity_id)
        if leash is None or leash.scene_id != self.scene.id:
            return None
        handler = current_center(self.scene, leash.handler_id)
        pos = self.scene.position(event.entity_id)
        if handler is None or pos is None:
            return None

        new_x = pos.x if event.x is None else event.x
        new_y = pos.y if event.y is None else event.y
        proposed = center_of(self.scene, event.entity_id, new_x, new_y)
        metric = self.settings.enforcement_metric

        if within(self.scene, handler.point, proposed.point, leash.distance, metric):
            return None

        if self.settings.exceed_behavior == "block":
            logger.info(
                "Blocked move of %s to (%.1f, %.1f): beyond %g units of handler %s",
                event.entity_id,
                new_x,
                new_y,
                leash.distance,
                leash.handler_id,
            )
            return False

        final = clamp(self.scene, handler.point, proposed.point, leash.distance, metric)
        event.x, event.y = top_left(final, proposed.width_px, proposed.height_px)
        logger.debug(
            "Clamped move of %s to (%.1f, %.1f)", event.entity_id, event.x, event.y
        )
        return None


__all__ = ["LeashEnforcementSystem"]
