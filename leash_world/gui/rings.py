# leash_world/gui/rings.py
"""Leash rings drawn around handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Set, Tuple
import logging

import pygame

from ..config import CONFIG
from ..systems.leash.geometry import Point, current_center, units_to_pixels
from ..systems.leash.relation import get_leash

logger = logging.getLogger(__name__)

RING_COLOUR = (76, 175, 80)
RING_LINE_ALPHA = 230  # ~0.9 opacity
RING_FILL_ALPHA = 15   # ~0.06 opacity
RING_LINE_WIDTH = 3

Pair = Tuple[int, int]  # (handler_id, target_id)


@dataclass(frozen=True)
class Ring:
    """One visible ring: centred on the handler, radius in pixels."""

    handler_id: int
    target_id: int
    center: Point
    radius: float


class LeashRingOverlay:
    """Decide which leash rings are visible and draw them.

    ``visibility`` follows the ``ring_visibility`` setting: ``"hover"``
    shows rings while a handler or target is hovered or controlled,
    ``"always"`` shows every ring as soon as a leash exists and ``"never"``
    shows nothing.
    """

    def __init__(self, scene: Any, visibility: str | None = None) -> None:
        self.scene = scene
        self.visibility = visibility or CONFIG.leash.ring_visibility
        self._visible: Set[Pair] = set()

    # ------------------------------------------------------------------
    # Ring bookkeeping
    # ------------------------------------------------------------------
    def show(self, handler_id: int, target_id: int) -> None:
        if self.visibility == "never":
            return
        self._visible.add((handler_id, target_id))

    def hide(self, handler_id: int, target_id: int) -> None:
        self._visible.discard((handler_id, target_id))

    def clear(self) -> None:
        self._visible.clear()

    @property
    def visible_pairs(self) -> List[Pair]:
        return sorted(self._visible)

    def _pairs_touching(self, entity_id: int) -> List[Pair]:
        pairs = []
        for target_id, handler_id in self.scene.leash_index.pairs():
            if entity_id in (target_id, handler_id):
                pairs.append((handler_id, target_id))
        return pairs

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------
    def on_hover(self, entity_id: int, hovered: bool) -> None:
        if self.visibility != "hover":
            return
        for handler_id, target_id in self._pairs_touching(entity_id):
            if hovered:
                self.show(handler_id, target_id)
            else:
                self.hide(handler_id, target_id)

    def on_control(self, entity_id: int, controlled: bool) -> None:
        if self.visibility == "never":
            return
        if not controlled:
            if self.visibility != "always":
                self.clear()
            return
        if self.visibility == "always":
            for target_id, handler_id in self.scene.leash_index.pairs():
                self.show(handler_id, target_id)
            return
        for handler_id, target_id in self._pairs_touching(entity_id):
            self.show(handler_id, target_id)

    def on_leash_applied(self, target_id: int, handler_id: int) -> None:
        if self.visibility == "always":
            self.show(handler_id, target_id)

    def on_leash_removed(self, target_id: int, handler_id: int) -> None:
        self.hide(handler_id, target_id)

    def on_delete(self, entity_id: int) -> None:
        for pair in list(self._visible):
            if entity_id in pair:
                self._visible.discard(pair)

    def on_scene_ready(self) -> None:
        self.clear()

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------
    def rings(self) -> List[Ring]:
        """Visible rings measured from the handlers' current positions."""

        result: List[Ring] = []
        for handler_id, target_id in self.visible_pairs:
            leash = get_leash(self.scene, target_id)
            center = current_center(self.scene, handler_id)
            if leash is None or leash.handler_id != handler_id or center is None:
                continue
            radius = units_to_pixels(self.scene, leash.distance)
            result.append(Ring(handler_id, target_id, center.point, radius))
        return result

    def draw(self, surface: pygame.Surface, offset: Point = (0.0, 0.0)) -> int:
        """Blit all visible rings onto ``surface``; return how many were drawn."""

        rings = self.rings()
        if not rings:
            return 0
        overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
        for ring in rings:
            center = (ring.center[0] - offset[0], ring.center[1] - offset[1])
            radius = max(1, int(round(ring.radius)))
            pygame.draw.circle(overlay, (*RING_COLOUR, RING_FILL_ALPHA), center, radius)
            pygame.draw.circle(
                overlay, (*RING_COLOUR, RING_LINE_ALPHA), center, radius, RING_LINE_WIDTH
            )
        surface.blit(overlay, (0, 0))
        return len(rings)


__all__ = ["Ring", "LeashRingOverlay"]
