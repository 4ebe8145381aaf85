# leash_world/gui/renderer.py
"""Renderer drawing scene tokens and leash rings to a :class:`Window`."""

from __future__ import annotations

from typing import Any, Optional
import logging

import pygame

from ..config import CONFIG
from ..systems.leash.geometry import Point, current_center
from .rings import LeashRingOverlay
from .window import Window

logger = logging.getLogger(__name__)

TOKEN_FILL_COLOUR = (90, 90, 110)
TOKEN_OUTLINE_COLOUR = (220, 220, 220)
HOVER_OUTLINE_COLOUR = (255, 200, 60)


def find_overlay(scene: Any) -> Optional[LeashRingOverlay]:
    """Return the ring overlay registered with ``scene``'s systems, if any."""

    for system in scene.systems_manager or ():
        if isinstance(system, LeashRingOverlay):
            return system
    return None


class Renderer:
    """Draw a top-down view of ``scene`` centred on ``camera``.

    Mouse motion over a token is forwarded to the scene as ``on_hover`` so
    that hover-mode rings appear while the pointer rests on a leashed token.
    """

    def __init__(
        self,
        scene: Any,
        window: Window | None = None,
        overlay: LeashRingOverlay | None = None,
    ) -> None:
        self.scene = scene
        self.window = window if window is not None else Window()
        self.overlay = overlay if overlay is not None else find_overlay(scene)
        self.camera: Point = (0.0, 0.0)
        self.hovered: Optional[int] = None

    def set_camera_center(self, x: float, y: float) -> None:
        self.camera = (x, y)

    @property
    def offset(self) -> Point:
        """Scene coordinate drawn at the window's top-left corner."""

        width, height = self.window.surface.get_size()
        return (self.camera[0] - width / 2, self.camera[1] - height / 2)

    def screen_to_scene(self, screen_pos: tuple[int, int]) -> Point:
        ox, oy = self.offset
        return (screen_pos[0] + ox, screen_pos[1] + oy)

    def entity_at(self, point: Point) -> Optional[int]:
        """Topmost entity whose footprint contains ``point``."""

        for entity_id in reversed(self.scene.entity_ids()):
            center = current_center(self.scene, entity_id)
            if center is None:
                continue
            if (
                abs(point[0] - center.x) <= center.width_px / 2
                and abs(point[1] - center.y) <= center.height_px / 2
            ):
                return entity_id
        return None

    def hover(self, entity_id: Optional[int]) -> None:
        if entity_id == self.hovered:
            return
        if self.hovered is not None:
            self.scene.notify("on_hover", self.hovered, False)
        self.hovered = entity_id
        if entity_id is not None:
            self.scene.notify("on_hover", entity_id, True)

    def handle_events(self) -> bool:
        """Process pending window events; return ``False`` once closed."""

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.MOUSEMOTION:
                self.hover(self.entity_at(self.screen_to_scene(event.pos)))
        return True

    def update(self) -> int:
        """Redraw the scene; return the number of rings drawn."""

        self.window.clear(CONFIG.gui.background)
        ox, oy = self.offset
        for entity_id in self.scene.entity_ids():
            center = current_center(self.scene, entity_id)
            if center is None:
                continue
            rect = pygame.Rect(
                int(center.x - center.width_px / 2 - ox),
                int(center.y - center.height_px / 2 - oy),
                int(center.width_px),
                int(center.height_px),
            )
            outline = HOVER_OUTLINE_COLOUR if entity_id == self.hovered else TOKEN_OUTLINE_COLOUR
            self.window.draw_rect(rect, TOKEN_FILL_COLOUR)
            self.window.draw_rect(rect, outline, 2)
            self.window.draw_text(self.scene.name(entity_id), rect.x + 4, rect.y + 4)

        drawn = 0
        if self.overlay is not None:
            drawn = self.overlay.draw(self.window.surface, (ox, oy))
        self.window.refresh()
        return drawn

    def close(self) -> None:
        self.hover(None)
        self.window.close()


__all__ = ["Renderer", "find_overlay"]
