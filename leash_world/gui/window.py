# leash_world/gui/window.py
"""Simple ``pygame`` window for the scene view."""

from __future__ import annotations

from typing import Tuple

import pygame

from ..config import CONFIG

Colour = Tuple[int, int, int]


class Window:
    """``pygame`` backed drawing surface."""

    def __init__(self, size: Tuple[int, int] | None = None, *, resizable: bool = True) -> None:
        self.size = size or CONFIG.gui.window_size
        flags = pygame.RESIZABLE if resizable else 0

        if not pygame.get_init(): pygame.init()
        if not pygame.font.get_init(): pygame.font.init()
        if not pygame.display.get_init(): pygame.display.init()

        self._surface = pygame.display.set_mode(self.size, flags)
        pygame.display.set_caption("Leash World")

        try:
            self._font = pygame.font.SysFont(None, 18)
        except pygame.error:
            self._font = pygame.font.Font(None, 18)

    @property
    def surface(self) -> pygame.Surface:
        return self._surface

    def draw_rect(self, rect: pygame.Rect, colour: Colour, width: int = 0) -> None:
        pygame.draw.rect(self._surface, colour, rect, width)

    def draw_text(self, text: str, x: int, y: int, colour: Colour = (255, 255, 255)) -> None:
        if not self._font: return
        text_surf = self._font.render(text, True, colour)
        self._surface.blit(text_surf, (x, y))

    def refresh(self) -> None:
        pygame.display.flip()

    def clear(self, colour: Colour = (0, 0, 0)) -> None:
        self._surface.fill(colour)

    def close(self) -> None:
        pygame.display.quit()


__all__ = ["Window"]
