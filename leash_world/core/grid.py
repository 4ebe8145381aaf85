"""Square grid measurement rules."""

from __future__ import annotations

import math
from typing import Tuple

Point = Tuple[float, float]


class SquareGrid:
    """Scene grid converting pixel offsets into scene units.

    ``size`` is the width of one cell in pixels and ``distance`` the number
    of scene units one cell represents. ``diagonals`` picks how a diagonal
    step is priced:

    * ``equidistant`` - a diagonal step costs the same as a straight one
    * ``alternating`` - every second diagonal step costs double (5/10/5)
    * ``euclidean``   - true straight-line distance
    * ``manhattan``   - diagonals cost two straight steps
    """

    def __init__(
        self,
        size: float = 100.0,
        distance: float = 5.0,
        diagonals: str = "equidistant",
        units: str = "ft",
    ) -> None:
        if size <= 0 or distance <= 0:
            raise ValueError("grid size and distance must be positive")
        self.size = float(size)
        self.distance = float(distance)
        self.diagonals = diagonals
        self.units = units

    def _cells(self, p1: Point, p2: Point) -> Tuple[float, float]:
        return abs(p2[0] - p1[0]) / self.size, abs(p2[1] - p1[1]) / self.size

    def measure_distance(self, p1: Point, p2: Point) -> float:
        """Return the distance in scene units between two pixel points."""

        cx, cy = self._cells(p1, p2)
        if self.diagonals == "euclidean":
            cells = math.hypot(cx, cy)
        elif self.diagonals == "manhattan":
            cells = cx + cy
        elif self.diagonals == "alternating":
            diagonal = min(cx, cy)
            straight = max(cx, cy) - diagonal
            cells = straight + diagonal + math.floor(diagonal / 2)
        else:
            cells = max(cx, cy)
        return cells * self.distance


__all__ = ["SquareGrid", "Point"]
