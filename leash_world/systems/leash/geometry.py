"""Unit conversion and centre-point helpers for leashed entities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple
import math

Point = Tuple[float, float]

# Cell size assumed when a scene has no grid.
FALLBACK_GRID_SIZE = 100.0


@dataclass(frozen=True)
class Center:
    """Centre of an entity's bounding box plus its pixel footprint."""

    x: float
    y: float
    width_px: float
    height_px: float

    @property
    def point(self) -> Point:
        return (self.x, self.y)


def units_to_pixels(scene: Any, units: float) -> float:
    """Convert scene ``units`` to pixels. Returns ``0.0`` without a grid."""

    size = getattr(scene, "grid_size", None)
    distance = getattr(scene, "grid_distance", None)
    if not size or not distance:
        return 0.0
    return (units / distance) * size


def center_of(scene: Any, entity_id: int, x: float, y: float) -> Center:
    """Return the centre ``entity_id`` would have with its top-left at ``(x, y)``."""

    size_px = getattr(scene, "grid_size", None) or FALLBACK_GRID_SIZE
    footprint = scene.size(entity_id)
    width_px = (footprint.width or 1) * size_px
    height_px = (footprint.height or 1) * size_px
    return Center(x + width_px / 2, y + height_px / 2, width_px, height_px)


def current_center(scene: Any, entity_id: int) -> Optional[Center]:
    """Centre of ``entity_id`` where it stands now, or ``None`` if it is gone."""

    pos = scene.position(entity_id)
    if pos is None:
        return None
    return center_of(scene, entity_id, pos.x, pos.y)


def top_left(center: Point, width_px: float, height_px: float) -> Point:
    """Inverse of :func:`center_of` for a known footprint."""

    return (center[0] - width_px / 2, center[1] - height_px / 2)


def euclidean_distance(p1: Point, p2: Point) -> float:
    """Straight-line distance in pixels."""

    return math.hypot(p2[0] - p1[0], p2[1] - p1[1])


def metric_distance(scene: Any, p1: Point, p2: Point) -> float:
    """Distance in scene units under the scene grid's own rules.

    A scene without a grid measures everything as ``0.0``.
    """

    measured = scene.measure_distance(p1, p2)
    return 0.0 if measured is None else float(measured)


__all__ = [
    "Center",
    "Point",
    "units_to_pixels",
    "center_of",
    "current_center",
    "top_left",
    "euclidean_distance",
    "metric_distance",
]
