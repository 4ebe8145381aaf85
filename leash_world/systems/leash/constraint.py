"""Project an out-of-range point back inside a leash radius."""

from __future__ import annotations

from typing import Any, Callable
import math

from .geometry import Point, metric_distance, units_to_pixels

EPSILON = 1e-6
BISECTION_STEPS = 24


def clamp_euclidean(handler: Point, proposed: Point, radius: float) -> Point:
    """Closest point to ``proposed`` within ``radius`` pixels of ``handler``.

    Points already inside are returned unchanged. Outside points are moved
    along the ray from ``handler`` through ``proposed`` onto the circle.
    """

    dx = proposed[0] - handler[0]
    dy = proposed[1] - handler[1]
    dist = math.hypot(dx, dy)
    if dist <= radius:
        return proposed
    if dist < EPSILON:
        return handler
    t = radius / dist
    return (handler[0] + dx * t, handler[1] + dy * t)


def clamp_grid(
    handler: Point,
    proposed: Point,
    radius: float,
    measure: Callable[[Point, Point], float],
    steps: int = BISECTION_STEPS,
) -> Point:
    """Farthest point on the segment ``handler -> proposed`` within ``radius``.

    ``measure`` returns grid distance in units and only has to be monotonic
    along the segment; it need not be invertible. ``radius`` is in the same
    units.
    """

    if measure(handler, proposed) <= radius:
        return proposed

    dx = proposed[0] - handler[0]
    dy = proposed[1] - handler[1]
    lo, hi = 0.0, 1.0
    for _ in range(steps):
        mid = (lo + hi) / 2
        if measure(handler, (handler[0] + dx * mid, handler[1] + dy * mid)) <= radius:
            lo = mid
        else:
            hi = mid
    return (handler[0] + dx * lo, handler[1] + dy * lo)


def clamp(
    scene: Any, handler: Point, proposed: Point, distance_units: float, metric: str = "pixel"
) -> Point:
    """Clamp with the strategy named by ``metric`` (``"pixel"`` or ``"grid"``)."""

    if metric == "grid":
        return clamp_grid(
            handler,
            proposed,
            distance_units,
            lambda a, b: metric_distance(scene, a, b),
        )
    return clamp_euclidean(handler, proposed, units_to_pixels(scene, distance_units))


def within(
    scene: Any, handler: Point, proposed: Point, distance_units: float, metric: str = "pixel"
) -> bool:
    """``True`` if ``proposed`` lies inside the leash radius under ``metric``."""

    if metric == "grid":
        return metric_distance(scene, handler, proposed) <= distance_units
    radius = units_to_pixels(scene, distance_units)
    return math.hypot(proposed[0] - handler[0], proposed[1] - handler[1]) <= radius


__all__ = [
    "EPSILON",
    "BISECTION_STEPS",
    "clamp_euclidean",
    "clamp_grid",
    "clamp",
    "within",
]
