import pytest

from leash_world.core.grid import SquareGrid
from leash_world.core.world import Scene
from leash_world.systems.leash.geometry import (
    center_of,
    current_center,
    euclidean_distance,
    metric_distance,
    top_left,
    units_to_pixels,
)


def _make_scene() -> Scene:
    return Scene("g", SquareGrid(100, 5))


def test_units_to_pixels_scales_by_grid():
    scene = _make_scene()
    assert units_to_pixels(scene, 5) == pytest.approx(100.0)
    assert units_to_pixels(scene, 2) == pytest.approx(40.0)


def test_units_to_pixels_fails_closed_without_grid():
    assert units_to_pixels(Scene("bare"), 5) == 0.0


def test_center_of_uses_footprint():
    scene = _make_scene()
    eid = scene.spawn(0, 0, width=2, height=1)
    center = center_of(scene, eid, 10, 20)
    assert (center.x, center.y) == (110.0, 70.0)
    assert (center.width_px, center.height_px) == (200.0, 100.0)
    assert top_left(center.point, center.width_px, center.height_px) == (10.0, 20.0)


def test_current_center_of_missing_entity_is_none():
    scene = _make_scene()
    eid = scene.spawn(100, 100)
    assert current_center(scene, eid).point == (150.0, 150.0)
    assert current_center(scene, eid + 1) is None


def test_center_without_grid_falls_back_to_100px_cells():
    scene = Scene("bare")
    eid = scene.spawn(0, 0)
    assert current_center(scene, eid).point == (50.0, 50.0)


def test_distances():
    scene = _make_scene()
    assert euclidean_distance((0, 0), (30, 40)) == 50.0
    assert metric_distance(scene, (0, 0), (100, 100)) == pytest.approx(5.0)
    assert metric_distance(Scene("bare"), (0, 0), (100, 100)) == 0.0
