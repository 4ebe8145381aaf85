import pytest

from leash_world.core.events import ProposeMove


def test_move_inside_radius_is_untouched(make_harness):
    h = make_harness(exceed_behavior="block")
    handler, target = h.place(0, 0), h.place(60, 0)
    h.leash(target, handler, 5)

    assert h.move_center(target, 0, 90) is True
    assert h.center(target) == (0.0, 90.0)


def test_block_rejects_move_and_records_no_op(make_harness):
    h = make_harness(exceed_behavior="block")
    handler, target = h.place(0, 0), h.place(60, 0)
    h.leash(target, handler, 5)

    assert h.move_center(target, 160, 0) is False
    assert h.center(target) == (60.0, 0.0)
    delta = h.propagation.state.deltas[target]
    assert (delta.dx, delta.dy) == (0.0, 0.0)


def test_clamp_on_grid_metric(make_harness):
    h = make_harness(exceed_behavior="clamp", enforcement_metric="grid")
    handler, target = h.place(0, 0), h.place(60, 0)
    h.leash(target, handler, 5)

    assert h.move_center(target, 160, 0) is True
    cx, cy = h.center(target)
    assert cx == pytest.approx(100.0, abs=1e-3)
    assert cy == pytest.approx(0.0)


def test_clamp_on_pixel_metric_keeps_direction(make_harness):
    h = make_harness(exceed_behavior="clamp", enforcement_metric="pixel")
    handler, target = h.place(0, 0), h.place(0, 50)
    h.leash(target, handler, 5)  # 100px

    h.move_center(target, 300, 400)
    assert h.center(target) == pytest.approx((60.0, 80.0))


def test_grid_metric_allows_diagonal_that_pixels_would_not(make_harness):
    grid = make_harness(exceed_behavior="block", enforcement_metric="grid")
    handler, target = grid.place(0, 0), grid.place(0, 0)
    grid.leash(target, handler, 10)
    assert grid.move_center(target, 200, 200) is True

    pixel = make_harness(exceed_behavior="block", enforcement_metric="pixel")
    handler2, target2 = pixel.place(0, 0), pixel.place(0, 0)
    pixel.leash(target2, handler2, 10)
    assert pixel.move_center(target2, 200, 200) is False


def test_internal_updates_are_not_intercepted(make_harness):
    h = make_harness(exceed_behavior="block")
    handler, target = h.place(0, 0), h.place(60, 0)
    h.leash(target, handler, 5)

    event = ProposeMove(target, 950.0, -50.0, internal=True)
    assert h.enforcement.on_propose(event) is None
    assert (event.x, event.y) == (950.0, -50.0)


def test_unleashed_and_orphaned_entities_move_freely(make_harness):
    h = make_harness(exceed_behavior="block")
    handler, target, free = h.place(0, 0), h.place(60, 0), h.place(0, 0)
    h.leash(target, handler, 5)
    assert h.move_center(free, 900, 900) is True

    h.scene.entity_manager.destroy_entity(handler)
    assert h.move_center(target, 900, 0) is True
