import pytest

from leash_world.core.grid import SquareGrid


def test_straight_line_matches_cells():
    grid = SquareGrid(size=100, distance=5)
    assert grid.measure_distance((0, 0), (300, 0)) == pytest.approx(15.0)
    assert grid.measure_distance((0, 0), (0, -50)) == pytest.approx(2.5)


def test_diagonal_rules():
    p1, p2 = (0, 0), (200, 200)
    assert SquareGrid(100, 5, "equidistant").measure_distance(p1, p2) == pytest.approx(10.0)
    assert SquareGrid(100, 5, "alternating").measure_distance(p1, p2) == pytest.approx(15.0)
    assert SquareGrid(100, 5, "manhattan").measure_distance(p1, p2) == pytest.approx(20.0)
    assert SquareGrid(100, 5, "euclidean").measure_distance(p1, p2) == pytest.approx(
        10.0 * 2 ** 0.5
    )


def test_invalid_scale_rejected():
    with pytest.raises(ValueError):
        SquareGrid(size=0, distance=5)
