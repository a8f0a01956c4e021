"""Tests for the polar helpers and the box support function."""

import math

import pytest

from radar_geometry import (angle_of, box_distance, describe_arc, inward_half_extent, polar_to_cartesian,
                            ray_box_entry)


def _angle_diff(a: float, b: float) -> float:
    return abs((a - b + 180.0) % 360.0 - 180.0)


def test_zero_degrees_is_straight_up():
    x, y = polar_to_cartesian(100, 100, 50, 0)
    assert x == pytest.approx(100)
    assert y == pytest.approx(50)


def test_angles_increase_clockwise():
    assert polar_to_cartesian(100, 100, 50, 90) == pytest.approx((150, 100))
    assert polar_to_cartesian(100, 100, 50, 180) == pytest.approx((100, 150))
    assert polar_to_cartesian(100, 100, 50, 270) == pytest.approx((50, 100))


@pytest.mark.parametrize("theta", [0, 7, 45, 89.5, 135, 180, 222.2, 300, 359.5, 420, -30])
def test_angle_round_trip(theta):
    x, y = polar_to_cartesian(10, 20, 33, theta)
    assert _angle_diff(angle_of(10, 20, x, y), theta % 360) < 1e-9


def test_describe_arc_runs_from_end_to_start():
    tokens = describe_arc(100, 100, 50, 0, 90).split()
    assert tokens[0] == "M" and tokens[3] == "A"
    assert (float(tokens[1]), float(tokens[2])) == pytest.approx((150, 100))
    assert (float(tokens[9]), float(tokens[10])) == pytest.approx((100, 50))


@pytest.mark.parametrize("start,end,large", [(0, 90, "0"), (10, 190, "0"), (0, 200, "1"), (-40, 300, "1")])
def test_describe_arc_large_flag(start, end, large):
    tokens = describe_arc(0, 0, 10, start, end).split()
    assert tokens[7] == large
    assert tokens[8] == "0"


def test_inward_half_extent_axes():
    assert inward_half_extent(40, 10, 0) == pytest.approx(10)
    assert inward_half_extent(40, 10, 90) == pytest.approx(40)
    assert inward_half_extent(40, 10, 180) == pytest.approx(10)
    assert inward_half_extent(40, 10, 270) == pytest.approx(40)


def test_inward_half_extent_diagonal():
    assert inward_half_extent(40, 10, 45) == pytest.approx(50 * math.sqrt(2) / 2)


def test_inward_half_extent_zero_box():
    assert inward_half_extent(0, 0, 123) == 0


def test_box_distance():
    assert box_distance(0, 0, 3, 4, 10, 10) == pytest.approx(5)
    assert box_distance(0, 0, -5, 2, 10, 10) == pytest.approx(2)
    assert box_distance(0, 0, -5, -5, 10, 10) == 0


def test_ray_box_entry():
    assert ray_box_entry(0, 0, 90, 10, -5, 10, 10) == pytest.approx(10)
    assert ray_box_entry(0, 0, 0, -5, -30, 10, 10) == pytest.approx(20)
    assert ray_box_entry(0, 0, 0, 10, -20, 5, 5) is None
    assert ray_box_entry(0, 0, 180, -5, -30, 10, 10) is None


def test_ray_entry_is_never_inside_the_support_bound():
    # box centered on the ray: the ray enters no closer than r - inward
    hw, hh, r = 40, 10, 100
    for angle in (0, 30, 45, 100, 200, 333):
        px, py = polar_to_cartesian(0, 0, r, angle)
        entry = ray_box_entry(0, 0, angle, px - hw, py - hh, 2 * hw, 2 * hh)
        assert entry >= r - inward_half_extent(hw, hh, angle) - 1e-9
