"""Tests for geometry primitives."""

import math

import pytest

from chakra.geometry.primitives import (
    Point,
    as_points,
    bounding_box,
    compass_unit_vector,
    is_simple_polygon,
    normalize_angle,
    point_in_polygon,
    polygon_area,
    ray_segment_intersection,
    signed_area,
)

SQUARE = as_points([(0, 0), (10, 0), (10, 10), (0, 10)])


class TestAngles:
    """Compass angle helpers."""

    @pytest.mark.parametrize(
        "raw, expected",
        [(0.0, 0.0), (360.0, 0.0), (-11.25, 348.75), (725.0, 5.0), (-360.0, 0.0)],
    )
    def test_normalize(self, raw, expected):
        assert normalize_angle(raw) == pytest.approx(expected)

    def test_north_points_up(self):
        """0 degrees is up, i.e. negative y in image space."""
        u = compass_unit_vector(0.0)
        assert u.x == pytest.approx(0.0)
        assert u.y == pytest.approx(-1.0)

    def test_east_is_clockwise(self):
        u = compass_unit_vector(90.0)
        assert u.x == pytest.approx(1.0)
        assert u.y == pytest.approx(0.0, abs=1e-12)

    def test_unit_length(self):
        for angle in (0.0, 22.5, 123.4, 300.0):
            u = compass_unit_vector(angle)
            assert math.hypot(u.x, u.y) == pytest.approx(1.0)


class TestArea:
    def test_signed_area_flips_with_winding(self):
        assert signed_area(SQUARE) == pytest.approx(-signed_area(list(reversed(SQUARE))))

    def test_polygon_area(self):
        assert polygon_area(SQUARE) == pytest.approx(100.0)

    def test_area_of_too_few_points(self):
        assert polygon_area(as_points([(0, 0), (1, 1)])) == 0.0


class TestRaySegment:
    def test_hit(self):
        hit = ray_segment_intersection(Point(5, 5), Point(0, -1), Point(0, 0), Point(10, 0))
        assert hit is not None
        t, point = hit
        assert t == pytest.approx(5.0)
        assert point == Point(5.0, 0.0)

    def test_parallel_is_rejected(self):
        assert ray_segment_intersection(Point(5, 5), Point(1, 0), Point(0, 0), Point(10, 0)) is None

    def test_behind_origin_is_rejected(self):
        assert ray_segment_intersection(Point(5, 5), Point(0, 1), Point(0, 0), Point(10, 0)) is None

    def test_outside_segment_is_rejected(self):
        assert ray_segment_intersection(Point(15, 5), Point(0, -1), Point(0, 0), Point(10, 0)) is None


def test_bounding_box():
    assert bounding_box(SQUARE) == (0.0, 0.0, 10.0, 10.0)


def test_point_in_polygon():
    assert point_in_polygon(Point(5, 5), SQUARE)
    assert point_in_polygon(Point(0, 5), SQUARE)
    assert not point_in_polygon(Point(15, 5), SQUARE)


def test_is_simple_polygon():
    bowtie = as_points([(0, 0), (10, 10), (10, 0), (0, 10)])
    assert is_simple_polygon(SQUARE)
    assert not is_simple_polygon(bowtie)
