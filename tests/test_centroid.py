"""Tests for the plot center calculation."""

import pytest

from chakra.geometry.centroid import compute_center
from chakra.geometry.primitives import Point, as_points

SQUARE = as_points([(0, 0), (10, 0), (10, 10), (0, 10)])


def test_square_center():
    """Centroid of an axis-aligned square is its middle."""
    assert compute_center(SQUARE) == Point(5.0, 5.0)


def test_two_points_average():
    """Two points are not a polygon yet; the mean is used."""
    assert compute_center(as_points([(0, 0), (10, 0)])) == Point(5.0, 0.0)


def test_single_point():
    assert compute_center([Point(3.0, 4.0)]) == Point(3.0, 4.0)


def test_empty_input_is_origin():
    assert compute_center([]) == Point(0.0, 0.0)


def test_winding_does_not_matter():
    """Reversing the vertex order leaves the centroid unchanged."""
    l_shape = as_points([(0, 0), (20, 0), (20, 10), (10, 10), (10, 30), (0, 30)])
    forward = compute_center(l_shape)
    backward = compute_center(list(reversed(l_shape)))
    assert forward.x == pytest.approx(backward.x)
    assert forward.y == pytest.approx(backward.y)


def test_collinear_points_fall_back_to_mean():
    """A zero-area outline has no area centroid."""
    center = compute_center(as_points([(0, 0), (5, 0), (10, 0)]))
    assert center == Point(5.0, 0.0)


def test_area_weighted_not_vertex_mean():
    """Extra vertices along an edge must not pull the centroid."""
    dense = as_points([(0, 0), (2, 0), (4, 0), (6, 0), (8, 0), (10, 0), (10, 10), (0, 10)])
    center = compute_center(dense)
    assert center.x == pytest.approx(5.0)
    assert center.y == pytest.approx(5.0)


def test_l_shape_centroid():
    """Composite centroid of two rectangles."""
    # 20x10 block (area 200, c=(10,5)) plus 10x20 block (area 200, c=(5,20))
    l_shape = as_points([(0, 0), (20, 0), (20, 10), (10, 10), (10, 30), (0, 30)])
    center = compute_center(l_shape)
    assert center.x == pytest.approx(7.5)
    assert center.y == pytest.approx(12.5)
