"""Geometry primitives, centroid calculation and boundary ray casting."""

from .primitives import (
    Point,
    as_points,
    signed_area,
    polygon_area,
    normalize_angle,
    compass_unit_vector,
    ray_segment_intersection,
    point_in_polygon,
    is_simple_polygon,
    bounding_box_diagonal,
)
from .centroid import compute_center
from .raycast import intersect_ray, cast_to_boundary, circle_point
