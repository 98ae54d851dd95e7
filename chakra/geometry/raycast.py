"""Boundary ray casting from the chakra center to the plot outline."""

from __future__ import annotations

from typing import Sequence

from loguru import logger

from chakra.geometry.contract import MIN_POLYGON_POINTS
from chakra.geometry.primitives import (
    Point,
    compass_unit_vector,
    normalize_angle,
    offset_point,
    polygon_edges,
    ray_segment_intersection,
)


def intersect_ray(center: Point, direction: Point, polygon: Sequence[Point]) -> Point | None:
    """Nearest crossing of the ray ``center + t*direction`` (t >= 0) with the polygon edges.

    The ray is unbounded, so no length constant has to outgrow the polygon.
    Returns None for fewer than 3 points or when every edge is missed.
    """
    if len(polygon) < MIN_POLYGON_POINTS:
        return None

    best_t: float | None = None
    best_point: Point | None = None
    for seg_a, seg_b in polygon_edges(polygon):
        hit = ray_segment_intersection(center, direction, seg_a, seg_b)
        if hit is None:
            continue
        t, point = hit
        if best_t is None or t < best_t:
            best_t = t
            best_point = point
    return best_point


def cast_to_boundary(
    center: Point,
    angle_deg: float,
    rotation_deg: float,
    polygon: Sequence[Point],
    nominal_radius: float,
) -> Point:
    """Point where the ray at ``angle_deg + rotation_deg`` first leaves the polygon.

    Falls back to the circle point ``center + nominal_radius * u`` when the
    polygon has fewer than 3 points or the ray misses every edge (center
    outside, degenerate outline). The fallback is not an error.
    """
    effective = normalize_angle(angle_deg + rotation_deg)
    direction = compass_unit_vector(effective)
    hit = intersect_ray(center, direction, polygon)
    if hit is not None:
        return hit
    if len(polygon) >= MIN_POLYGON_POINTS:
        logger.debug(
            "Ray at {:.3f} deg missed the outline; using circle point at r={:.3f}",
            effective,
            nominal_radius,
        )
    return offset_point(center, direction, nominal_radius)


def circle_point(center: Point, angle_deg: float, rotation_deg: float, radius: float) -> Point:
    """Point on the circle of ``radius`` around ``center`` at the rotated compass angle."""
    direction = compass_unit_vector(normalize_angle(angle_deg + rotation_deg))
    return offset_point(center, direction, radius)


__all__ = ["intersect_ray", "cast_to_boundary", "circle_point"]
