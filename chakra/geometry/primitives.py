"""Point type and pure 2D helpers shared by the centroid, ray caster and layout engine.

Coordinates live in image pixel space: x grows to the right, y grows downward.
Angles are compass degrees: 0 points up (north) and positive angles turn clockwise.
"""

from __future__ import annotations

import math
from typing import NamedTuple, Sequence

from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon as ShapelyPolygon

from chakra.geometry.contract import FULL_TURN_DEG, MIN_POLYGON_POINTS, PARALLEL_DET_EPSILON


class Point(NamedTuple):
    x: float
    y: float


def as_points(raw: Sequence[Sequence[float]]) -> list[Point]:
    """Coerce a sequence of (x, y) pairs into Points."""
    return [Point(float(p[0]), float(p[1])) for p in raw]


def signed_area(points: Sequence[Point]) -> float:
    """Signed shoelace area. Sign depends on winding; 0 for fewer than 3 points."""
    n = len(points)
    if n < MIN_POLYGON_POINTS:
        return 0.0
    total = 0.0
    for i in range(n):
        x1, y1 = points[i]
        x2, y2 = points[(i + 1) % n]
        total += x1 * y2 - x2 * y1
    return total / 2.0


def polygon_area(points: Sequence[Point]) -> float:
    """Polygon area via the shoelace formula. Works for either winding order."""
    return abs(signed_area(points))


def mean_point(points: Sequence[Point]) -> Point:
    n = len(points)
    if n == 0:
        return Point(0.0, 0.0)
    return Point(sum(p[0] for p in points) / n, sum(p[1] for p in points) / n)


def normalize_angle(angle_deg: float) -> float:
    """Wrap any real angle into [0, 360)."""
    wrapped = angle_deg % FULL_TURN_DEG
    # -1e-20 % 360 rounds to 360.0
    return 0.0 if wrapped == FULL_TURN_DEG else wrapped


def compass_unit_vector(angle_deg: float) -> Point:
    """Unit direction for a compass angle in image space (0 = up, 90 = right)."""
    radians = math.radians(angle_deg)
    return Point(math.sin(radians), -math.cos(radians))


def offset_point(origin: Point, direction: Point, distance: float) -> Point:
    return Point(origin[0] + direction[0] * distance, origin[1] + direction[1] * distance)


def lerp_point(start: Point, end: Point, fraction: float) -> Point:
    """Point at ``fraction`` of the way from ``start`` to ``end``."""
    return Point(start[0] + (end[0] - start[0]) * fraction, start[1] + (end[1] - start[1]) * fraction)


def distance(a: Point, b: Point) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def cross(v1: Point, v2: Point) -> float:
    return v1[0] * v2[1] - v1[1] * v2[0]


def ray_segment_intersection(
    origin: Point,
    direction: Point,
    seg_a: Point,
    seg_b: Point,
) -> tuple[float, Point] | None:
    """Intersection of the ray ``origin + t*direction`` (t >= 0) with segment a-b.

    Returns ``(t, point)`` or None when the ray misses the segment or runs
    parallel to it (|det| below ``PARALLEL_DET_EPSILON``).
    """
    vx = seg_b[0] - seg_a[0]
    vy = seg_b[1] - seg_a[1]
    wx, wy = direction
    dx = seg_a[0] - origin[0]
    dy = seg_a[1] - origin[1]

    det = wx * vy - wy * vx
    if abs(det) < PARALLEL_DET_EPSILON:
        return None

    t = (dx * vy - dy * vx) / det
    u = (dx * wy - dy * wx) / det
    if t >= 0.0 and 0.0 <= u <= 1.0:
        return t, Point(origin[0] + t * wx, origin[1] + t * wy)
    return None


def polygon_edges(points: Sequence[Point]) -> list[tuple[Point, Point]]:
    n = len(points)
    return [(points[i], points[(i + 1) % n]) for i in range(n)]


def bounding_box(points: Sequence[Point]) -> tuple[float, float, float, float]:
    """(min_x, min_y, max_x, max_y); a unit box at the origin when empty."""
    if not points:
        return (0.0, 0.0, 1.0, 1.0)
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return (min(xs), min(ys), max(xs), max(ys))


def bounding_box_diagonal(points: Sequence[Point]) -> float:
    if not points:
        return 0.0
    min_x, min_y, max_x, max_y = bounding_box(points)
    return math.hypot(max_x - min_x, max_y - min_y)


def to_shapely(points: Sequence[Point]) -> ShapelyPolygon | None:
    """Shapely polygon for a plot outline, or None when it has fewer than 3 points."""
    if len(points) < MIN_POLYGON_POINTS:
        return None
    return ShapelyPolygon([(float(x), float(y)) for x, y in points])


def point_in_polygon(point: Point, polygon: Sequence[Point]) -> bool:
    """True when ``point`` lies inside or on the boundary of ``polygon``."""
    shape = to_shapely(polygon)
    if shape is None or shape.is_empty:
        return False
    return bool(shape.covers(ShapelyPoint(point[0], point[1])))


def is_simple_polygon(polygon: Sequence[Point]) -> bool:
    """True for a non-self-intersecting outline with at least 3 points."""
    shape = to_shapely(polygon)
    if shape is None:
        return False
    return bool(shape.exterior.is_simple)


__all__ = [
    "Point",
    "as_points",
    "signed_area",
    "polygon_area",
    "mean_point",
    "normalize_angle",
    "compass_unit_vector",
    "offset_point",
    "lerp_point",
    "distance",
    "cross",
    "ray_segment_intersection",
    "polygon_edges",
    "bounding_box",
    "bounding_box_diagonal",
    "to_shapely",
    "point_in_polygon",
    "is_simple_polygon",
]
