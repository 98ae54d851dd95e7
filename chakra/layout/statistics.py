"""
Directional area statistics.

Splits the plot area into the 16 direction sectors and reports each share as a
percentage of the total. Two algorithms are available:

- ``triangle`` (default): for each sector, cast rays along its two boundary
  angles and take the triangle spanned by the center and both boundary hits,
  ``0.5 * |cross(v1, v2)|``. This is an approximation: edges that bend inside a
  sector are not followed, so concave plots are misrepresented.
- ``exact``: intersect a wedge polygon covering the sector with the plot
  outline (shapely) and use the true clipped area.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Sequence

from shapely.geometry import Polygon as ShapelyPolygon

from chakra.geometry.contract import MIN_POLYGON_POINTS
from chakra.geometry.primitives import (
    Point,
    bounding_box_diagonal,
    compass_unit_vector,
    cross,
    distance,
    normalize_angle,
    offset_point,
    to_shapely,
)
from chakra.geometry.raycast import intersect_ray
from chakra.sectors import DIRECTION_SECTORS

AreaMethod = Literal["triangle", "exact"]


@dataclass(frozen=True)
class AreaShare:
    direction: str
    area: float
    percent_of_total: float


def _triangle_area(center: Point, polygon: Sequence[Point], start: float, end: float) -> float:
    hit1 = intersect_ray(center, compass_unit_vector(start), polygon)
    hit2 = intersect_ray(center, compass_unit_vector(end), polygon)
    if hit1 is None or hit2 is None:
        return 0.0
    v1 = Point(hit1[0] - center[0], hit1[1] - center[1])
    v2 = Point(hit2[0] - center[0], hit2[1] - center[1])
    return 0.5 * abs(cross(v1, v2))


def _wedge(center: Point, reach: float, start: float, end: float, segments: int = 4) -> ShapelyPolygon:
    # Chord sagitta shrinks with the segment count; reach already overshoots the plot.
    step = (end - start) / segments
    ring = [tuple(center)]
    for i in range(segments + 1):
        ring.append(tuple(offset_point(center, compass_unit_vector(start + step * i), reach)))
    return ShapelyPolygon(ring)


def _exact_areas(center: Point, polygon: Sequence[Point], rotation: float) -> list[float]:
    plot = to_shapely(polygon)
    if plot is None or plot.is_empty:
        return [0.0] * len(DIRECTION_SECTORS)
    if not plot.is_valid:
        plot = plot.buffer(0)
    far = max(distance(center, p) for p in polygon)
    reach = 2.0 * (far + bounding_box_diagonal(polygon)) + 1.0
    areas = []
    for sector in DIRECTION_SECTORS:
        start = normalize_angle(sector.start_angle + rotation)
        wedge = _wedge(center, reach, start, start + (sector.end_angle - sector.start_angle))
        areas.append(float(plot.intersection(wedge).area))
    return areas


def _triangle_areas(center: Point, polygon: Sequence[Point], rotation: float) -> list[float]:
    areas = []
    for sector in DIRECTION_SECTORS:
        start = normalize_angle(sector.start_angle + rotation)
        end = normalize_angle(sector.end_angle + rotation)
        areas.append(_triangle_area(center, polygon, start, end))
    return areas


def directional_area_breakdown(
    center: Point,
    polygon: Sequence[Point],
    rotation: float,
    method: AreaMethod = "triangle",
) -> list[AreaShare]:
    """Per-sector area share in percent, in sector order N, NNE, ... NNW.

    Shares sum to 100 whenever the total area is positive. With fewer than 3
    points, or a zero total, every share is 0.0.
    """
    if len(polygon) < MIN_POLYGON_POINTS:
        areas = [0.0] * len(DIRECTION_SECTORS)
    elif method == "exact":
        areas = _exact_areas(center, polygon, rotation)
    elif method == "triangle":
        areas = _triangle_areas(center, polygon, rotation)
    else:
        raise ValueError(f"Unknown area method: {method!r}")

    total = sum(areas)
    return [
        AreaShare(
            direction=sector.name,
            area=area,
            percent_of_total=(area / total) * 100.0 if total > 0.0 else 0.0,
        )
        for sector, area in zip(DIRECTION_SECTORS, areas)
    ]


__all__ = ["AreaShare", "AreaMethod", "directional_area_breakdown"]
