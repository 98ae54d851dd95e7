"""Reference center of a plot outline."""

from __future__ import annotations

from typing import Sequence

from chakra.geometry.contract import CENTROID_AREA_EPSILON, MIN_POLYGON_POINTS
from chakra.geometry.primitives import Point, mean_point


def compute_center(points: Sequence[Point]) -> Point:
    """Area-weighted centroid of ``points``, falling back to the vertex mean.

    - no points: ``(0, 0)``
    - one or two points: arithmetic mean (no polygon yet)
    - |signed area| < ``CENTROID_AREA_EPSILON``: arithmetic mean (collinear or collapsed outline)

    Never raises; the winding order does not affect the result.
    """
    n = len(points)
    if n == 0:
        return Point(0.0, 0.0)
    if n < MIN_POLYGON_POINTS:
        return mean_point(points)

    area = 0.0
    cx = 0.0
    cy = 0.0
    for i in range(n):
        xi, yi = points[i]
        xj, yj = points[(i + 1) % n]
        cross_term = xi * yj - xj * yi
        area += cross_term
        cx += (xi + xj) * cross_term
        cy += (yi + yj) * cross_term
    area /= 2.0

    if abs(area) < CENTROID_AREA_EPSILON:
        return mean_point(points)

    return Point(cx / (6.0 * area), cy / (6.0 * area))


__all__ = ["compute_center"]
