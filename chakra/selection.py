"""Plot selection state: the polygon and its center, owned outside the pure geometry engine."""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from chakra.exceptions import SelectionError
from chakra.geometry.centroid import compute_center
from chakra.geometry.contract import MIN_POLYGON_POINTS
from chakra.geometry.primitives import Point, is_simple_polygon, polygon_area


@dataclass
class PlotSelection:
    """
    Collects pointer coordinates into a plot outline.

    Points are appended while selecting; ``complete`` freezes them and computes
    the center. Polygon and center are replaced together on a new selection
    and cleared together by ``clear``.
    """

    _points: list[Point] = field(default_factory=list)
    _center: Point | None = None
    _selecting: bool = False
    _complete: bool = False

    @property
    def points(self) -> tuple[Point, ...]:
        return tuple(self._points)

    @property
    def center(self) -> Point | None:
        return self._center

    @property
    def is_selecting(self) -> bool:
        return self._selecting

    @property
    def is_complete(self) -> bool:
        return self._complete

    @property
    def area(self) -> float:
        return polygon_area(self._points)

    @property
    def can_complete(self) -> bool:
        return self._selecting and len(self._points) >= MIN_POLYGON_POINTS

    def start(self) -> None:
        """Begin a new selection, discarding any previous polygon and center."""
        self._points = []
        self._center = None
        self._complete = False
        self._selecting = True

    def add_point(self, x: float, y: float) -> Point:
        if not self._selecting:
            raise SelectionError("Cannot add points outside of an active selection")
        point = Point(float(x), float(y))
        self._points.append(point)
        return point

    def complete(self) -> Point:
        """Freeze the outline and compute its center."""
        if not self._selecting:
            raise SelectionError("No active selection to complete")
        if len(self._points) < MIN_POLYGON_POINTS:
            raise SelectionError(
                f"A plot outline needs at least {MIN_POLYGON_POINTS} points",
                {"points": str(len(self._points))},
            )
        if not is_simple_polygon(self._points):
            logger.warning("Plot outline intersects itself; boundary rays may fall back to the circle")
        self._center = compute_center(self._points)
        self._selecting = False
        self._complete = True
        logger.info(
            "Plot selected with {} points, center=({:.1f}, {:.1f})",
            len(self._points),
            self._center.x,
            self._center.y,
        )
        return self._center

    def cancel(self) -> None:
        """Stop selecting; the collected points are dropped."""
        self.clear()

    def clear(self) -> None:
        self._points = []
        self._center = None
        self._selecting = False
        self._complete = False

    @classmethod
    def from_points(cls, points: list[tuple[float, float]]) -> "PlotSelection":
        selection = cls()
        selection.start()
        for x, y in points:
            selection.add_point(x, y)
        selection.complete()
        return selection


__all__ = ["PlotSelection"]
