"""
Overlay Layout Engine

Pure functions that turn ``(center, polygon, rotation, scale)`` into drawable
chakra geometry: boundary-clipped radial lines, circular zone wedges, label
anchors and markers. Nothing is cached; every call recomputes from scratch so a
consumer can replace its previous overlay wholesale.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from loguru import logger

from chakra.geometry.centroid import compute_center
from chakra.geometry.contract import DEFAULT_INNER_RING_FRACTION, DEFAULT_NOMINAL_RADIUS
from chakra.geometry.primitives import Point, lerp_point, normalize_angle, polygon_area
from chakra.geometry.raycast import cast_to_boundary, circle_point
from chakra.layout.config import ChakraTransform, LayoutOptions, OverlayLayer
from chakra.layout.statistics import AreaShare, directional_area_breakdown
from chakra.sectors import (
    COMPASS_POINTS,
    DIRECTION_SECTORS,
    ENTRANCE_BOUNDARY_ANGLES,
    ENTRANCE_POSITIONS,
    PLANETS,
)


@dataclass(frozen=True)
class RadialLine:
    start: Point
    end: Point
    angle: float
    name: str = ""


@dataclass(frozen=True)
class Label:
    anchor: Point
    text: str
    angle: float


@dataclass(frozen=True)
class Marker:
    point: Point
    name: str
    color: str
    angle: float


@dataclass(frozen=True)
class MarmaPoint:
    """Boundary crossing of a nominal direction ray."""

    point: Point
    name: str
    angle: float

    @property
    def coordinates(self) -> str:
        return f"({self.point.x:.1f}, {self.point.y:.1f})"


@dataclass(frozen=True)
class SectorWedge:
    """Annular sector between the inner ring and the outer circle."""

    name: str
    color: str
    start_angle: float
    end_angle: float
    outline: tuple[Point, ...]
    path: str


@dataclass(frozen=True)
class Overlay:
    """Complete overlay payload for one ``(polygon, center, transform)`` state."""

    center: Point
    polygon: tuple[Point, ...]
    transform: ChakraTransform
    radius: float
    layers: OverlayLayer
    plot_area: float = 0.0
    zones: tuple[SectorWedge, ...] = field(default_factory=tuple)
    direction_lines: tuple[RadialLine, ...] = field(default_factory=tuple)
    direction_labels: tuple[Label, ...] = field(default_factory=tuple)
    entrance_lines: tuple[RadialLine, ...] = field(default_factory=tuple)
    entrance_boundaries: tuple[RadialLine, ...] = field(default_factory=tuple)
    entrance_labels: tuple[Label, ...] = field(default_factory=tuple)
    compass: tuple[Label, ...] = field(default_factory=tuple)
    planets: tuple[Marker, ...] = field(default_factory=tuple)
    statistics: tuple[AreaShare, ...] = field(default_factory=tuple)
    marma: tuple[MarmaPoint, ...] = field(default_factory=tuple)


def _line(center: Point, angle: float, rotation: float, polygon: Sequence[Point], radius: float, name: str) -> RadialLine:
    end = cast_to_boundary(center, angle, rotation, polygon, radius)
    return RadialLine(start=center, end=end, angle=normalize_angle(angle + rotation), name=name)


def _anchor(
    center: Point,
    angle: float,
    rotation: float,
    polygon: Sequence[Point],
    radius: float,
    fraction: float,
) -> Point:
    boundary = cast_to_boundary(center, angle, rotation, polygon, radius)
    return lerp_point(center, boundary, fraction)


def radial_lines(
    center: Point,
    rotation: float,
    polygon: Sequence[Point],
    nominal_radius: float = DEFAULT_NOMINAL_RADIUS,
) -> list[RadialLine]:
    """One boundary-clipped line per direction sector, on the sector's leading edge.

    The 16 lines delimit the sectors; direction labels sit between them.
    """
    return [
        _line(center, sector.start_angle, rotation, polygon, nominal_radius, sector.name)
        for sector in DIRECTION_SECTORS
    ]


def entrance_lines(
    center: Point,
    rotation: float,
    polygon: Sequence[Point],
    nominal_radius: float = DEFAULT_NOMINAL_RADIUS,
) -> list[RadialLine]:
    """Boundary-clipped lines through the 32 entrance centers."""
    return [
        _line(center, entrance.angle, rotation, polygon, nominal_radius, entrance.name)
        for entrance in ENTRANCE_POSITIONS
    ]


def entrance_boundaries(
    center: Point,
    rotation: float,
    polygon: Sequence[Point],
    nominal_radius: float = DEFAULT_NOMINAL_RADIUS,
) -> list[RadialLine]:
    """Boundary-clipped division lines between neighbouring entrances."""
    return [_line(center, angle, rotation, polygon, nominal_radius, "") for angle in ENTRANCE_BOUNDARY_ANGLES]


def _arc(center: Point, radius: float, start: float, end: float, rotation: float, segments: int) -> list[Point]:
    step = (end - start) / segments
    return [circle_point(center, start + step * i, rotation, radius) for i in range(segments + 1)]


def _fmt(value: float) -> str:
    return f"{value:.3f}".rstrip("0").rstrip(".")


def _wedge_path(inner: list[Point], outer: list[Point], inner_r: float, outer_r: float) -> str:
    # Compass angles grow clockwise on screen, which is SVG sweep-flag 1.
    parts = [f"M {_fmt(outer[0][0])} {_fmt(outer[0][1])}"]
    parts.append(f"A {_fmt(outer_r)} {_fmt(outer_r)} 0 0 1 {_fmt(outer[-1][0])} {_fmt(outer[-1][1])}")
    if inner_r > 0.0:
        parts.append(f"L {_fmt(inner[-1][0])} {_fmt(inner[-1][1])}")
        parts.append(f"A {_fmt(inner_r)} {_fmt(inner_r)} 0 0 0 {_fmt(inner[0][0])} {_fmt(inner[0][1])}")
    else:
        parts.append(f"L {_fmt(inner[0][0])} {_fmt(inner[0][1])}")
    parts.append("Z")
    return " ".join(parts)


def zone_sector_paths(
    center: Point,
    nominal_radius: float,
    rotation: float,
    inner_fraction: float = DEFAULT_INNER_RING_FRACTION,
    arc_segments: int = 8,
) -> list[SectorWedge]:
    """Circular wedge outlines for the 16 direction sectors, independent of the plot outline."""
    inner_r = nominal_radius * inner_fraction
    wedges: list[SectorWedge] = []
    for sector in DIRECTION_SECTORS:
        outer = _arc(center, nominal_radius, sector.start_angle, sector.end_angle, rotation, arc_segments)
        if inner_r > 0.0:
            inner = _arc(center, inner_r, sector.start_angle, sector.end_angle, rotation, arc_segments)
        else:
            inner = [center]
        outline = tuple(outer + list(reversed(inner)))
        wedges.append(
            SectorWedge(
                name=sector.name,
                color=sector.color,
                start_angle=normalize_angle(sector.start_angle + rotation),
                end_angle=normalize_angle(sector.end_angle + rotation),
                outline=outline,
                path=_wedge_path(inner, outer, inner_r, nominal_radius),
            )
        )
    return wedges


def direction_labels(
    center: Point,
    rotation: float,
    polygon: Sequence[Point],
    fraction: float = 0.75,
    nominal_radius: float = DEFAULT_NOMINAL_RADIUS,
) -> list[Label]:
    """Sector name anchors, pulled toward the center so they sit inside the plot."""
    return [
        Label(
            anchor=_anchor(center, sector.nominal_angle, rotation, polygon, nominal_radius, fraction),
            text=sector.name,
            angle=normalize_angle(sector.nominal_angle + rotation),
        )
        for sector in DIRECTION_SECTORS
    ]


def entrance_labels(
    center: Point,
    rotation: float,
    polygon: Sequence[Point],
    fraction: float = 0.85,
    nominal_radius: float = DEFAULT_NOMINAL_RADIUS,
) -> list[Label]:
    """Entrance code anchors near the boundary."""
    return [
        Label(
            anchor=_anchor(center, entrance.angle, rotation, polygon, nominal_radius, fraction),
            text=entrance.name,
            angle=normalize_angle(entrance.angle + rotation),
        )
        for entrance in ENTRANCE_POSITIONS
    ]


def compass_markers(
    center: Point,
    rotation: float,
    polygon: Sequence[Point],
    fraction: float = 0.9,
    nominal_radius: float = DEFAULT_NOMINAL_RADIUS,
) -> list[Label]:
    """N/E/S/W markers kept just inside the boundary."""
    return [
        Label(
            anchor=_anchor(center, point.angle, rotation, polygon, nominal_radius, fraction),
            text=point.letter,
            angle=normalize_angle(point.angle + rotation),
        )
        for point in COMPASS_POINTS
    ]


def marma_points(
    center: Point,
    rotation: float,
    polygon: Sequence[Point],
    nominal_radius: float = DEFAULT_NOMINAL_RADIUS,
) -> list[MarmaPoint]:
    """Where each of the 16 nominal direction rays meets the plot outline."""
    return [
        MarmaPoint(
            point=cast_to_boundary(center, sector.nominal_angle, rotation, polygon, nominal_radius),
            name=sector.name,
            angle=normalize_angle(sector.nominal_angle + rotation),
        )
        for sector in DIRECTION_SECTORS
    ]


def planet_markers(
    center: Point,
    nominal_radius: float,
    rotation: float,
    ring_fraction: float = 0.8,
) -> list[Marker]:
    """Eight planet markers on a circle inside the chakra."""
    ring = nominal_radius * ring_fraction
    return [
        Marker(
            point=circle_point(center, planet.angle, rotation, ring),
            name=planet.name,
            color=planet.color,
            angle=normalize_angle(planet.angle + rotation),
        )
        for planet in PLANETS
    ]


def build_overlay(
    polygon: Sequence[Point],
    transform: ChakraTransform | None = None,
    options: LayoutOptions | None = None,
    layers: OverlayLayer | None = None,
    *,
    center: Point | None = None,
) -> Overlay:
    """Assemble every enabled layer for the current plot state.

    ``center`` defaults to ``compute_center(polygon)``. Disabled layers come
    back as empty tuples.
    """
    transform = transform or ChakraTransform()
    options = options or LayoutOptions()
    layers = OverlayLayer.default() if layers is None else layers
    points = tuple(Point(float(p[0]), float(p[1])) for p in polygon)
    origin = Point(*center) if center is not None else compute_center(points)
    radius = options.effective_radius(transform)
    rotation = transform.rotation

    zones: tuple[SectorWedge, ...] = ()
    if OverlayLayer.ZONES in layers:
        zones = tuple(
            zone_sector_paths(origin, radius, rotation, options.inner_ring_fraction, options.wedge_arc_segments)
        )

    dir_lines: tuple[RadialLine, ...] = ()
    dir_labels: tuple[Label, ...] = ()
    if OverlayLayer.DIRECTIONS in layers:
        dir_lines = tuple(radial_lines(origin, rotation, points, radius))
        dir_labels = tuple(direction_labels(origin, rotation, points, options.direction_label_fraction, radius))

    ent_lines: tuple[RadialLine, ...] = ()
    ent_labels: tuple[Label, ...] = ()
    if OverlayLayer.ENTRANCES in layers:
        ent_lines = tuple(entrance_lines(origin, rotation, points, radius))
        ent_labels = tuple(entrance_labels(origin, rotation, points, options.entrance_label_fraction, radius))

    ent_bounds: tuple[RadialLine, ...] = ()
    if OverlayLayer.ENTRANCE_BOUNDARIES in layers:
        ent_bounds = tuple(entrance_boundaries(origin, rotation, points, radius))

    compass: tuple[Label, ...] = ()
    if OverlayLayer.COMPASS in layers:
        compass = tuple(compass_markers(origin, rotation, points, options.compass_marker_fraction, radius))

    planets: tuple[Marker, ...] = ()
    if OverlayLayer.PLANETS in layers:
        planets = tuple(planet_markers(origin, radius, rotation, options.planet_ring_fraction))

    statistics: tuple[AreaShare, ...] = ()
    if OverlayLayer.STATISTICS in layers:
        statistics = tuple(directional_area_breakdown(origin, points, rotation, method=options.area_method))

    marma: tuple[MarmaPoint, ...] = ()
    if OverlayLayer.MARMA in layers:
        marma = tuple(marma_points(origin, rotation, points, radius))

    logger.debug(
        "Built overlay: center=({:.2f}, {:.2f}) rotation={} radius={:.2f} lines={} labels={} entrances={}",
        origin.x,
        origin.y,
        rotation,
        radius,
        len(dir_lines),
        len(dir_labels),
        len(ent_labels),
    )

    return Overlay(
        center=origin,
        polygon=points,
        transform=transform,
        radius=radius,
        layers=layers,
        plot_area=polygon_area(points),
        zones=zones,
        direction_lines=dir_lines,
        direction_labels=dir_labels,
        entrance_lines=ent_lines,
        entrance_boundaries=ent_bounds,
        entrance_labels=ent_labels,
        compass=compass,
        planets=planets,
        statistics=statistics,
        marma=marma,
    )


def label_rotation(angle: float) -> float:
    """Text rotation that keeps a radial label upright (flips the lower half)."""
    angle = normalize_angle(angle)
    if 90.0 < angle < 270.0:
        return normalize_angle(angle + 180.0)
    return angle


__all__ = [
    "RadialLine",
    "Label",
    "Marker",
    "MarmaPoint",
    "SectorWedge",
    "Overlay",
    "radial_lines",
    "entrance_lines",
    "entrance_boundaries",
    "zone_sector_paths",
    "direction_labels",
    "entrance_labels",
    "compass_markers",
    "planet_markers",
    "marma_points",
    "build_overlay",
    "label_rotation",
]
