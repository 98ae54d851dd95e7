"""Overlay layout engine: chakra lines, wedges, labels, markers and area statistics."""

from .config import ChakraTransform, LayoutOptions, OverlayLayer
from .statistics import AreaShare, directional_area_breakdown
from .overlay import (
    Label,
    Marker,
    MarmaPoint,
    Overlay,
    RadialLine,
    SectorWedge,
    build_overlay,
    compass_markers,
    direction_labels,
    entrance_boundaries,
    entrance_labels,
    entrance_lines,
    planet_markers,
    marma_points,
    radial_lines,
    zone_sector_paths,
)
