from __future__ import annotations

"""
Geometry Contract

Single source of truth for the tolerances and angular constants used by the
chakra geometry engine. All modules should import from here instead of hardcoding.
"""

# Tolerances
CENTROID_AREA_EPSILON = 1e-3  # px², signed area below which the centroid falls back to the mean
PARALLEL_DET_EPSILON = 1e-10  # ray/edge determinant below which the pair counts as parallel

# Angles (degrees, 0 = up, clockwise positive)
FULL_TURN_DEG = 360.0
SECTOR_COUNT = 16
SECTOR_PITCH_DEG = FULL_TURN_DEG / SECTOR_COUNT  # 22.5
SECTOR_HALF_WIDTH_DEG = SECTOR_PITCH_DEG / 2.0  # 11.25
ENTRANCE_COUNT = 32
ENTRANCE_PITCH_DEG = FULL_TURN_DEG / ENTRANCE_COUNT  # 11.25
ENTRANCE_OFFSET_DEG = ENTRANCE_PITCH_DEG / 2.0  # 5.625

# Polygons
MIN_POLYGON_POINTS = 3

# Chakra
DEFAULT_NOMINAL_RADIUS = 90.0  # px, chakra radius before scaling and ray fallback radius
DEFAULT_INNER_RING_FRACTION = 0.3
