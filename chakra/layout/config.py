"""
Chakra Layout Configuration

Explicit configuration structs for the overlay layout engine, validated with
Pydantic. Every recognized option is listed here with its default.
"""

from __future__ import annotations

import math
from enum import Flag, auto
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from chakra.geometry.contract import DEFAULT_INNER_RING_FRACTION, DEFAULT_NOMINAL_RADIUS


class OverlayLayer(Flag):
    """Overlay layers that ``build_overlay`` can produce."""

    NONE = 0
    ZONES = auto()
    DIRECTIONS = auto()
    ENTRANCES = auto()
    ENTRANCE_BOUNDARIES = auto()
    COMPASS = auto()
    PLANETS = auto()
    STATISTICS = auto()
    MARMA = auto()

    @classmethod
    def default(cls) -> "OverlayLayer":
        return cls.ZONES | cls.DIRECTIONS | cls.ENTRANCES | cls.COMPASS | cls.STATISTICS

    @classmethod
    def everything(cls) -> "OverlayLayer":
        combined = cls.NONE
        for member in cls:
            combined |= member
        return combined

    @classmethod
    def parse(cls, names: list[str] | str) -> "OverlayLayer":
        """Build a layer set from names such as ``"directions,entrances"``."""
        if isinstance(names, str):
            names = names.split(",")
        combined = cls.NONE
        for raw in names:
            name = raw.strip().upper().replace("-", "_")
            if not name:
                continue
            if name == "ALL":
                combined |= cls.everything()
                continue
            try:
                combined |= cls[name]
            except KeyError as exc:
                raise ValueError(f"Unknown overlay layer: {raw!r}") from exc
        return combined


# One PDF page per entry; names as accepted by ``OverlayLayer.parse``.
DEFAULT_PAGE_LAYERS: tuple[str, ...] = (
    "zones,directions,compass",
    "entrances,entrance_boundaries,compass",
)

class ChakraTransform(BaseModel):
    """Rotation, scale and opacity applied to the chakra by the user."""

    rotation: float = Field(default=0.0, description="Rotation in degrees, any finite value")
    scale: float = Field(default=1.0, gt=0.0, description="Multiplier on the nominal radius")
    opacity: float = Field(default=0.7, ge=0.0, le=1.0, description="Rendering opacity only")

    model_config = {"frozen": True}

    @field_validator("rotation")
    @classmethod
    def _finite_rotation(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("rotation must be a finite number of degrees")
        return value


class LayoutOptions(BaseModel):
    """
    Layout constants for the overlay engine.

    Fractions are measured along the ray from the center to the boundary
    (labels, markers) or of the scaled nominal radius (rings).
    """

    nominal_radius: float = Field(
        default=DEFAULT_NOMINAL_RADIUS,
        gt=0.0,
        description="Chakra radius in image pixels before scaling; also the ray fallback radius",
    )
    inner_ring_fraction: float = Field(
        default=DEFAULT_INNER_RING_FRACTION,
        ge=0.0,
        lt=1.0,
        description="Inner ring of the zone wedges as a fraction of the radius",
    )
    direction_label_fraction: float = Field(
        default=0.75,
        gt=0.0,
        le=1.0,
        description="Direction label anchor position along the boundary ray",
    )
    entrance_label_fraction: float = Field(
        default=0.85,
        gt=0.0,
        le=1.0,
        description="Entrance label anchor position along the boundary ray",
    )
    compass_marker_fraction: float = Field(
        default=0.9,
        gt=0.0,
        le=1.0,
        description="N/E/S/W marker position along the boundary ray",
    )
    planet_ring_fraction: float = Field(
        default=0.8,
        gt=0.0,
        le=1.0,
        description="Planet marker ring as a fraction of the radius",
    )
    wedge_arc_segments: int = Field(
        default=8,
        ge=1,
        le=128,
        description="Polyline segments per wedge arc",
    )
    area_method: Literal["triangle", "exact"] = Field(
        default="triangle",
        description="Directional area algorithm: triangle approximation or exact wedge clip",
    )

    def effective_radius(self, transform: ChakraTransform) -> float:
        return self.nominal_radius * transform.scale


__all__ = ["OverlayLayer", "DEFAULT_PAGE_LAYERS", "ChakraTransform", "LayoutOptions"]
