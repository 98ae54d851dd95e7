"""Static angular tables: 16 direction sectors, 32 entrances, compass points and planets.

All angles are compass degrees (0 = north = up, clockwise positive). A direction
sector is centered on its nominal angle and spans +/- 11.25 degrees. Entrance k
(counted clockwise from north) is centered at k * 11.25 + 5.625, so every
direction sector holds exactly two entrances.
"""

from __future__ import annotations

from dataclasses import dataclass

from chakra.geometry.contract import (
    ENTRANCE_COUNT,
    ENTRANCE_OFFSET_DEG,
    ENTRANCE_PITCH_DEG,
    SECTOR_HALF_WIDTH_DEG,
    SECTOR_PITCH_DEG,
)


@dataclass(frozen=True)
class DirectionSector:
    name: str
    label: str
    nominal_angle: float
    color: str

    @property
    def start_angle(self) -> float:
        return self.nominal_angle - SECTOR_HALF_WIDTH_DEG

    @property
    def end_angle(self) -> float:
        return self.nominal_angle + SECTOR_HALF_WIDTH_DEG


@dataclass(frozen=True)
class EntrancePosition:
    name: str
    angle: float
    direction: str

    @property
    def start_angle(self) -> float:
        return self.angle - ENTRANCE_OFFSET_DEG

    @property
    def end_angle(self) -> float:
        return self.angle + ENTRANCE_OFFSET_DEG


@dataclass(frozen=True)
class CompassPoint:
    letter: str
    angle: float


@dataclass(frozen=True)
class Planet:
    name: str
    angle: float
    color: str


_SECTOR_SPECS = (
    ("N", "North", "#4CAF50"),
    ("NNE", "North-NE", "#8BC34A"),
    ("NE", "North-East", "#CDDC39"),
    ("ENE", "East-NE", "#FFEB3B"),
    ("E", "East", "#FFC107"),
    ("ESE", "East-SE", "#FF9800"),
    ("SE", "South-East", "#FF5722"),
    ("SSE", "South-SE", "#F44336"),
    ("S", "South", "#E91E63"),
    ("SSW", "South-SW", "#9C27B0"),
    ("SW", "South-West", "#673AB7"),
    ("WSW", "West-SW", "#3F51B5"),
    ("W", "West", "#2196F3"),
    ("WNW", "West-NW", "#03A9F4"),
    ("NW", "North-West", "#00BCD4"),
    ("NNW", "North-NW", "#009688"),
)

DIRECTION_SECTORS: tuple[DirectionSector, ...] = tuple(
    DirectionSector(name=name, label=label, nominal_angle=index * SECTOR_PITCH_DEG, color=color)
    for index, (name, label, color) in enumerate(_SECTOR_SPECS)
)


def _entrance_name(index: int) -> tuple[str, str]:
    # Each cardinal side owns 8 padas starting at its preceding corner:
    # N1 at 315, E1 at 45, S1 at 135, W1 at 225.
    side_index, pada = divmod((index + 4) % ENTRANCE_COUNT, 8)
    side = "NESW"[side_index]
    return f"{side}{pada + 1}", side


def _build_entrances() -> tuple[EntrancePosition, ...]:
    entrances = []
    for index in range(ENTRANCE_COUNT):
        name, side = _entrance_name(index)
        entrances.append(
            EntrancePosition(
                name=name,
                angle=index * ENTRANCE_PITCH_DEG + ENTRANCE_OFFSET_DEG,
                direction=side,
            )
        )
    return tuple(entrances)


ENTRANCE_POSITIONS: tuple[EntrancePosition, ...] = _build_entrances()

# Division lines between neighbouring entrances.
ENTRANCE_BOUNDARY_ANGLES: tuple[float, ...] = tuple(index * ENTRANCE_PITCH_DEG for index in range(ENTRANCE_COUNT))

COMPASS_POINTS: tuple[CompassPoint, ...] = (
    CompassPoint("N", 0.0),
    CompassPoint("E", 90.0),
    CompassPoint("S", 180.0),
    CompassPoint("W", 270.0),
)

PLANETS: tuple[Planet, ...] = (
    Planet("Sun", 0.0, "#FFD700"),
    Planet("Moon", 45.0, "#C0C0C0"),
    Planet("Mars", 90.0, "#CD5C5C"),
    Planet("Mercury", 135.0, "#87CEEB"),
    Planet("Jupiter", 180.0, "#FFA500"),
    Planet("Venus", 225.0, "#FFB6C1"),
    Planet("Saturn", 270.0, "#800080"),
    Planet("Rahu", 315.0, "#2F4F4F"),
)


def sector_by_name(name: str) -> DirectionSector:
    for sector in DIRECTION_SECTORS:
        if sector.name == name:
            return sector
    raise KeyError(name)


def entrance_by_name(name: str) -> EntrancePosition:
    for entrance in ENTRANCE_POSITIONS:
        if entrance.name == name:
            return entrance
    raise KeyError(name)


__all__ = [
    "DirectionSector",
    "EntrancePosition",
    "CompassPoint",
    "Planet",
    "DIRECTION_SECTORS",
    "ENTRANCE_POSITIONS",
    "ENTRANCE_BOUNDARY_ANGLES",
    "COMPASS_POINTS",
    "PLANETS",
    "sector_by_name",
    "entrance_by_name",
]
