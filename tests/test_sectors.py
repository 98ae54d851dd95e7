"""Tests for the static angular tables."""

import pytest

from chakra.sectors import (
    COMPASS_POINTS,
    DIRECTION_SECTORS,
    ENTRANCE_BOUNDARY_ANGLES,
    ENTRANCE_POSITIONS,
    PLANETS,
    entrance_by_name,
    sector_by_name,
)


def test_sixteen_sectors_clockwise_from_north():
    assert len(DIRECTION_SECTORS) == 16
    assert [s.name for s in DIRECTION_SECTORS[:5]] == ["N", "NNE", "NE", "ENE", "E"]
    for index, sector in enumerate(DIRECTION_SECTORS):
        assert sector.nominal_angle == pytest.approx(index * 22.5)
        assert sector.end_angle - sector.start_angle == pytest.approx(22.5)


def test_north_sector_straddles_zero():
    north = sector_by_name("N")
    assert north.start_angle == pytest.approx(-11.25)
    assert north.end_angle == pytest.approx(11.25)


def test_thirty_two_unique_entrances():
    names = [e.name for e in ENTRANCE_POSITIONS]
    assert len(names) == 32
    assert len(set(names)) == 32
    for side in "NESW":
        assert sorted(n for n in names if n[0] == side) == sorted(f"{side}{i}" for i in range(1, 9))


@pytest.mark.parametrize(
    "name, angle",
    [("N5", 5.625), ("N4", 354.375), ("E1", 50.625), ("S1", 140.625), ("W1", 230.625), ("N1", 320.625)],
)
def test_entrance_angles(name, angle):
    assert entrance_by_name(name).angle == pytest.approx(angle)


def test_two_entrances_per_sector():
    """Every direction sector holds exactly two entrance centers."""
    for sector in DIRECTION_SECTORS:
        inside = [
            e for e in ENTRANCE_POSITIONS
            if sector.start_angle < e.angle < sector.end_angle
            or sector.start_angle < e.angle - 360.0 < sector.end_angle
        ]
        assert len(inside) == 2, sector.name


def test_entrance_boundaries_between_centers():
    assert len(ENTRANCE_BOUNDARY_ANGLES) == 32
    assert ENTRANCE_BOUNDARY_ANGLES[0] == 0.0
    assert ENTRANCE_BOUNDARY_ANGLES[1] == pytest.approx(11.25)


def test_compass_and_planets():
    assert [(c.letter, c.angle) for c in COMPASS_POINTS] == [("N", 0.0), ("E", 90.0), ("S", 180.0), ("W", 270.0)]
    assert len(PLANETS) == 8
    assert PLANETS[0].name == "Sun"
    assert PLANETS[-1].angle == 315.0


def test_unknown_name_raises():
    with pytest.raises(KeyError):
        sector_by_name("XYZ")
    with pytest.raises(KeyError):
        entrance_by_name("N9")
