"""Tests for the GeoJSON overlay writer."""

import json
from collections import Counter

import pytest

from chakra.exceptions import OverlayWriteError
from chakra.geometry.primitives import as_points
from chakra.layout.config import ChakraTransform, OverlayLayer
from chakra.layout.overlay import build_overlay
from chakra.reports.overlay_builder import OverlayArtifacts, build_overlay_geojson, write_overlay

RECT = as_points([(200, 150), (600, 150), (600, 450), (200, 450)])


def test_feature_counts_per_layer():
    overlay = build_overlay(RECT, ChakraTransform(rotation=10.0), layers=OverlayLayer.everything())
    artifacts = build_overlay_geojson(overlay)
    assert artifacts.overlay["type"] == "FeatureCollection"
    kinds = Counter(f["properties"]["type"] for f in artifacts.overlay["features"])
    assert kinds == {
        "PLOT": 1,
        "CENTER": 1,
        "ZONE": 16,
        "DIRECTION_LINE": 16,
        "DIRECTION_LABEL": 16,
        "ENTRANCE_LINE": 32,
        "ENTRANCE_BOUNDARY": 32,
        "ENTRANCE_LABEL": 32,
        "COMPASS": 4,
        "PLANET": 8,
        "MARMA": 16,
    }


def test_geometry_types():
    overlay = build_overlay(RECT, layers=OverlayLayer.ZONES | OverlayLayer.DIRECTIONS)
    features = build_overlay_geojson(overlay).overlay["features"]
    by_kind = {f["properties"]["type"]: f["geometry"]["type"] for f in features}
    assert by_kind["PLOT"] == "Polygon"
    assert by_kind["CENTER"] == "Point"
    assert by_kind["ZONE"] == "Polygon"
    assert by_kind["DIRECTION_LINE"] == "LineString"
    assert by_kind["DIRECTION_LABEL"] == "Point"


def test_metrics_include_statistics():
    overlay = build_overlay(RECT)
    metrics = build_overlay_geojson(overlay).metrics
    assert metrics["corners"] == 4
    assert metrics["plot_area"] == pytest.approx(120000.0)
    assert sum(metrics["statistics"].values()) == pytest.approx(100.0, abs=1e-3)


def test_write_overlay(tmp_path):
    artifacts = build_overlay_geojson(build_overlay(RECT))
    path = write_overlay(artifacts, tmp_path / "nested" / "plot.overlay.geojson")
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["type"] == "FeatureCollection"
    assert len(payload["features"]) == len(artifacts.overlay["features"])


def test_write_empty_overlay_fails(tmp_path):
    with pytest.raises(OverlayWriteError):
        write_overlay(OverlayArtifacts(overlay={}, metrics={}), tmp_path / "x.geojson")
