from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from loguru import logger
from shapely.geometry import LineString, Point as ShapelyPoint, Polygon, mapping as shp_mapping

from chakra.exceptions import OverlayWriteError
from chakra.geometry.contract import MIN_POLYGON_POINTS
from chakra.layout.overlay import Label, Overlay, RadialLine


@dataclass
class OverlayArtifacts:
    overlay: dict
    metrics: dict[str, Any]


def _line_features(lines: Iterable[RadialLine], kind: str) -> list[dict[str, Any]]:
    return [
        {
            "type": "Feature",
            "properties": {"type": kind, "name": line.name, "angle": line.angle},
            "geometry": shp_mapping(LineString([line.start, line.end])),
        }
        for line in lines
    ]


def _label_features(labels: Iterable[Label], kind: str) -> list[dict[str, Any]]:
    return [
        {
            "type": "Feature",
            "properties": {"type": kind, "text": label.text, "angle": label.angle},
            "geometry": shp_mapping(ShapelyPoint(label.anchor)),
        }
        for label in labels
    ]


def build_overlay_geojson(overlay: Overlay) -> OverlayArtifacts:
    """Convert an overlay into a GeoJSON FeatureCollection in image pixel coordinates."""
    features: list[dict[str, Any]] = []

    if len(overlay.polygon) >= MIN_POLYGON_POINTS:
        features.append({
            "type": "Feature",
            "properties": {"type": "PLOT", "area": overlay.plot_area},
            "geometry": shp_mapping(Polygon(overlay.polygon)),
        })

    features.append({
        "type": "Feature",
        "properties": {"type": "CENTER", "radius": overlay.radius},
        "geometry": shp_mapping(ShapelyPoint(overlay.center)),
    })

    for wedge in overlay.zones:
        features.append({
            "type": "Feature",
            "properties": {
                "type": "ZONE",
                "name": wedge.name,
                "color": wedge.color,
                "start_angle": wedge.start_angle,
                "end_angle": wedge.end_angle,
                "path": wedge.path,
            },
            "geometry": shp_mapping(Polygon(wedge.outline)),
        })

    features.extend(_line_features(overlay.direction_lines, "DIRECTION_LINE"))
    features.extend(_label_features(overlay.direction_labels, "DIRECTION_LABEL"))
    features.extend(_line_features(overlay.entrance_lines, "ENTRANCE_LINE"))
    features.extend(_line_features(overlay.entrance_boundaries, "ENTRANCE_BOUNDARY"))
    features.extend(_label_features(overlay.entrance_labels, "ENTRANCE_LABEL"))
    features.extend(_label_features(overlay.compass, "COMPASS"))

    for planet in overlay.planets:
        features.append({
            "type": "Feature",
            "properties": {"type": "PLANET", "name": planet.name, "color": planet.color, "angle": planet.angle},
            "geometry": shp_mapping(ShapelyPoint(planet.point)),
        })

    for marma in overlay.marma:
        features.append({
            "type": "Feature",
            "properties": {"type": "MARMA", "name": marma.name, "angle": marma.angle, "coordinates": marma.coordinates},
            "geometry": shp_mapping(ShapelyPoint(marma.point)),
        })

    metrics = {
        "center": [overlay.center.x, overlay.center.y],
        "rotation": overlay.transform.rotation,
        "scale": overlay.transform.scale,
        "opacity": overlay.transform.opacity,
        "radius": overlay.radius,
        "plot_area": overlay.plot_area,
        "corners": len(overlay.polygon),
        "statistics": {share.direction: round(share.percent_of_total, 4) for share in overlay.statistics},
    }
    collection = {"type": "FeatureCollection", "features": features, "properties": metrics}
    return OverlayArtifacts(overlay=collection, metrics=metrics)


def write_overlay(artifacts: OverlayArtifacts, path: Path) -> Path:
    if not artifacts or not artifacts.overlay:
        raise OverlayWriteError("Overlay artifacts are empty")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(artifacts.overlay), encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        raise OverlayWriteError(f"Could not write overlay file {path}: {exc}", {"path": str(path)}) from exc
    logger.info("Wrote overlay GeoJSON with {} feature(s) to {}", len(artifacts.overlay.get("features", [])), path)
    return path


__all__ = ["OverlayArtifacts", "build_overlay_geojson", "write_overlay"]
