from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

import cv2
import numpy as np
from loguru import logger

from chakra.exceptions import ExportError, PreviewExportError
from chakra.export.canvas import CanvasSnapshot
from chakra.geometry.primitives import Point
from chakra.layout.overlay import Overlay, RadialLine

PLOT_COLOR = (246, 130, 59)
LINE_COLOR = (51, 51, 51)
ENTRANCE_COLOR = (0, 0, 255)
CENTER_COLOR = (68, 68, 239)
WHITE = (255, 255, 255)


def render_preview(
    snapshot: CanvasSnapshot,
    overlay: Overlay,
    out_path: Path,
    *,
    max_dimension: int = 2400,
) -> Path:
    """Rasterise the overlay on top of the floor plan and write it as an image file."""
    try:
        image = snapshot.decode()
    except ExportError as exc:
        raise PreviewExportError(exc.message, exc.details) from exc

    # Overlay coordinates live in the snapshot frame, which may be larger than the encoded raster.
    factor = 1.0
    longest = max(snapshot.width, snapshot.height)
    if max_dimension > 0 and longest > max_dimension:
        factor = max_dimension / float(longest)
    size = (max(int(round(snapshot.width * factor)), 1), max(int(round(snapshot.height * factor)), 1))
    if (image.shape[1], image.shape[0]) != size:
        interpolation = cv2.INTER_AREA if size[0] < image.shape[1] else cv2.INTER_LINEAR
        image = cv2.resize(image, size, interpolation=interpolation)

    opacity = overlay.transform.opacity

    if overlay.zones:
        layer = image.copy()
        for wedge in overlay.zones:
            pts = _to_pixels(wedge.outline, factor)
            cv2.fillPoly(layer, [pts], color=_bgr(wedge.color), lineType=cv2.LINE_AA)
            cv2.polylines(layer, [pts], isClosed=True, color=LINE_COLOR, thickness=1, lineType=cv2.LINE_AA)
        _blend(image, layer, 0.3 * opacity)

    lines_layer = image.copy()
    _draw_lines(lines_layer, overlay.direction_lines, factor, thickness=2)
    _draw_lines(lines_layer, overlay.entrance_boundaries, factor, thickness=1)
    _draw_lines(lines_layer, overlay.entrance_lines, factor, thickness=1, color=ENTRANCE_COLOR)
    _blend(image, lines_layer, opacity)

    if len(overlay.polygon) >= 2:
        cv2.polylines(
            image, [_to_pixels(overlay.polygon, factor)], isClosed=True, color=PLOT_COLOR, thickness=2, lineType=cv2.LINE_AA
        )

    for label in overlay.direction_labels:
        _put_text(image, _scale(label.anchor, factor), label.text, 0.5, 2)

    for line, label in zip(overlay.entrance_lines, overlay.entrance_labels):
        cv2.circle(image, _scale(line.end, factor), 4, ENTRANCE_COLOR, -1, lineType=cv2.LINE_AA)
        _put_text(image, _scale(label.anchor, factor), label.text, 0.35, 1, boxed=True)

    for marker in overlay.compass:
        center = _scale(marker.anchor, factor)
        cv2.circle(image, center, 12, WHITE, -1, lineType=cv2.LINE_AA)
        cv2.circle(image, center, 12, LINE_COLOR, 1, lineType=cv2.LINE_AA)
        _put_text(image, center, marker.text, 0.5, 2)

    for marma in overlay.marma:
        point = _scale(marma.point, factor)
        cv2.circle(image, point, 5, (0, 0, 0), -1, lineType=cv2.LINE_AA)
        _put_text(image, (point[0], point[1] - 14), marma.name, 0.45, 1)
        _put_text(image, (point[0], point[1] + 16), marma.coordinates, 0.3, 1)

    for planet in overlay.planets:
        center = _scale(planet.point, factor)
        cv2.circle(image, center, 14, _bgr(planet.color), -1, lineType=cv2.LINE_AA)
        cv2.circle(image, center, 14, LINE_COLOR, 1, lineType=cv2.LINE_AA)
        _put_text(image, (center[0], center[1] + 24), planet.name, 0.35, 1)

    cv2.circle(image, _scale(overlay.center, factor), 6, CENTER_COLOR, -1, lineType=cv2.LINE_AA)
    cv2.circle(image, _scale(overlay.center, factor), 6, WHITE, 2, lineType=cv2.LINE_AA)

    out_path.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(out_path), image):
        raise PreviewExportError(f"Could not write preview image {out_path}", {"path": str(out_path)})
    logger.info("Wrote overlay preview {} ({}x{})", out_path, image.shape[1], image.shape[0])
    return out_path


def _blend(base: np.ndarray, layer: np.ndarray, alpha: float) -> None:
    alpha = min(max(alpha, 0.0), 1.0)
    cv2.addWeighted(layer, alpha, base, 1.0 - alpha, 0.0, dst=base)


def _draw_lines(
    image: np.ndarray,
    lines: Iterable[RadialLine],
    factor: float,
    thickness: int,
    color: tuple[int, int, int] = LINE_COLOR,
) -> None:
    for line in lines:
        cv2.line(image, _scale(line.start, factor), _scale(line.end, factor), color, thickness, lineType=cv2.LINE_AA)


def _put_text(
    image: np.ndarray,
    center: tuple[int, int],
    text: str,
    font_scale: float,
    thickness: int,
    *,
    boxed: bool = False,
) -> None:
    (w, h), baseline = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, font_scale, thickness)
    origin = (center[0] - w // 2, center[1] + h // 2)
    if boxed:
        cv2.rectangle(
            image,
            (origin[0] - 2, origin[1] - h - 2),
            (origin[0] + w + 2, origin[1] + baseline),
            WHITE,
            -1,
        )
    cv2.putText(image, text, origin, cv2.FONT_HERSHEY_SIMPLEX, font_scale, LINE_COLOR, thickness, cv2.LINE_AA)


def _scale(point: Point | Sequence[float], factor: float) -> tuple[int, int]:
    return (int(round(point[0] * factor)), int(round(point[1] * factor)))


def _to_pixels(points: Sequence[Point], factor: float) -> np.ndarray:
    return np.array([_scale(p, factor) for p in points], dtype=np.int32).reshape((-1, 1, 2))


def _bgr(hex_color: str) -> tuple[int, int, int]:
    value = hex_color.lstrip("#")
    r, g, b = int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)
    return (b, g, r)


__all__ = ["render_preview"]
