"""Background raster handle passed explicitly from the canvas owner to the exporters."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import cv2
import numpy as np

from chakra.exceptions import ExportError
from chakra.geometry.primitives import Point, bounding_box


@dataclass(frozen=True)
class CanvasSnapshot:
    """Encoded raster (PNG/JPEG bytes) of the floor plan plus its pixel size.

    Overlay coordinates are in this raster's pixel space.
    """

    data: bytes
    width: int
    height: int
    media_type: str = "image/png"

    @classmethod
    def from_bytes(cls, data: bytes, media_type: str | None = None) -> "CanvasSnapshot":
        image = _decode(data)
        height, width = image.shape[:2]
        return cls(data=data, width=int(width), height=int(height), media_type=media_type or _sniff(data))

    @classmethod
    def from_path(cls, path: Path) -> "CanvasSnapshot":
        if not path.exists():
            raise ExportError(f"Floor plan image not found: {path}", {"path": str(path)})
        return cls.from_bytes(path.read_bytes())

    @classmethod
    def from_data_url(cls, value: str) -> "CanvasSnapshot":
        header, _, encoded = value.partition(",")
        if not header.startswith("data:") or not encoded:
            raise ExportError("Not a data URL", {"prefix": value[:32]})
        try:
            data = base64.b64decode(encoded)
        except (binascii.Error, ValueError) as exc:
            raise ExportError("Data URL payload is not valid base64") from exc
        media_type = header[5:].split(";", 1)[0] or None
        return cls.from_bytes(data, media_type)

    @classmethod
    def blank(
        cls,
        width: int,
        height: int,
        color: tuple[int, int, int] = (252, 250, 248),
        max_dimension: int | None = None,
    ) -> "CanvasSnapshot":
        """Plain canvas for plots drawn without a floor-plan image.

        ``width`` and ``height`` are the pixel frame the overlay lives in. With
        ``max_dimension`` the encoded raster is downsampled to fit it while the
        frame keeps its full size.
        """
        width = max(int(width), 1)
        height = max(int(height), 1)
        factor = 1.0
        if max_dimension and max(width, height) > max_dimension:
            factor = max_dimension / float(max(width, height))
        raster_w = max(int(round(width * factor)), 1)
        raster_h = max(int(round(height * factor)), 1)
        canvas = np.zeros((raster_h, raster_w, 3), dtype=np.uint8)
        canvas[:] = color
        ok, encoded = cv2.imencode(".png", canvas)
        if not ok:
            raise ExportError("Could not encode blank canvas")
        return cls(data=encoded.tobytes(), width=width, height=height, media_type="image/png")

    @classmethod
    def blank_for(
        cls,
        polygon: Sequence[Point],
        margin: float = 40.0,
        max_dimension: int | None = None,
    ) -> "CanvasSnapshot":
        """Blank canvas covering the image frame from the origin to past the polygon.

        Plot coordinates are image pixels, so an outline reaching below zero has
        no frame to live in.
        """
        min_x, min_y, max_x, max_y = bounding_box(polygon)
        if min_x < 0.0 or min_y < 0.0:
            raise ExportError(
                "Plot outline has negative pixel coordinates",
                {"min_x": f"{min_x:g}", "min_y": f"{min_y:g}"},
            )
        return cls.blank(int(max_x + margin), int(max_y + margin), max_dimension=max_dimension)

    def decode(self) -> np.ndarray:
        """BGR pixel array of the raster."""
        return _decode(self.data)

    def to_data_url(self) -> str:
        return f"data:{self.media_type};base64,{base64.b64encode(self.data).decode('ascii')}"


def _decode(data: bytes) -> np.ndarray:
    if not data:
        raise ExportError("Empty raster payload")
    buffer = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if image is None:
        raise ExportError("Raster payload could not be decoded", {"bytes": str(len(data))})
    return image


def _sniff(data: bytes) -> str:
    if data.startswith(b"\x89PNG"):
        return "image/png"
    if data.startswith(b"\xff\xd8"):
        return "image/jpeg"
    return "application/octet-stream"


__all__ = ["CanvasSnapshot"]
