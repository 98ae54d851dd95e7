"""CLI for rendering a chakra overlay report from a plot description."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from loguru import logger
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from chakra.exceptions import ChakraError, PlotInputError, ValidationError
from chakra.export.canvas import CanvasSnapshot
from chakra.export.pdf_export import PDFExportOptions, export_pdf
from chakra.export.preview import render_preview
from chakra.geometry.contract import MIN_POLYGON_POINTS
from chakra.layout.config import ChakraTransform, OverlayLayer
from chakra.layout.overlay import build_overlay
from chakra.logging_config import configure_from_settings
from chakra.reports.overlay_builder import build_overlay_geojson, write_overlay
from chakra.selection import PlotSelection
from chakra.settings import get_settings


class PlotInput(BaseModel):
    """Plot outline in image pixel coordinates, optionally with its floor-plan image."""
    points: List[Tuple[float, float]] = Field(..., description="Outline vertices in drawing order")
    image: Optional[Path] = Field(None, description="Floor-plan raster, relative to the plot file")

    @field_validator("points")
    @classmethod
    def _enough_points(cls, value: List[Tuple[float, float]]) -> List[Tuple[float, float]]:
        if len(value) < MIN_POLYGON_POINTS:
            raise ValueError(f"a plot needs at least {MIN_POLYGON_POINTS} points, got {len(value)}")
        if any(x < 0 or y < 0 for x, y in value):
            raise ValueError("points are image pixel coordinates and must not be negative")
        return value


def load_plot(path: Path) -> PlotInput:
    if not path.exists():
        raise PlotInputError(f"Plot file not found: {path}", {"path": str(path)})
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise PlotInputError(f"Plot file is not valid JSON: {exc}", {"path": str(path)}) from exc
    try:
        plot = PlotInput.model_validate(payload)
    except PydanticValidationError as exc:
        raise PlotInputError(f"Invalid plot file {path}: {exc}", {"path": str(path)}) from exc
    if plot.image is not None and not plot.image.is_absolute():
        plot = plot.model_copy(update={"image": path.parent / plot.image})
    return plot


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Overlay a Vastu chakra on a plot outline and export the report")
    parser.add_argument("plot", type=Path, help="Plot JSON with 'points' and optional 'image'")
    parser.add_argument("--image", type=Path, help="Floor-plan image (overrides the plot file)")
    parser.add_argument("--output-dir", type=Path, help="Output directory (default: from config)")
    parser.add_argument("--rotation", type=float, default=0.0, help="Chakra rotation in degrees, clockwise")
    parser.add_argument("--scale", type=float, default=1.0, help="Chakra scale multiplier")
    parser.add_argument("--opacity", type=float, default=0.7, help="Overlay opacity between 0 and 1")
    parser.add_argument("--config", type=Path, help="YAML settings file")
    parser.add_argument("--layers", help="Comma-separated layers for preview and GeoJSON, or 'all'")
    parser.add_argument("--exact-areas", action="store_true", help="Clip sector wedges instead of the triangle approximation")
    parser.add_argument("--skip-pdf", action="store_true", help="Skip PDF report")
    parser.add_argument("--skip-preview", action="store_true", help="Skip PNG preview")
    parser.add_argument("--skip-geojson", action="store_true", help="Skip GeoJSON overlay")
    return parser


def run(args: argparse.Namespace) -> List[Path]:
    settings = get_settings(str(args.config) if args.config else None)
    configure_from_settings(settings.logging)

    plot = load_plot(args.plot)
    try:
        transform = ChakraTransform(rotation=args.rotation, scale=args.scale, opacity=args.opacity)
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid chakra transform: {exc}") from exc
    try:
        layers = OverlayLayer.parse(args.layers) if args.layers else OverlayLayer.default()
    except ValueError as exc:
        raise ValidationError(str(exc), {"layers": args.layers}) from exc

    layout = settings.layout
    if args.exact_areas:
        layout = layout.model_copy(update={"area_method": "exact"})

    selection = PlotSelection.from_points(plot.points)
    center = selection.center
    logger.info(
        "Plot with {} corners, area {:.1f} px², center ({:.1f}, {:.1f})",
        len(selection.points),
        selection.area,
        center.x,
        center.y,
    )

    overlay = build_overlay(selection.points, transform, layout, layers | OverlayLayer.STATISTICS, center=center)
    for share in overlay.statistics:
        logger.debug("{:<4} {:6.2f}%", share.direction, share.percent_of_total)

    image_path = args.image or plot.image
    if image_path is not None:
        snapshot = CanvasSnapshot.from_path(image_path)
    else:
        snapshot = CanvasSnapshot.blank_for(selection.points, max_dimension=settings.export.preview_max_dimension)

    output_dir: Path = args.output_dir or settings.export.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)
    stem = args.plot.stem
    written: List[Path] = []

    if not args.skip_geojson:
        logger.info("Writing GeoJSON overlay...")
        written.append(write_overlay(build_overlay_geojson(overlay), output_dir / f"{stem}.overlay.geojson"))

    if not args.skip_preview:
        logger.info("Rendering preview...")
        written.append(
            render_preview(
                snapshot,
                overlay,
                output_dir / f"{stem}.preview.png",
                max_dimension=settings.export.preview_max_dimension,
            )
        )

    if not args.skip_pdf:
        logger.info("Exporting PDF report...")
        pdf_path, warnings = export_pdf(
            snapshot=snapshot,
            polygon=selection.points,
            transform=transform,
            layout=layout,
            options=PDFExportOptions.from_settings(settings.export),
            output_dir=output_dir,
            center=center,
        )
        if warnings:
            logger.warning("PDF exported with {} warning(s)", len(warnings))
        written.append(pdf_path)

    logger.info("Done: {} artifact(s) in {}", len(written), output_dir)
    return written


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        run(args)
    except ChakraError as exc:
        logger.error("{}: {}", type(exc).__name__, exc.message)
        if exc.details:
            logger.debug("Details: {}", exc.details)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
