from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import List, Sequence, Tuple

from loguru import logger
from reportlab.lib.colors import HexColor
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas
from shapely import affinity
from shapely.geometry import LineString, Polygon

from chakra.exceptions import GeometryError, PDFExportError
from chakra.export.canvas import CanvasSnapshot
from chakra.geometry.centroid import compute_center
from chakra.geometry.contract import MIN_POLYGON_POINTS
from chakra.geometry.primitives import Point
from chakra.layout.config import DEFAULT_PAGE_LAYERS, ChakraTransform, LayoutOptions, OverlayLayer
from chakra.layout.overlay import Overlay, build_overlay, label_rotation
from chakra.layout.statistics import AreaShare, directional_area_breakdown
from chakra.settings import ExportSettings

MAX_IMAGE_PT = 1190.0  # longest raster side on the page (A3 long edge)
TITLE_BAND_PT = 28.0
CHART_PAGE_SIZE = (800.0, 600.0)
METADATA_PAGE_SIZE = (800.0, 600.0)

PLOT_STROKE = HexColor("#3b82f6")
LINE_STROKE = HexColor("#333333")
ENTRANCE_FILL = HexColor("#ff0000")
CENTER_FILL = HexColor("#ef4444")
TEXT_COLOR = HexColor("#333333")
MUTED_TEXT = HexColor("#555555")

_LAYER_TITLES = (
    (OverlayLayer.DIRECTIONS, "Directions"),
    (OverlayLayer.ENTRANCES, "Entrances"),
    (OverlayLayer.ZONES, "Zones"),
    (OverlayLayer.PLANETS, "Planets"),
    (OverlayLayer.MARMA, "Marma Points"),
)


@dataclass
class PDFExportOptions:
    pages: List[OverlayLayer] = field(default_factory=lambda: [OverlayLayer.parse(spec) for spec in DEFAULT_PAGE_LAYERS])
    margin_pt: float = 36.0
    include_chart_page: bool = True
    include_metadata_page: bool = True
    title: str = "Vastu Analysis Report"

    @classmethod
    def from_settings(cls, settings: ExportSettings | None) -> "PDFExportOptions":
        if settings is None:
            return cls()
        return cls(
            pages=[OverlayLayer.parse(spec) for spec in settings.pages] or cls().pages,
            margin_pt=float(settings.page_margin_pt),
            include_chart_page=bool(settings.include_chart_page),
            include_metadata_page=bool(settings.include_metadata_page),
        )


@dataclass(frozen=True)
class _PageFrame:
    fit: float
    margin: float
    image_height: float

    @property
    def matrix(self) -> list[float]:
        # image space has y pointing down, PDF space has y pointing up
        return [self.fit, 0.0, 0.0, -self.fit, self.margin, self.margin + self.image_height * self.fit]

    def point(self, p: Point) -> Tuple[float, float]:
        return (self.margin + p[0] * self.fit, self.margin + (self.image_height - p[1]) * self.fit)


def export_pdf(
    *,
    snapshot: CanvasSnapshot,
    polygon: Sequence[Point],
    transform: ChakraTransform,
    layout: LayoutOptions,
    options: PDFExportOptions,
    output_dir: Path,
    center: Point | None = None,
    file_name: str | None = None,
) -> Tuple[Path, List[str]]:
    """Write a multi-page PDF: one page per overlay configuration, then chart and metadata pages.

    Returns the PDF path and a list of non-fatal warnings.
    """
    if len(polygon) < MIN_POLYGON_POINTS:
        raise GeometryError("Select the plot area before exporting", {"points": str(len(polygon))})
    if not options.pages and not options.include_chart_page and not options.include_metadata_page:
        raise PDFExportError("No pages requested for export")

    warnings: List[str] = []
    origin = Point(*center) if center is not None else compute_center(polygon)

    output_dir.mkdir(parents=True, exist_ok=True)
    if file_name is None:
        stamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S")
        file_name = f"vastu-analysis-{stamp}.pdf"
    pdf_path = output_dir / file_name

    margin = max(options.margin_pt, 0.0)
    fit = min(1.0, MAX_IMAGE_PT / max(snapshot.width, snapshot.height, 1))
    frame = _PageFrame(fit=fit, margin=margin, image_height=float(snapshot.height))
    page_size = (snapshot.width * fit + margin * 2, snapshot.height * fit + margin * 2 + TITLE_BAND_PT)

    c = canvas.Canvas(str(pdf_path), pagesize=page_size)
    c.setTitle(options.title)

    for layers in options.pages:
        overlay = build_overlay(polygon, transform, layout, layers, center=origin)
        c.setPageSize(page_size)
        _draw_overlay_page(c, snapshot, overlay, frame, page_size, warnings)
        c.showPage()

    statistics = directional_area_breakdown(origin, polygon, transform.rotation, method=layout.area_method)
    if options.include_chart_page:
        c.setPageSize(CHART_PAGE_SIZE)
        _draw_chart_page(c, statistics, layout.area_method)
        c.showPage()

    if options.include_metadata_page:
        c.setPageSize(METADATA_PAGE_SIZE)
        _draw_metadata_page(c, options.title, origin, polygon, transform, statistics)
        c.showPage()

    try:
        c.save()
    except OSError as exc:
        raise PDFExportError(f"Could not write PDF {pdf_path}: {exc}", {"path": str(pdf_path)}) from exc

    logger.info("Exported PDF with {} overlay page(s) to {}", len(options.pages), pdf_path)
    for warning in warnings:
        logger.warning(warning)
    return pdf_path, warnings


def _page_title(layers: OverlayLayer) -> str:
    names = [title for flag, title in _LAYER_TITLES if flag in layers]
    return " + ".join(names) if names else "Plot"


def _draw_overlay_page(
    pdf: canvas.Canvas,
    snapshot: CanvasSnapshot,
    overlay: Overlay,
    frame: _PageFrame,
    page_size: Tuple[float, float],
    warnings: List[str],
) -> None:
    image_w = snapshot.width * frame.fit
    image_h = snapshot.height * frame.fit
    try:
        reader = ImageReader(BytesIO(snapshot.data))
        pdf.drawImage(reader, frame.margin, frame.margin, width=image_w, height=image_h, mask="auto")
    except Exception:
        warnings.append("Background image could not be embedded (decode failure)")

    pdf.setFillColor(TEXT_COLOR)
    pdf.setFont("Helvetica-Bold", 14)
    pdf.drawString(frame.margin, page_size[1] - frame.margin * 0.5 - 14, _page_title(overlay.layers))

    opacity = overlay.transform.opacity
    plot = affinity.affine_transform(Polygon([tuple(p) for p in overlay.polygon]), frame.matrix)
    _draw_polygon(pdf, plot, fill_color=None, stroke_color=PLOT_STROKE, stroke_width=2.0)

    pdf.saveState()
    pdf.setFillAlpha(0.3 * opacity)
    pdf.setStrokeAlpha(opacity)
    for wedge in overlay.zones:
        shape = affinity.affine_transform(Polygon([tuple(p) for p in wedge.outline]), frame.matrix)
        _draw_polygon(pdf, shape, fill_color=HexColor(wedge.color), stroke_color=LINE_STROKE, stroke_width=0.5)
    pdf.restoreState()

    pdf.saveState()
    pdf.setStrokeAlpha(opacity)
    for line in overlay.direction_lines:
        _draw_line(pdf, affinity.affine_transform(LineString([line.start, line.end]), frame.matrix), LINE_STROKE, 1.0)
    for line in overlay.entrance_boundaries:
        _draw_line(pdf, affinity.affine_transform(LineString([line.start, line.end]), frame.matrix), LINE_STROKE, 0.4)
    for line in overlay.entrance_lines:
        _draw_line(pdf, affinity.affine_transform(LineString([line.start, line.end]), frame.matrix), ENTRANCE_FILL, 0.3)
    pdf.restoreState()

    for label in overlay.direction_labels:
        _draw_text(pdf, frame.point(label.anchor), label.text, label_rotation(label.angle), size=9, bold=True)

    for line, label in zip(overlay.entrance_lines, overlay.entrance_labels):
        x, y = frame.point(line.end)
        pdf.setFillColor(ENTRANCE_FILL)
        pdf.setStrokeColor(HexColor("#ffffff"))
        pdf.circle(x, y, 2.5, stroke=1, fill=1)
        _draw_text(pdf, frame.point(label.anchor), label.text, 0.0, size=6, bold=True, boxed=True)

    for marker in overlay.compass:
        x, y = frame.point(marker.anchor)
        pdf.setFillColor(HexColor("#ffffff"))
        pdf.setStrokeColor(LINE_STROKE)
        pdf.circle(x, y, 7, stroke=1, fill=1)
        _draw_text(pdf, (x, y), marker.text, 0.0, size=9, bold=True)

    for marma in overlay.marma:
        x, y = frame.point(marma.point)
        pdf.setFillColor(HexColor("#000000"))
        pdf.circle(x, y, 3, stroke=0, fill=1)
        _draw_text(pdf, (x, y + 9), marma.name, 0.0, size=7, bold=True)
        _draw_text(pdf, (x, y - 9), marma.coordinates, 0.0, size=5)

    for planet in overlay.planets:
        x, y = frame.point(planet.point)
        pdf.setFillColor(HexColor(planet.color))
        pdf.setStrokeColor(LINE_STROKE)
        pdf.circle(x, y, 8, stroke=1, fill=1)
        _draw_text(pdf, (x, y - 14), planet.name, 0.0, size=6, bold=True)

    cx, cy = frame.point(overlay.center)
    pdf.setFillColor(CENTER_FILL)
    pdf.setStrokeColor(HexColor("#ffffff"))
    pdf.circle(cx, cy, 4, stroke=1, fill=1)


def _draw_chart_page(pdf: canvas.Canvas, statistics: Sequence[AreaShare], method: str) -> None:
    width, height = CHART_PAGE_SIZE
    left, bottom, top = 70.0, 90.0, height - 110.0
    plot_width = width - left - 40.0

    pdf.setFillColor(TEXT_COLOR)
    pdf.setFont("Helvetica-Bold", 22)
    pdf.drawCentredString(width / 2, height - 60, "Directional Area Analysis")
    pdf.setFont("Helvetica", 11)
    pdf.setFillColor(MUTED_TEXT)
    note = "Percentage of total area in each direction"
    if method == "triangle":
        note += " (triangle approximation)"
    pdf.drawCentredString(width / 2, height - 82, note)

    peak = max((share.percent_of_total for share in statistics), default=0.0)
    y_max = max(5.0, (int(peak // 5) + 1) * 5.0)
    scale = (top - bottom) / y_max

    pdf.setStrokeColor(HexColor("#cccccc"))
    pdf.setLineWidth(0.5)
    pdf.setFont("Helvetica", 9)
    step = 5.0 if y_max <= 30 else 10.0
    tick = 0.0
    while tick <= y_max + 1e-9:
        y = bottom + tick * scale
        pdf.setDash(3, 3)
        pdf.line(left, y, left + plot_width, y)
        pdf.setDash()
        pdf.setFillColor(MUTED_TEXT)
        pdf.drawRightString(left - 6, y - 3, f"{tick:.0f}%")
        tick += step

    count = max(len(statistics), 1)
    slot = plot_width / count
    bar_width = slot * 0.6
    for index, share in enumerate(statistics):
        x = left + slot * index + (slot - bar_width) / 2
        bar_height = share.percent_of_total * scale
        pdf.setFillColor(HexColor("#8884d8"))
        pdf.rect(x, bottom, bar_width, bar_height, stroke=0, fill=1)
        pdf.setFillColor(TEXT_COLOR)
        pdf.setFont("Helvetica-Bold", 9)
        pdf.drawCentredString(x + bar_width / 2, bottom - 16 - (index % 2) * 14, share.direction)
        pdf.setFont("Helvetica", 7)
        pdf.drawCentredString(x + bar_width / 2, bottom + bar_height + 4, f"{share.percent_of_total:.1f}")


def _draw_metadata_page(
    pdf: canvas.Canvas,
    title: str,
    center: Point,
    polygon: Sequence[Point],
    transform: ChakraTransform,
    statistics: Sequence[AreaShare],
) -> None:
    _, height = METADATA_PAGE_SIZE
    pdf.setFillColor(TEXT_COLOR)
    pdf.setFont("Helvetica-Bold", 24)
    pdf.drawString(50, height - 80, title)

    pdf.setFont("Helvetica-Bold", 16)
    pdf.setFillColor(MUTED_TEXT)
    pdf.drawString(50, height - 140, "Analysis Details:")

    dominant = max(statistics, key=lambda share: share.percent_of_total, default=None)
    details = [
        f"Center Point: ({round(center[0])}, {round(center[1])})",
        f"Chakra Rotation: {transform.rotation:g}°",
        f"Chakra Scale: {transform.scale:.2f}x",
        f"Chakra Opacity: {round(transform.opacity * 100)}%",
        f"Plot Points: {len(polygon)} corners",
        f"Largest Direction: {dominant.direction} ({dominant.percent_of_total:.1f}%)"
        if dominant is not None and dominant.percent_of_total > 0
        else "Largest Direction: n/a",
        f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
    ]
    pdf.setFont("Helvetica", 12)
    for index, detail in enumerate(details):
        pdf.drawString(50, height - 180 - index * 25, detail)

    pdf.setFont("Helvetica-Bold", 14)
    pdf.setFillColor(TEXT_COLOR)
    pdf.drawString(50, 200, "Instructions:")
    pdf.setFont("Helvetica", 10)
    pdf.setFillColor(MUTED_TEXT)
    instructions = [
        "1. This report shows the property layout with the Vastu chakra overlay",
        "2. The chakra is positioned at the calculated center point of the plot",
        "3. Directional zones and the 32 entrances are marked clockwise from North",
        "4. The bar chart shows the area distribution by direction",
    ]
    for index, line in enumerate(instructions):
        pdf.drawString(50, 170 - index * 15, line)


def _draw_polygon(
    pdf: canvas.Canvas,
    polygon: Polygon,
    *,
    fill_color: HexColor | None,
    stroke_color: HexColor | None,
    stroke_width: float,
) -> None:
    if polygon.is_empty:
        return

    exterior = [(float(x), float(y)) for x, y in polygon.exterior.coords]
    if len(exterior) < 2:
        return

    pdf.saveState()
    pdf.setLineWidth(max(stroke_width, 0.1))
    if stroke_color:
        pdf.setStrokeColor(stroke_color)
    if fill_color:
        pdf.setFillColor(fill_color)

    path = pdf.beginPath()
    first_x, first_y = exterior[0]
    path.moveTo(first_x, first_y)
    for x, y in exterior[1:]:
        path.lineTo(x, y)
    path.close()

    pdf.drawPath(path, fill=1 if fill_color else 0, stroke=1 if stroke_color else 0)
    pdf.restoreState()


def _draw_line(pdf: canvas.Canvas, line: LineString, stroke_color: HexColor, stroke_width: float) -> None:
    coords = list(line.coords)
    if len(coords) < 2:
        return
    pdf.saveState()
    pdf.setStrokeColor(stroke_color)
    pdf.setLineWidth(max(stroke_width, 0.1))
    for start, end in zip(coords[:-1], coords[1:]):
        pdf.line(float(start[0]), float(start[1]), float(end[0]), float(end[1]))
    pdf.restoreState()


def _draw_text(
    pdf: canvas.Canvas,
    position: Tuple[float, float],
    text: str,
    compass_rotation: float,
    *,
    size: float,
    bold: bool = False,
    boxed: bool = False,
) -> None:
    font = "Helvetica-Bold" if bold else "Helvetica"
    pdf.saveState()
    pdf.translate(position[0], position[1])
    if compass_rotation:
        # compass angles turn clockwise, PDF rotation is counter-clockwise
        pdf.rotate(-compass_rotation)
    if boxed:
        box_w = pdf.stringWidth(text, font, size) + 4
        pdf.setFillColorRGB(1.0, 1.0, 1.0, alpha=0.9)
        pdf.setStrokeColor(HexColor("#000000"))
        pdf.setLineWidth(0.3)
        pdf.rect(-box_w / 2, -size * 0.5, box_w, size * 1.3, stroke=1, fill=1)
    pdf.setFillColor(TEXT_COLOR)
    pdf.setFont(font, size)
    pdf.drawCentredString(0, -size * 0.35, text)
    pdf.restoreState()


__all__ = ["PDFExportOptions", "export_pdf"]
