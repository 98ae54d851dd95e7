"""Tests for the canvas snapshot, PDF report and raster preview."""

import base64
import re

import pytest

cv2 = pytest.importorskip("cv2")
pytest.importorskip("reportlab")

from chakra.exceptions import ExportError, GeometryError, PreviewExportError
from chakra.export.canvas import CanvasSnapshot
from chakra.export.pdf_export import PDFExportOptions, export_pdf
from chakra.export.preview import render_preview
from chakra.geometry.primitives import as_points
from chakra.layout.config import ChakraTransform, LayoutOptions, OverlayLayer
from chakra.layout.overlay import build_overlay
from chakra.settings import ExportSettings

RECT = as_points([(200, 150), (600, 150), (600, 450), (200, 450)])


@pytest.fixture
def snapshot():
    return CanvasSnapshot.blank(800, 600)


class TestCanvasSnapshot:
    def test_blank(self, snapshot):
        assert (snapshot.width, snapshot.height) == (800, 600)
        assert snapshot.media_type == "image/png"
        assert snapshot.decode().shape == (600, 800, 3)

    def test_blank_for_polygon(self):
        blank = CanvasSnapshot.blank_for(RECT, margin=50)
        assert (blank.width, blank.height) == (650, 500)

    def test_blank_for_rejects_negative_coordinates(self):
        outline = as_points([(-500, -500), (-100, -500), (-100, -100), (-500, -100)])
        with pytest.raises(ExportError):
            CanvasSnapshot.blank_for(outline)

    def test_blank_for_caps_raster_but_keeps_frame(self):
        outline = as_points([(99000, 99000), (100000, 99000), (100000, 100000), (99000, 100000)])
        blank = CanvasSnapshot.blank_for(outline, max_dimension=500)
        assert (blank.width, blank.height) == (100040, 100040)
        assert blank.decode().shape == (500, 500, 3)

    def test_data_url_round_trip(self, snapshot):
        restored = CanvasSnapshot.from_data_url(snapshot.to_data_url())
        assert (restored.width, restored.height) == (800, 600)

    def test_from_path(self, tmp_path, snapshot):
        path = tmp_path / "plan.png"
        path.write_bytes(snapshot.data)
        assert CanvasSnapshot.from_path(path).width == 800

    def test_missing_file(self, tmp_path):
        with pytest.raises(ExportError):
            CanvasSnapshot.from_path(tmp_path / "missing.png")

    def test_garbage_bytes(self):
        with pytest.raises(ExportError):
            CanvasSnapshot.from_bytes(b"not an image")

    def test_bad_data_url(self):
        with pytest.raises(ExportError):
            CanvasSnapshot.from_data_url("nope")
        with pytest.raises(ExportError):
            CanvasSnapshot.from_data_url("data:image/png;base64," + base64.b64encode(b"junk").decode())


class TestPDFExport:
    """reportlab multi-page report."""

    def test_page_count(self, tmp_path, snapshot):
        pdf_path, warnings = export_pdf(
            snapshot=snapshot,
            polygon=RECT,
            transform=ChakraTransform(rotation=15.0),
            layout=LayoutOptions(),
            options=PDFExportOptions(),
            output_dir=tmp_path,
        )
        assert warnings == []
        assert pdf_path.name.startswith("vastu-analysis-")
        data = pdf_path.read_bytes()
        assert data.startswith(b"%PDF")
        # two overlay pages, chart, metadata
        assert _page_count(data) == 4

    def test_options_from_settings(self, tmp_path, snapshot):
        settings = ExportSettings(pages=["directions", "entrances", "all"], include_metadata_page=False)
        options = PDFExportOptions.from_settings(settings)
        assert options.pages[0] == OverlayLayer.DIRECTIONS
        assert options.pages[2] == OverlayLayer.everything()
        pdf_path, _ = export_pdf(
            snapshot=snapshot,
            polygon=RECT,
            transform=ChakraTransform(),
            layout=LayoutOptions(area_method="exact"),
            options=options,
            output_dir=tmp_path,
            file_name="report.pdf",
        )
        assert pdf_path == tmp_path / "report.pdf"
        assert _page_count(pdf_path.read_bytes()) == 4

    def test_requires_plot(self, tmp_path, snapshot):
        with pytest.raises(GeometryError):
            export_pdf(
                snapshot=snapshot,
                polygon=RECT[:2],
                transform=ChakraTransform(),
                layout=LayoutOptions(),
                options=PDFExportOptions(),
                output_dir=tmp_path,
            )

    def test_unembeddable_raster_is_a_warning(self, tmp_path):
        broken = CanvasSnapshot(data=b"not an image", width=800, height=600)
        pdf_path, warnings = export_pdf(
            snapshot=broken,
            polygon=RECT,
            transform=ChakraTransform(),
            layout=LayoutOptions(),
            options=PDFExportOptions(include_chart_page=False, include_metadata_page=False),
            output_dir=tmp_path,
        )
        assert pdf_path.exists()
        assert len(warnings) == 2


class TestPreview:
    def test_preview_written(self, tmp_path, snapshot):
        overlay = build_overlay(RECT, ChakraTransform(opacity=0.5), layers=OverlayLayer.everything())
        out = render_preview(snapshot, overlay, tmp_path / "preview.png")
        image = cv2.imread(str(out))
        assert image.shape == (600, 800, 3)
        # the center dot is drawn in red over the pale background
        b, g, r = image[300, 400]
        assert r > 200 and g < 120

    def test_preview_downscaled(self, tmp_path, snapshot):
        overlay = build_overlay(RECT)
        out = render_preview(snapshot, overlay, tmp_path / "small.png", max_dimension=400)
        assert cv2.imread(str(out)).shape[:2] == (300, 400)

    def test_preview_sized_from_frame(self, tmp_path):
        outline = as_points([(0, 0), (4000, 0), (4000, 3000), (0, 3000)])
        blank = CanvasSnapshot.blank_for(outline, margin=0, max_dimension=400)
        out = render_preview(blank, build_overlay(outline), tmp_path / "frame.png", max_dimension=800)
        assert cv2.imread(str(out)).shape[:2] == (600, 800)

    def test_bad_raster(self, tmp_path):
        broken = CanvasSnapshot(data=b"", width=10, height=10)
        with pytest.raises(PreviewExportError):
            render_preview(broken, build_overlay(RECT), tmp_path / "x.png")


def _page_count(data: bytes) -> int:
    counts = [int(value) for value in re.findall(rb"/Count (\d+)", data)]
    assert counts
    return max(counts)
