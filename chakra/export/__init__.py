"""Export helpers: canvas snapshot, PDF report and raster preview."""

from .canvas import CanvasSnapshot
from .pdf_export import PDFExportOptions, export_pdf
from .preview import render_preview
