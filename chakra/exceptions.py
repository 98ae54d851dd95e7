"""Custom exception hierarchy for the chakra overlay tool."""

from __future__ import annotations


class ChakraError(Exception):
    """Base exception for all chakra-specific errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(ChakraError):
    """Raised when configuration is invalid or missing."""
    pass


class ValidationError(ChakraError):
    """Base class for input validation errors."""
    pass


class SelectionError(ValidationError):
    """Raised when the plot selection lifecycle is misused."""
    pass


class PlotInputError(ValidationError):
    """Raised when a plot description file cannot be parsed."""
    pass


class GeometryError(ChakraError):
    """Raised when a collaborator asks for geometry that does not exist yet."""
    pass


class ExportError(ChakraError):
    """Base class for export-related errors."""
    pass


class PDFExportError(ExportError):
    """Raised when PDF export fails."""
    pass


class PreviewExportError(ExportError):
    """Raised when the raster preview cannot be rendered or written."""
    pass


class OverlayWriteError(ExportError):
    """Raised when the GeoJSON overlay cannot be written."""
    pass
