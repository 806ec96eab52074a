"""Exception hierarchy for iEnhance."""

from __future__ import annotations


class IEnhanceError(Exception):
    """Base class for all iEnhance errors."""


class ImageDecodeError(IEnhanceError):
    """Raised when image bytes cannot be decoded into a raster."""


class SurfaceError(IEnhanceError):
    """Raised when an auxiliary drawing surface cannot be created or painted."""


class UnknownAdjustmentError(IEnhanceError, KeyError):
    """Raised when an adjustment name is not part of the parameter set."""


class UnknownPresetError(IEnhanceError, KeyError):
    """Raised when a preset name is not in the catalog."""


class IngestInProgressError(IEnhanceError):
    """Raised when a second ingestion is requested while one is outstanding."""


class ExportError(IEnhanceError):
    """Raised when the rendered frame cannot be serialised or written."""
