"""Application-wide constants."""

from __future__ import annotations

LOGGER_NAME = "iEnhance"

MAX_DIMENSION = 1200
"""Longest edge, in pixels, an ingested image is bounded to."""

INGEST_JPEG_QUALITY = 90
"""Quality used when the resized raster is re-encoded as JPEG."""

EXPORT_FILENAME = "enhanced-image.png"
EXPORT_FORMAT = "PNG"

RENDER_DEBOUNCE_MS = 0
"""Delay used to coalesce rapid parameter edits before re-rendering."""
