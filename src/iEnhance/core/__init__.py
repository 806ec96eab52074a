"""Rendering core: adjustments, rasters, ingestion, pipeline and export."""
