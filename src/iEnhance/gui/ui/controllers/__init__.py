"""Controllers coordinating adjustments, ingestion and rendering."""

from .edit_controller import EditController

__all__ = ["EditController"]
