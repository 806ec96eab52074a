"""Controllers and background tasks for the edit view."""
