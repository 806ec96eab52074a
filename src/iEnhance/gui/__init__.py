"""Qt collaborators driving the rendering core."""
