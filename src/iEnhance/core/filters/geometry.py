"""Rotation and flips, drawn with the channel filter chain bound to the same call."""

from __future__ import annotations

import numpy as np
from PySide6.QtCore import QPointF
from PySide6.QtGui import QPainter, QTransform

from ...errors import SurfaceError
from ..adjustments import AdjustmentState
from .channel import apply_filter_chain
from .utils import new_surface, qimage_to_rgba, rgba_to_qimage


def build_draw_transform(width: int, height: int, state: AdjustmentState) -> QTransform:
    """Return the canvas transform used to draw the source.

    The order is fixed: translate to the canvas centre, rotate clockwise by
    ``state.rotation`` degrees, then mirror.  Swapping rotate and scale changes
    the result for any non-zero rotation combined with a flip.
    """

    transform = QTransform()
    transform.translate(width / 2.0, height / 2.0)
    transform.rotate(float(state.rotation))
    transform.scale(
        -1.0 if state.flip_horizontal else 1.0,
        -1.0 if state.flip_vertical else 1.0,
    )
    return transform


def _is_axis_identity(state: AdjustmentState) -> bool:
    return (
        float(state.rotation) % 360.0 == 0.0
        and not state.flip_horizontal
        and not state.flip_vertical
    )


def draw_transformed(source: np.ndarray, state: AdjustmentState) -> np.ndarray:
    """Return the source drawn onto a same-sized transparent canvas with rotation and flips."""

    height, width = source.shape[:2]
    if _is_axis_identity(state):
        return np.array(source, copy=True)

    image = rgba_to_qimage(source, premultiplied=True)
    canvas = new_surface(width, height)
    painter = QPainter(canvas)
    if not painter.isActive():
        raise SurfaceError("Could not begin painting on the geometry canvas")
    try:
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, True)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        painter.setTransform(build_draw_transform(width, height, state))
        painter.drawImage(QPointF(-width / 2.0, -height / 2.0), image)
    finally:
        painter.end()
    return qimage_to_rgba(canvas)


def draw_source(source: np.ndarray, state: AdjustmentState) -> np.ndarray:
    """Draw *source* with the geometric transform and the channel filter chain.

    The filter is attached to the draw: the transformed layer is filtered
    before it lands on the cleared canvas, as a canvas ``filter`` would be.
    Because the canvas is cleared first, the filtered layer is the canvas.
    """

    layer = draw_transformed(source, state)
    return apply_filter_chain(layer, state)


__all__ = ["build_draw_transform", "draw_source", "draw_transformed"]
