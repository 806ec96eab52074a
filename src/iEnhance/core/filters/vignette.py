"""Radial vignette composited with a multiply blend."""

from __future__ import annotations

import math

import numpy as np
from PySide6.QtCore import QPointF, QRectF
from PySide6.QtGui import QBrush, QColor, QPainter, QRadialGradient

from ...errors import SurfaceError
from .utils import qimage_to_rgba, rgba_to_qimage


def vignette_inner_stop(amount: float) -> float:
    """Return the gradient position where darkening starts, as a fraction of the radius."""

    return 1.0 - float(amount) / 200.0


def build_vignette_gradient(width: int, height: int, amount: float) -> QRadialGradient:
    """Return the gradient: transparent up to the inner stop, then black at ``amount / 100`` alpha."""

    cx = width / 2.0
    cy = height / 2.0
    radius = math.hypot(cx, cy)
    gradient = QRadialGradient(QPointF(cx, cy), radius)
    gradient.setColorAt(0.0, QColor(0, 0, 0, 0))
    gradient.setColorAt(vignette_inner_stop(amount), QColor(0, 0, 0, 0))
    edge = QColor(0, 0, 0)
    edge.setAlphaF(min(1.0, float(amount) / 100.0))
    gradient.setColorAt(1.0, edge)
    return gradient


def apply_vignette(canvas: np.ndarray, amount: float) -> np.ndarray:
    """Darken the edges of *canvas*; no-op when ``amount <= 0``."""

    if float(amount) <= 0.0:
        return canvas

    height, width = canvas.shape[:2]
    image = rgba_to_qimage(canvas, premultiplied=True)
    painter = QPainter(image)
    if not painter.isActive():
        raise SurfaceError("Could not begin painting the vignette")
    try:
        painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_Multiply)
        painter.fillRect(QRectF(0.0, 0.0, width, height), QBrush(build_vignette_gradient(width, height, amount)))
        painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_SourceOver)
    finally:
        painter.end()
    return qimage_to_rgba(image)


__all__ = ["apply_vignette", "build_vignette_gradient", "vignette_inner_stop"]
