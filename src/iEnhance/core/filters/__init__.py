"""Pixel stages of the rendering pipeline.

- channel: CSS-style colour matrices and Gaussian blur
- geometry: rotation and flips, drawn with the channel filter bound
- tone: exposure and highlights/shadows
- sharpen: Numba four-neighbour sharpen from the pristine source
- vignette: radial multiply gradient
- utils: QImage/NumPy buffer helpers
"""

from __future__ import annotations

from .channel import apply_filter_chain
from .geometry import draw_source
from .sharpen import apply_sharpen
from .tone import apply_exposure, apply_highlights_shadows
from .vignette import apply_vignette

__all__ = [
    "apply_exposure",
    "apply_filter_chain",
    "apply_highlights_shadows",
    "apply_sharpen",
    "apply_vignette",
    "draw_source",
]
