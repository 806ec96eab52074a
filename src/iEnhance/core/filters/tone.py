"""Exposure and highlights/shadows remapping.

Both passes are vectorised with NumPy and read the canvas exactly as the
previous stage left it.  Results are clamped to ``[0, 255]`` and rounded half
to even, matching a clamped 8-bit pixel store.
"""

from __future__ import annotations

import numpy as np

from .utils import to_uint8

# Rec. 601 weights; the tone curve is pinned at the mid-grey of this luminance.
_LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)


def exposure_factor(exposure: float) -> float:
    return float(exposure) / 100.0


def apply_exposure(rgba: np.ndarray, exposure: float) -> np.ndarray:
    """Scale R, G and B by ``exposure / 100``; alpha is left unchanged."""

    if float(exposure) == 100.0:
        return rgba

    factor = exposure_factor(exposure)
    out = np.array(rgba, copy=True)
    out[..., :3] = to_uint8(rgba[..., :3].astype(np.float64) * factor)
    return out


def tone_factors(rgb: np.ndarray, highlights: float, shadows: float) -> np.ndarray:
    """Return the per-pixel multiplier for the highlights/shadows curve.

    Above mid luminance the factor ramps from ``1`` at ``L = 0.5`` to
    ``highlights / 100`` at ``L = 1``; below it the factor is
    ``(shadows / 100) * L * 2``.
    """

    luminance = (rgb.astype(np.float64) @ _LUMA_WEIGHTS) / 255.0
    highlights_factor = float(highlights) / 100.0
    shadows_factor = float(shadows) / 100.0
    return np.where(
        luminance > 0.5,
        1.0 + (highlights_factor - 1.0) * (luminance - 0.5) * 2.0,
        shadows_factor * luminance * 2.0,
    )


def apply_highlights_shadows(rgba: np.ndarray, highlights: float, shadows: float) -> np.ndarray:
    """Apply the luminance-dependent tone curve; identity when both values are 100."""

    if float(highlights) == 100.0 and float(shadows) == 100.0:
        return rgba

    factors = tone_factors(rgba[..., :3], highlights, shadows)
    out = np.array(rgba, copy=True)
    out[..., :3] = to_uint8(rgba[..., :3].astype(np.float64) * factors[..., None])
    return out


__all__ = ["apply_exposure", "apply_highlights_shadows", "exposure_factor", "tone_factors"]
