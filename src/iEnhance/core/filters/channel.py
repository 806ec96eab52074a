"""Composite colour filter applied with the geometric draw.

The chain mirrors the CSS shorthand filters in their fixed order:
brightness, contrast, saturate, blur, sepia, hue-rotate, grayscale and invert.
Colour primitives use the Filter Effects matrices on straight-alpha sRGB
values and clamp after every step.  Blur runs on premultiplied colour so
transparent areas (the corners of a rotated draw) bleed in correctly.
"""

from __future__ import annotations

import math

import numpy as np
from PIL import Image, ImageFilter

from ..adjustments import AdjustmentState
from .utils import premultiply, to_uint8, unpremultiply

_EPSILON = 1e-6


def saturate_matrix(amount: float) -> np.ndarray:
    s = amount
    return np.array(
        [
            [0.213 + 0.787 * s, 0.715 - 0.715 * s, 0.072 - 0.072 * s],
            [0.213 - 0.213 * s, 0.715 + 0.285 * s, 0.072 - 0.072 * s],
            [0.213 - 0.213 * s, 0.715 - 0.715 * s, 0.072 + 0.928 * s],
        ],
        dtype=np.float64,
    )


def sepia_matrix(amount: float) -> np.ndarray:
    inv = 1.0 - min(1.0, max(0.0, amount))
    return np.array(
        [
            [0.393 + 0.607 * inv, 0.769 - 0.769 * inv, 0.189 - 0.189 * inv],
            [0.349 - 0.349 * inv, 0.686 + 0.314 * inv, 0.168 - 0.168 * inv],
            [0.272 - 0.272 * inv, 0.534 - 0.534 * inv, 0.131 + 0.869 * inv],
        ],
        dtype=np.float64,
    )


def hue_rotate_matrix(degrees: float) -> np.ndarray:
    angle = math.radians(degrees)
    c = math.cos(angle)
    s = math.sin(angle)
    return np.array(
        [
            [0.213 + c * 0.787 - s * 0.213, 0.715 - c * 0.715 - s * 0.715, 0.072 - c * 0.072 + s * 0.928],
            [0.213 - c * 0.213 + s * 0.143, 0.715 + c * 0.285 + s * 0.140, 0.072 - c * 0.072 - s * 0.283],
            [0.213 - c * 0.213 - s * 0.787, 0.715 - c * 0.715 + s * 0.715, 0.072 + c * 0.928 + s * 0.072],
        ],
        dtype=np.float64,
    )


def grayscale_matrix(amount: float) -> np.ndarray:
    inv = 1.0 - min(1.0, max(0.0, amount))
    return np.array(
        [
            [0.2126 + 0.7874 * inv, 0.7152 - 0.7152 * inv, 0.0722 - 0.0722 * inv],
            [0.2126 - 0.2126 * inv, 0.7152 + 0.2848 * inv, 0.0722 - 0.0722 * inv],
            [0.2126 - 0.2126 * inv, 0.7152 - 0.7152 * inv, 0.0722 + 0.9278 * inv],
        ],
        dtype=np.float64,
    )


def _apply_matrix(rgb: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    return np.clip(rgb @ matrix.T, 0.0, 1.0)


def _apply_linear(rgb: np.ndarray, slope: float, intercept: float) -> np.ndarray:
    return np.clip(rgb * slope + intercept, 0.0, 1.0)


def gaussian_blur(rgba: np.ndarray, radius: float) -> np.ndarray:
    """Blur *rgba* with a Gaussian of standard deviation *radius* pixels.

    Pixels outside the image count as transparent black, so the borders of an
    opaque image fade out the way a canvas ``blur()`` filter does.
    """

    if radius <= _EPSILON:
        return rgba
    margin = int(math.ceil(3.0 * radius)) + 1
    premultiplied = to_uint8(premultiply(rgba) * 255.0)
    padded = np.pad(premultiplied, ((margin, margin), (margin, margin), (0, 0)))
    blurred = Image.fromarray(padded).filter(ImageFilter.GaussianBlur(radius=float(radius)))
    cropped = np.asarray(blurred, dtype=np.float32)[margin:-margin, margin:-margin]
    return unpremultiply(cropped / np.float32(255.0))


def filter_is_identity(state: AdjustmentState) -> bool:
    """Return ``True`` when the channel filter chain leaves pixels untouched."""

    return (
        abs(state.brightness - 100.0) <= _EPSILON
        and abs(state.contrast - 100.0) <= _EPSILON
        and abs(state.saturation - 100.0) <= _EPSILON
        and state.blur <= _EPSILON
        and state.sepia <= _EPSILON
        and abs(math.remainder(state.hue, 360.0)) <= _EPSILON
        and state.grayscale <= _EPSILON
        and state.invert <= _EPSILON
    )


def apply_filter_chain(rgba: np.ndarray, state: AdjustmentState) -> np.ndarray:
    """Return *rgba* with the full channel filter chain applied.

    Parameters at their neutral value are skipped, so the default state
    returns the input unchanged.
    """

    if filter_is_identity(state):
        return rgba

    alpha = rgba[..., 3:4]
    rgb = rgba[..., :3].astype(np.float64) / 255.0

    brightness = state.brightness / 100.0
    if abs(brightness - 1.0) > _EPSILON:
        rgb = _apply_linear(rgb, brightness, 0.0)

    contrast = state.contrast / 100.0
    if abs(contrast - 1.0) > _EPSILON:
        rgb = _apply_linear(rgb, contrast, 0.5 - 0.5 * contrast)

    saturation = state.saturation / 100.0
    if abs(saturation - 1.0) > _EPSILON:
        rgb = _apply_matrix(rgb, saturate_matrix(saturation))

    if state.blur > _EPSILON:
        # Blur is the one spatial primitive; it needs the alpha channel, so the
        # intermediate result goes back to bytes like a filter surface would.
        staged = np.concatenate([to_uint8(rgb * 255.0), alpha], axis=2)
        staged = gaussian_blur(staged, state.blur)
        alpha = staged[..., 3:4]
        rgb = staged[..., :3].astype(np.float64) / 255.0

    if state.sepia > _EPSILON:
        rgb = _apply_matrix(rgb, sepia_matrix(state.sepia / 100.0))

    if abs(math.remainder(state.hue, 360.0)) > _EPSILON:
        rgb = _apply_matrix(rgb, hue_rotate_matrix(state.hue))

    if state.grayscale > _EPSILON:
        rgb = _apply_matrix(rgb, grayscale_matrix(state.grayscale / 100.0))

    if state.invert > _EPSILON:
        amount = min(1.0, state.invert / 100.0)
        rgb = _apply_linear(rgb, 1.0 - 2.0 * amount, amount)

    return np.concatenate([to_uint8(rgb * 255.0), alpha], axis=2)


__all__ = [
    "apply_filter_chain",
    "filter_is_identity",
    "gaussian_blur",
    "grayscale_matrix",
    "hue_rotate_matrix",
    "saturate_matrix",
    "sepia_matrix",
]
