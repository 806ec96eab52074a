"""JIT-compiled four-neighbour sharpen.

The sharpen pass is computed from the pristine source rather than the canvas
and then composited over it, so for opaque images it replaces whatever the
earlier stages produced.  Pixels are updated in place in raster order, which
means the top and left neighbours of a pixel have already been sharpened when
it is visited.  That data dependency keeps the kernel a plain loop, hence
Numba rather than NumPy.
"""

from __future__ import annotations

import numpy as np
from numba import jit

from .utils import premultiply, unpremultiply


def sharpen_strength(amount: float) -> float:
    return (float(amount) / 100.0) * 0.5


@jit(nopython=True, cache=True)
def _sharpen_inplace(pixels: np.ndarray, strength: float) -> None:
    """Sharpen the interior of an ``H x W x 4`` ``uint8`` array in place."""

    height = pixels.shape[0]
    width = pixels.shape[1]
    if width < 3 or height < 3:
        return

    for y in range(1, height - 1):
        for x in range(1, width - 1):
            for c in range(3):
                current = float(pixels[y, x, c])
                neighbours = (
                    float(pixels[y - 1, x, c])
                    + float(pixels[y + 1, x, c])
                    + float(pixels[y, x - 1, c])
                    + float(pixels[y, x + 1, c])
                ) / 4.0
                value = current + (current - neighbours) * strength
                if value < 0.0:
                    value = 0.0
                elif value > 255.0:
                    value = 255.0
                pixels[y, x, c] = np.uint8(np.rint(value))


def sharpen_pixels(source: np.ndarray, amount: float) -> np.ndarray:
    """Return a sharpened copy of *source*; the border row and column are copied as-is."""

    out = np.array(source, dtype=np.uint8, copy=True, order="C")
    if float(amount) <= 0.0:
        return out
    _sharpen_inplace(out, sharpen_strength(amount))
    return out


def composite_over(top: np.ndarray, bottom: np.ndarray) -> np.ndarray:
    """Return *top* drawn over *bottom* with source-over compositing."""

    if bool(np.all(top[..., 3] == 255)):
        return np.array(top, copy=True)
    src = premultiply(top)
    dst = premultiply(bottom)
    out = src + dst * (1.0 - src[..., 3:4])
    return unpremultiply(out)


def apply_sharpen(canvas: np.ndarray, source: np.ndarray, amount: float) -> np.ndarray:
    """Sharpen the pristine *source* and composite it over *canvas*; no-op at ``0``."""

    if float(amount) <= 0.0:
        return canvas
    sharpened = sharpen_pixels(source, amount)
    return composite_over(sharpened, canvas)


__all__ = ["apply_sharpen", "composite_over", "sharpen_pixels", "sharpen_strength"]
