"""Helpers moving pixels between :class:`QImage` surfaces and NumPy arrays.

Every stage of the pipeline works on ``H x W x 4`` RGBA ``uint8`` arrays.  The
stages that paint (geometry and vignette) borrow a :class:`QImage` surface for
the duration of the draw call and read the result straight back.
"""

from __future__ import annotations

import numpy as np
from PySide6.QtCore import Qt
from PySide6.QtGui import QImage

from ...errors import SurfaceError


def _resolve_pixel_buffer(image: QImage) -> tuple[memoryview, object]:
    """Return a 1-D :class:`memoryview` over *image*'s pixels.

    PySide exposes ``bits()`` as a ready-to-use ``memoryview`` whereas PyQt
    hands back a ``sip.voidptr`` that needs ``setsize`` first.  The tuple's
    second element keeps the wrapper that owns the buffer alive for as long as
    the view is in scope.
    """

    bytes_per_line = image.bytesPerLine()
    height = image.height()
    buffer = image.bits()
    expected_size = bytes_per_line * height

    guard: object = buffer

    if isinstance(buffer, memoryview):
        view = buffer
    else:
        try:
            view = memoryview(buffer)
        except TypeError:
            if hasattr(buffer, "setsize"):
                buffer.setsize(expected_size)
                view = memoryview(buffer)
            else:
                raise RuntimeError("Unsupported QImage.bits() buffer wrapper") from None

    try:
        view = view.cast("B")
    except TypeError:
        # Multi-dimensional views need the shape argument on older interpreters.
        view = view.cast("B", (view.nbytes,))

    if len(view) < expected_size:
        view = view[:expected_size]

    return view, guard


def qimage_to_rgba(image: QImage) -> np.ndarray:
    """Return a writable ``H x W x 4`` RGBA copy of *image* (straight alpha)."""

    if image.isNull():
        raise SurfaceError("Cannot read pixels from a null QImage")

    if image.format() != QImage.Format.Format_RGBA8888:
        image = image.convertToFormat(QImage.Format.Format_RGBA8888)

    width = image.width()
    height = image.height()
    bytes_per_line = image.bytesPerLine()

    view, guard = _resolve_pixel_buffer(image)
    _ = guard

    buffer = np.frombuffer(view, dtype=np.uint8, count=bytes_per_line * height)
    surface = buffer.reshape((height, bytes_per_line))
    return surface[:, : width * 4].reshape((height, width, 4)).copy()


def rgba_to_qimage(pixels: np.ndarray, *, premultiplied: bool = False) -> QImage:
    """Return a detached :class:`QImage` holding *pixels*.

    ``premultiplied=True`` converts the result to
    ``Format_RGBA8888_Premultiplied`` which is the fast path for
    :class:`QPainter`.
    """

    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ValueError(f"Expected an H x W x 4 array, got shape {pixels.shape}")

    height, width = pixels.shape[:2]
    contiguous = np.ascontiguousarray(pixels, dtype=np.uint8)
    data = contiguous.tobytes()
    # ``QImage`` does not take ownership of *data*; ``copy()`` detaches it before the bytes go away.
    image = QImage(data, width, height, width * 4, QImage.Format.Format_RGBA8888).copy()
    if image.isNull():
        raise SurfaceError(f"Could not allocate a {width}x{height} surface")
    if premultiplied:
        image = image.convertToFormat(QImage.Format.Format_RGBA8888_Premultiplied)
    return image


def new_surface(width: int, height: int) -> QImage:
    """Return a cleared, transparent premultiplied surface."""

    surface = QImage(width, height, QImage.Format.Format_RGBA8888_Premultiplied)
    if surface.isNull():
        raise SurfaceError(f"Could not allocate a {width}x{height} surface")
    surface.fill(Qt.GlobalColor.transparent)
    return surface


def to_uint8(values: np.ndarray) -> np.ndarray:
    """Clamp *values* to ``[0, 255]`` and round half to even like a clamped byte array."""

    return np.rint(np.clip(values, 0.0, 255.0)).astype(np.uint8)


def premultiply(rgba: np.ndarray) -> np.ndarray:
    """Return float32 premultiplied RGBA in ``[0, 1]``."""

    values = rgba.astype(np.float32) / np.float32(255.0)
    values[..., :3] *= values[..., 3:4]
    return values


def unpremultiply(values: np.ndarray) -> np.ndarray:
    """Inverse of :func:`premultiply`, returning ``uint8`` RGBA."""

    out = values.astype(np.float32, copy=True)
    alpha = out[..., 3:4]
    safe = np.where(alpha > 0.0, alpha, np.float32(1.0))
    out[..., :3] = np.where(alpha > 0.0, out[..., :3] / safe, 0.0)
    return to_uint8(out * np.float32(255.0))


__all__ = [
    "new_surface",
    "premultiply",
    "qimage_to_rgba",
    "rgba_to_qimage",
    "to_uint8",
    "unpremultiply",
]
