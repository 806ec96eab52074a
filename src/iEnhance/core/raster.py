"""Source and output rasters plus the store that owns them."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from PySide6.QtGui import QImage

from .adjustments import AdjustmentState
from .filters.utils import qimage_to_rgba, rgba_to_qimage

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class SourceImage:
    """Immutable decoded raster every render starts from.

    The pixel array is flagged read-only on construction so an accidental
    in-place write from a stage fails loudly instead of corrupting later renders.
    """

    pixels: np.ndarray

    def __post_init__(self) -> None:
        pixels = self.pixels
        if pixels.ndim != 3 or pixels.shape[2] != 4 or pixels.dtype != np.uint8:
            raise ValueError("SourceImage expects an H x W x 4 uint8 RGBA array")
        if pixels.flags.writeable:
            pixels = pixels.copy()
            pixels.setflags(write=False)
            object.__setattr__(self, "pixels", pixels)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @classmethod
    def from_array(cls, pixels: np.ndarray) -> "SourceImage":
        """Wrap an RGBA array; RGB input gets an opaque alpha channel."""

        array = np.asarray(pixels, dtype=np.uint8)
        if array.ndim == 3 and array.shape[2] == 3:
            alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
            array = np.concatenate([array, alpha], axis=2)
        return cls(array)

    @classmethod
    def from_qimage(cls, image: QImage) -> "SourceImage":
        return cls(qimage_to_rgba(image))

    def to_qimage(self) -> QImage:
        return rgba_to_qimage(self.pixels)

    def copy_pixels(self) -> np.ndarray:
        """Return a writable copy of the pixel array."""

        return np.array(self.pixels, copy=True)


@dataclass(eq=False)
class RenderedFrame:
    """Output raster produced by one pipeline run."""

    pixels: np.ndarray
    state: AdjustmentState = field(default_factory=AdjustmentState)
    generation: int = 0

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def to_qimage(self) -> QImage:
        return rgba_to_qimage(self.pixels)


class RasterStore:
    """Own the current :class:`SourceImage` and the latest :class:`RenderedFrame`.

    Every published source bumps :attr:`generation`.  Frames carry the
    generation they were rendered from, which lets the store drop results of
    renders that were still running when the source was replaced or removed.
    """

    def __init__(self) -> None:
        self._source: Optional[SourceImage] = None
        self._frame: Optional[RenderedFrame] = None
        self._generation = 0

    @property
    def source(self) -> Optional[SourceImage]:
        return self._source

    @property
    def frame(self) -> Optional[RenderedFrame]:
        return self._frame

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def has_source(self) -> bool:
        return self._source is not None

    def publish_source(self, source: SourceImage) -> int:
        """Replace the source image and return the new generation."""

        self._generation += 1
        self._source = source
        self._frame = None
        _LOGGER.debug(
            "Published %dx%d source as generation %d",
            source.width,
            source.height,
            self._generation,
        )
        return self._generation

    def clear(self) -> None:
        """Drop the source and the frame; rendering is suppressed until a new source arrives."""

        self._generation += 1
        self._source = None
        self._frame = None

    def publish_frame(self, frame: RenderedFrame) -> bool:
        """Store *frame* if it belongs to the current source; return whether it was kept."""

        if self._source is None or frame.generation != self._generation:
            _LOGGER.debug(
                "Discarding stale frame (generation %d, current %d)",
                frame.generation,
                self._generation,
            )
            return False
        self._frame = frame
        return True


__all__ = ["RasterStore", "RenderedFrame", "SourceImage"]
