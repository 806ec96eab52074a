"""Decode uploaded bytes and produce the bounded canonical source raster."""

from __future__ import annotations

import io
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError
from PySide6.QtGui import QImage

from ..config import INGEST_JPEG_QUALITY, MAX_DIMENSION
from ..errors import ImageDecodeError
from .raster import SourceImage

_LOGGER = logging.getLogger(__name__)

_DECODE_ERRORS = (
    UnidentifiedImageError,
    Image.DecompressionBombError,
    OSError,
    ValueError,
    SyntaxError,
)


def _round_half_up(value: float) -> int:
    """Round like JavaScript's ``Math.round`` (ties go towards positive infinity)."""

    return int(math.floor(value + 0.5))


def compute_target_size(width: int, height: int, max_dimension: int = MAX_DIMENSION) -> tuple[int, int]:
    """Return ``(width, height)`` bounded by *max_dimension*, preserving the aspect ratio.

    Landscape and square images are bounded by their width, portrait images
    by their height.  Images already inside the bound are left unchanged.
    """

    if width <= 0 or height <= 0:
        return width, height
    if width >= height:
        if width > max_dimension:
            return max_dimension, max(1, _round_half_up(height * max_dimension / width))
    elif height > max_dimension:
        return max(1, _round_half_up(width * max_dimension / height)), max_dimension
    return width, height


@dataclass(frozen=True)
class IngestResult:
    """Outcome of one ingestion.

    ``data`` holds the re-encoded JPEG, or the original bytes when the
    degraded path was taken.  ``source`` is ``None`` only when nothing could
    decode the bytes.
    """

    data: bytes
    width: int
    height: int
    source: Optional[SourceImage]
    resized: bool = False
    degraded: bool = False


def _decode(data: bytes) -> Image.Image:
    with Image.open(io.BytesIO(data)) as handle:
        handle.load()
        image = ImageOps.exif_transpose(handle)
        return image.convert("RGBA")


def _encode_jpeg(image: Image.Image, quality: int) -> bytes:
    # JPEG has no alpha; transparent areas flatten onto black like a canvas export does.
    flattened = Image.new("RGB", image.size, (0, 0, 0))
    flattened.paste(image, mask=image.getchannel("A"))
    buffer = io.BytesIO()
    flattened.save(buffer, format="JPEG", quality=int(quality))
    return buffer.getvalue()


def decode_source(data: bytes) -> SourceImage:
    """Decode *data* as-is into a :class:`SourceImage`.

    Pillow is tried first; Qt's image plugins are the second chance.  Raises
    :class:`ImageDecodeError` when neither can read the bytes.
    """

    try:
        with Image.open(io.BytesIO(data)) as handle:
            handle.load()
            rgba = ImageOps.exif_transpose(handle).convert("RGBA")
        return SourceImage(np.asarray(rgba, dtype=np.uint8))
    except _DECODE_ERRORS:
        _LOGGER.debug("Pillow could not decode %d bytes, trying Qt", len(data))

    image = QImage.fromData(data)
    if image.isNull():
        raise ImageDecodeError("Image data could not be decoded")
    return SourceImage.from_qimage(image)


def _degraded_result(data: bytes) -> IngestResult:
    try:
        source: Optional[SourceImage] = decode_source(data)
    except ImageDecodeError:
        source = None
    width = source.width if source is not None else 0
    height = source.height if source is not None else 0
    return IngestResult(data=data, width=width, height=height, source=source, degraded=True)


def ingest_bytes(
    data: bytes,
    *,
    max_dimension: int = MAX_DIMENSION,
    quality: int = INGEST_JPEG_QUALITY,
) -> IngestResult:
    """Decode, bound and re-encode *data*.

    The result's ``source`` is decoded from the re-encoded JPEG so the
    pipeline sees the same pixels that would be stored.  When decoding or
    resizing fails the original bytes are returned unresized instead.
    """

    try:
        image = _decode(data)
        width, height = compute_target_size(image.width, image.height, max_dimension)
        resized = (width, height) != image.size
        if resized:
            image = image.resize((width, height), Image.Resampling.LANCZOS)
        encoded = _encode_jpeg(image, quality)
        with Image.open(io.BytesIO(encoded)) as handle:
            pixels = np.asarray(handle.convert("RGBA"), dtype=np.uint8)
    except _DECODE_ERRORS as exc:
        _LOGGER.warning("Falling back to the original image bytes: %s", exc)
        return _degraded_result(data)

    _LOGGER.info("Ingested image at %dx%d (resized=%s)", width, height, resized)
    return IngestResult(
        data=encoded,
        width=width,
        height=height,
        source=SourceImage(pixels),
        resized=resized,
    )


def ingest_path(path: Path | str, **kwargs) -> IngestResult:
    """Read *path* and delegate to :func:`ingest_bytes`."""

    return ingest_bytes(Path(path).read_bytes(), **kwargs)


__all__ = ["IngestResult", "compute_target_size", "decode_source", "ingest_bytes", "ingest_path"]
