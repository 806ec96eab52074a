"""Serialise rendered frames to a lossless container."""

from __future__ import annotations

import io
import logging
import os
from pathlib import Path

from PIL import Image

from ..config import EXPORT_FILENAME, EXPORT_FORMAT
from ..errors import ExportError
from .raster import RenderedFrame

_LOGGER = logging.getLogger(__name__)


def encode_png(frame: RenderedFrame) -> bytes:
    """Return *frame* encoded as an RGBA PNG."""

    buffer = io.BytesIO()
    try:
        Image.fromarray(frame.pixels).save(buffer, format=EXPORT_FORMAT)
    except (OSError, ValueError) as exc:
        raise ExportError(f"Could not encode the rendered frame: {exc}") from exc
    return buffer.getvalue()


def resolve_export_path(target: Path | str | None) -> Path:
    """Return the output file for *target*; directories receive the default filename."""

    if target is None:
        return Path.cwd() / EXPORT_FILENAME
    path = Path(target)
    if path.is_dir():
        return path / EXPORT_FILENAME
    return path


def export_frame(frame: RenderedFrame, target: Path | str | None = None) -> Path:
    """Write *frame* as PNG and return the path that was written.

    The file is written next to its destination first and swapped in with
    :meth:`Path.replace`, so readers never observe a half-written image.
    """

    path = resolve_export_path(target)
    payload = encode_png(frame)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tmp_path.open("wb") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        tmp_path.replace(path)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise ExportError(f"Could not write {path}: {exc}") from exc
    _LOGGER.info("Exported %dx%d frame to %s", frame.width, frame.height, path)
    return path


__all__ = ["encode_png", "export_frame", "resolve_export_path"]
