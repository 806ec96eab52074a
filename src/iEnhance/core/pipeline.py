"""Ordered rendering pipeline turning a source and an adjustment state into a frame."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from .adjustments import AdjustmentState
from .filters import (
    apply_exposure,
    apply_highlights_shadows,
    apply_sharpen,
    apply_vignette,
    draw_source,
)
from .raster import RenderedFrame, SourceImage

_LOGGER = logging.getLogger(__name__)

StageFunction = Callable[[np.ndarray, SourceImage, AdjustmentState], np.ndarray]


@dataclass(frozen=True)
class Stage:
    """One full-frame pass: takes the canvas and returns the next canvas."""

    name: str
    run: StageFunction


def _geometry_stage(canvas: np.ndarray, source: SourceImage, state: AdjustmentState) -> np.ndarray:
    # The canvas is cleared and redrawn from the source; the incoming canvas only
    # serves as the fallback when drawing fails.
    return draw_source(source.pixels, state)


def _exposure_stage(canvas: np.ndarray, source: SourceImage, state: AdjustmentState) -> np.ndarray:
    return apply_exposure(canvas, state.exposure)


def _tone_stage(canvas: np.ndarray, source: SourceImage, state: AdjustmentState) -> np.ndarray:
    return apply_highlights_shadows(canvas, state.highlights, state.shadows)


def _sharpen_stage(canvas: np.ndarray, source: SourceImage, state: AdjustmentState) -> np.ndarray:
    return apply_sharpen(canvas, source.pixels, state.sharpen)


def _vignette_stage(canvas: np.ndarray, source: SourceImage, state: AdjustmentState) -> np.ndarray:
    return apply_vignette(canvas, state.vignette)


STAGES: tuple[Stage, ...] = (
    Stage("geometry", _geometry_stage),
    Stage("exposure", _exposure_stage),
    Stage("highlights_shadows", _tone_stage),
    Stage("sharpen", _sharpen_stage),
    Stage("vignette", _vignette_stage),
)
"""Fixed stage order; every stage consumes the full output of the previous one."""


def run_stages(
    source: SourceImage,
    state: AdjustmentState,
    stages: tuple[Stage, ...] = STAGES,
) -> np.ndarray:
    """Thread one canvas through *stages* and return the final pixels.

    A stage that raises is logged and skipped: the canvas stays as the
    previous stage left it and the remaining stages still run.
    """

    canvas = source.copy_pixels()
    for stage in stages:
        started = time.perf_counter()
        try:
            result = stage.run(canvas, source, state)
        except Exception:
            _LOGGER.warning("Render stage %r failed; effect not applied", stage.name, exc_info=True)
            continue
        if result.shape != canvas.shape:
            _LOGGER.warning(
                "Render stage %r returned shape %s, expected %s; effect not applied",
                stage.name,
                result.shape,
                canvas.shape,
            )
            continue
        canvas = result
        _LOGGER.debug("Stage %s finished in %.2f ms", stage.name, (time.perf_counter() - started) * 1000.0)
    return canvas


def render(
    source: Optional[SourceImage],
    state: AdjustmentState | None = None,
    *,
    generation: int = 0,
    stages: tuple[Stage, ...] = STAGES,
) -> Optional[RenderedFrame]:
    """Render *source* with *state*; returns ``None`` when there is no source.

    The function is pure: every call starts again from the untouched source,
    so the result only depends on its arguments.
    """

    if source is None:
        return None

    resolved = (state or AdjustmentState()).clamped()
    pixels = run_stages(source, resolved, stages)
    if pixels is source.pixels or not pixels.flags.writeable:
        pixels = np.array(pixels, copy=True)
    return RenderedFrame(pixels=pixels, state=resolved, generation=generation)


__all__ = ["STAGES", "Stage", "render", "run_stages"]
