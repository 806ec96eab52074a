from __future__ import annotations

import io

import numpy as np
from PIL import Image

from iEnhance.core.adjustments import AdjustmentState
from iEnhance.core.ingest import ingest_bytes
from iEnhance.core.pipeline import STAGES, Stage, render
from iEnhance.core.raster import SourceImage


def _gradient_png(width: int, height: int) -> bytes:
    x = np.linspace(40, 160, width, dtype=np.float64)
    y = np.linspace(60, 140, height, dtype=np.float64)
    rgb = np.empty((height, width, 3), dtype=np.uint8)
    rgb[..., 0] = x[None, :].astype(np.uint8)
    rgb[..., 1] = y[:, None].astype(np.uint8)
    rgb[..., 2] = 100
    buffer = io.BytesIO()
    Image.fromarray(rgb).save(buffer, format="PNG")
    return buffer.getvalue()


def test_missing_source_is_a_silent_no_op() -> None:
    assert render(None, AdjustmentState(brightness=150)) is None


def test_stage_order() -> None:
    assert [stage.name for stage in STAGES] == [
        "geometry",
        "exposure",
        "highlights_shadows",
        "sharpen",
        "vignette",
    ]


def test_default_state_reproduces_the_source(make_solid) -> None:
    rng = np.random.default_rng(5)
    pixels = rng.integers(0, 256, size=(12, 17, 4), dtype=np.uint8)
    pixels[..., 3] = 255
    source = SourceImage(pixels)

    frame = render(source, AdjustmentState())

    assert np.array_equal(frame.pixels, source.pixels)
    assert frame.pixels.flags.writeable
    assert frame.pixels is not source.pixels


def test_render_clamps_the_state(make_solid) -> None:
    frame = render(SourceImage(make_solid(4, 4)), AdjustmentState(brightness=500, exposure=10))

    assert frame.state.brightness == 200
    assert frame.state.exposure == 50


def test_source_is_never_mutated(make_solid) -> None:
    source = SourceImage(make_solid(8, 8, (90, 100, 110)))
    before = source.copy_pixels()

    render(source, AdjustmentState(brightness=180, exposure=140, sharpen=50, vignette=80, rotation=30))

    assert np.array_equal(source.pixels, before)


def test_brightness_end_to_end_on_an_ingested_image() -> None:
    result = ingest_bytes(_gradient_png(2000, 1000))
    assert (result.width, result.height) == (1200, 600)

    base = render(result.source, AdjustmentState())
    bright = render(result.source, AdjustmentState(brightness=150, contrast=100, saturation=100))

    base_rgb = base.pixels[..., :3].astype(int)
    bright_rgb = bright.pixels[..., :3].astype(int)
    assert bright.pixels.shape == (600, 1200, 4)
    assert np.all(bright_rgb[base_rgb > 0] > base_rgb[base_rgb > 0])


def test_vignette_end_to_end_on_uniform_grey(make_solid) -> None:
    source = SourceImage(make_solid(100, 100, (128, 128, 128)))

    frame = render(source, AdjustmentState(vignette=50))

    assert np.all(np.abs(frame.pixels[50, 50, :3].astype(int) - 128) <= 1)
    ring = np.concatenate([frame.pixels[0, :, 0], frame.pixels[-1, :, 0]])
    assert ring.max() <= 129
    assert ring.min() < 100
    assert frame.pixels[0, 0, 0] < frame.pixels[0, 50, 0]


def test_sharpen_recomputes_from_the_source(make_solid) -> None:
    source = SourceImage(make_solid(10, 10, (100, 100, 100)))

    frame = render(source, AdjustmentState(exposure=150, sharpen=50))

    # A uniform source is unchanged by sharpening, and the sharpened source
    # replaces the exposure-adjusted canvas.
    assert np.array_equal(frame.pixels, source.pixels)


def test_exposure_then_tone_read_the_canvas(make_solid) -> None:
    source = SourceImage(make_solid(4, 4, (100, 100, 100)))

    frame = render(source, AdjustmentState(exposure=150, highlights=50))

    # Exposure lifts 100 to 150 (L ~ 0.588), then the highlight curve
    # scales by 1 - 0.5 * (0.588 - 0.5) * 2.
    luminance = 150 / 255
    expected = round(150 * (1 - 0.5 * (luminance - 0.5) * 2))
    assert frame.pixels[0, 0, 0] == expected


def test_failed_stage_is_skipped_and_later_stages_run(make_solid) -> None:
    def explode(canvas, source, state):
        raise RuntimeError("surface unavailable")

    def mark(canvas, source, state):
        out = canvas.copy()
        out[0, 0, :3] = 7
        return out

    stages = (STAGES[0], Stage("broken", explode), Stage("mark", mark))
    source = SourceImage(make_solid(3, 3, (50, 60, 70)))

    frame = render(source, AdjustmentState(), stages=stages)

    assert frame.pixels[0, 0, :3].tolist() == [7, 7, 7]
    assert frame.pixels[1, 1, :3].tolist() == [50, 60, 70]


def test_generation_is_carried_on_the_frame(make_solid) -> None:
    frame = render(SourceImage(make_solid(2, 2)), AdjustmentState(), generation=4)

    assert frame.generation == 4
