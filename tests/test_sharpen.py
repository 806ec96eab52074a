from __future__ import annotations

import numpy as np

from iEnhance.core.filters.sharpen import (
    apply_sharpen,
    composite_over,
    sharpen_pixels,
    sharpen_strength,
)


def _spike() -> np.ndarray:
    pixels = np.full((5, 5, 4), 100, dtype=np.uint8)
    pixels[..., 3] = 255
    pixels[2, 2, :3] = 200
    return pixels


def test_strength_scale() -> None:
    assert sharpen_strength(100) == 0.5
    assert sharpen_strength(50) == 0.25


def test_zero_amount_is_identity() -> None:
    canvas = np.zeros((5, 5, 4), dtype=np.uint8)

    assert apply_sharpen(canvas, _spike(), 0) is canvas


def test_sharpen_increases_local_contrast_at_an_edge() -> None:
    source = _spike()

    out = sharpen_pixels(source, 100)

    before = int(source[2, 2, 0]) - 100
    neighbours = [out[1, 2, 0], out[3, 2, 0], out[2, 1, 0], out[2, 3, 0]]
    after = int(out[2, 2, 0]) - float(np.mean(neighbours))
    assert after > before


def test_pixels_are_updated_in_raster_order() -> None:
    out = sharpen_pixels(_spike(), 100)

    # (1, 2) sees the untouched spike below it: 100 + (100 - 125) * 0.5 = 87.5 -> 88.
    assert out[1, 2, 0] == 88
    # The spike sees its already-sharpened top and left neighbours (88 each):
    # 200 + (200 - 94) * 0.5 = 253.
    assert out[2, 2, 0] == 253


def test_border_is_left_untouched() -> None:
    source = _spike()
    source[0, :, :3] = 30

    out = sharpen_pixels(source, 100)

    assert np.array_equal(out[0], source[0])
    assert np.array_equal(out[-1], source[-1])
    assert np.array_equal(out[:, 0], source[:, 0])
    assert np.array_equal(out[:, -1], source[:, -1])
    assert np.all(out[..., 3] == 255)


def test_sharpen_draws_from_the_source_not_the_canvas() -> None:
    source = np.full((6, 6, 4), 100, dtype=np.uint8)
    source[..., 3] = 255
    canvas = np.zeros((6, 6, 4), dtype=np.uint8)
    canvas[..., 3] = 255

    out = apply_sharpen(canvas, source, 80)

    assert np.array_equal(out, source)


def test_read_only_source_is_not_modified() -> None:
    source = _spike()
    source.setflags(write=False)

    sharpen_pixels(source, 100)

    assert source[2, 2, 0] == 200


def test_composite_over_keeps_canvas_under_transparent_pixels() -> None:
    top = np.zeros((2, 2, 4), dtype=np.uint8)
    top[0, 0] = [255, 0, 0, 255]
    bottom = np.full((2, 2, 4), 60, dtype=np.uint8)
    bottom[..., 3] = 255

    out = composite_over(top, bottom)

    assert out[0, 0].tolist() == [255, 0, 0, 255]
    assert out[1, 1].tolist() == [60, 60, 60, 255]
