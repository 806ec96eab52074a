from __future__ import annotations

import numpy as np
import pytest

from iEnhance.core.filters.vignette import apply_vignette, build_vignette_gradient, vignette_inner_stop


def test_zero_amount_is_identity(make_solid) -> None:
    canvas = make_solid(10, 10)

    assert apply_vignette(canvas, 0) is canvas
    assert apply_vignette(canvas, -5) is canvas


def test_inner_stop_shrinks_with_amount() -> None:
    assert vignette_inner_stop(0) == 1.0
    assert vignette_inner_stop(50) == 0.75
    assert vignette_inner_stop(100) == 0.5


def test_gradient_stops() -> None:
    gradient = build_vignette_gradient(100, 50, 40)

    stops = gradient.stops()
    positions = [position for position, _ in stops]
    assert positions == pytest.approx([0.0, 0.8, 1.0])
    assert stops[0][1].alpha() == 0
    assert stops[1][1].alpha() == 0
    assert abs(stops[2][1].alphaF() - 0.4) < 0.01
    assert abs(gradient.radius() - np.hypot(50, 25)) < 1e-9


def test_centre_is_untouched_and_corners_darken(make_solid) -> None:
    canvas = make_solid(100, 100, (128, 128, 128))

    out = apply_vignette(canvas, 50)

    assert np.all(np.abs(out[50, 50, :3].astype(int) - 128) <= 1)
    corner = int(out[0, 0, 0])
    # Near the corner the gradient approaches alpha 0.5, multiplied in: 128 * (1 - ~0.48).
    assert 55 <= corner <= 80
    assert np.all(out[..., 3] == 255)


def test_higher_amount_darkens_more(make_solid) -> None:
    canvas = make_solid(60, 40, (200, 180, 160))

    light = apply_vignette(canvas, 20)
    heavy = apply_vignette(canvas, 90)

    assert heavy[0, 0, 0] < light[0, 0, 0] < 200
    assert heavy[0, 0, 3] == 255


def test_multiply_keeps_hue(make_solid) -> None:
    out = apply_vignette(make_solid(40, 40, (200, 100, 50)), 60)

    r, g, b = out[0, 0, :3].astype(float)
    assert r > g > b
