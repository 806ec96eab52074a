from __future__ import annotations

import dataclasses
import math

import pytest

from iEnhance.core.adjustments import (
    ADJUSTMENT_KEYS,
    ADJUSTMENT_RANGES,
    DEFAULT_ADJUSTMENTS,
    AdjustmentState,
)
from iEnhance.errors import UnknownAdjustmentError


def test_defaults_match_documented_values() -> None:
    state = AdjustmentState()

    assert state.brightness == 100
    assert state.contrast == 100
    assert state.saturation == 100
    assert state.blur == 0
    assert state.hue == 0
    assert state.grayscale == 0
    assert state.invert == 0
    assert state.sepia == 0
    assert state.exposure == 100
    assert state.highlights == 100
    assert state.shadows == 100
    assert state.sharpen == 0
    assert state.vignette == 0
    assert state.rotation == 0
    assert state.flip_horizontal is False
    assert state.flip_vertical is False
    assert state.to_dict() == dict(DEFAULT_ADJUSTMENTS)


def test_every_numeric_field_is_clamped_independently() -> None:
    low = AdjustmentState.from_mapping({key: -1000 for key in ADJUSTMENT_RANGES})
    high = AdjustmentState.from_mapping({key: 1000 for key in ADJUSTMENT_RANGES})

    for key, (minimum, maximum) in ADJUSTMENT_RANGES.items():
        assert getattr(low, key) == minimum, key
        assert getattr(high, key) == maximum, key


def test_in_range_values_pass_through() -> None:
    state = AdjustmentState().with_changes(brightness=150, blur=2.5, exposure=75, rotation=90)

    assert state.brightness == 150
    assert state.blur == 2.5
    assert state.exposure == 75
    assert state.rotation == 90


def test_nan_falls_back_to_default() -> None:
    state = AdjustmentState(exposure=math.nan, sharpen=math.nan).clamped()

    assert state.exposure == 100
    assert state.sharpen == 0


def test_state_is_immutable() -> None:
    state = AdjustmentState()

    with pytest.raises(dataclasses.FrozenInstanceError):
        state.brightness = 120  # type: ignore[misc]


def test_with_changes_returns_new_value() -> None:
    base = AdjustmentState()
    changed = base.with_changes(contrast=140)

    assert base.contrast == 100
    assert changed.contrast == 140
    assert changed != base


def test_unknown_key_is_rejected() -> None:
    with pytest.raises(UnknownAdjustmentError):
        AdjustmentState().with_changes(gamma=2.2)

    with pytest.raises(KeyError):
        AdjustmentState.from_mapping({"clarity": 10})


def test_camel_case_flip_aliases() -> None:
    state = AdjustmentState.from_mapping({"flipHorizontal": True, "flipVertical": 1})

    assert state.flip_horizontal is True
    assert state.flip_vertical is True


def test_to_dict_follows_pipeline_order() -> None:
    assert tuple(AdjustmentState().to_dict()) == ADJUSTMENT_KEYS


def test_is_identity() -> None:
    assert AdjustmentState().is_identity()
    assert not AdjustmentState(vignette=10).is_identity()
    assert not AdjustmentState(flip_vertical=True).is_identity()
