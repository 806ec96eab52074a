from __future__ import annotations

import pytest

from iEnhance.core.adjustments import AdjustmentState
from iEnhance.core.presets import PRESET_KEYS, PRESETS, apply_preset, get_preset, preset_names
from iEnhance.errors import UnknownPresetError


def test_catalog_contains_the_documented_presets() -> None:
    assert preset_names() == ["Normal", "Vintage", "B&W", "Dramatic", "Warm", "Cool"]


def test_normal_preset_is_identity_for_its_fields() -> None:
    normal = get_preset("Normal")

    assert AdjustmentState().with_changes(**normal.settings) == AdjustmentState()


def test_vintage_values() -> None:
    vintage = get_preset("vintage")

    assert vintage.settings == {
        "brightness": 110.0,
        "contrast": 120.0,
        "saturation": 85.0,
        "blur": 0.0,
        "hue": 10.0,
        "grayscale": 0.0,
        "invert": 0.0,
        "sepia": 30.0,
        "exposure": 105.0,
        "vignette": 20.0,
    }


def test_preset_replaces_only_its_fields() -> None:
    edited = AdjustmentState().with_changes(
        brightness=40,
        blur=5,
        highlights=130,
        shadows=70,
        sharpen=60,
        rotation=90,
        flip_horizontal=True,
        flip_vertical=True,
    )

    result = apply_preset(edited, "Dramatic")

    assert result.brightness == 105
    assert result.contrast == 140
    assert result.blur == 0
    assert result.vignette == 30
    assert result.highlights == 130
    assert result.shadows == 70
    assert result.sharpen == 60
    assert result.rotation == 90
    assert result.flip_horizontal is True
    assert result.flip_vertical is True


def test_every_preset_overrides_the_full_field_set() -> None:
    for preset in PRESETS:
        assert tuple(preset.settings) == PRESET_KEYS


def test_unknown_preset() -> None:
    with pytest.raises(UnknownPresetError):
        get_preset("Sunset")

    with pytest.raises(KeyError):
        apply_preset(AdjustmentState(), "Sunset")
