"""Named bundles of channel filter, exposure and vignette settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Union

from ..errors import UnknownPresetError
from .adjustments import AdjustmentState

PRESET_KEYS = (
    "brightness",
    "contrast",
    "saturation",
    "blur",
    "hue",
    "grayscale",
    "invert",
    "sepia",
    "exposure",
    "vignette",
)
"""Fields a preset overrides; highlights, shadows, sharpen and geometry are left alone."""


@dataclass(frozen=True)
class FilterPreset:
    """A named, complete override of the :data:`PRESET_KEYS` fields."""

    name: str
    brightness: float
    contrast: float
    saturation: float
    blur: float
    hue: float
    grayscale: float
    invert: float
    sepia: float
    exposure: float
    vignette: float

    @property
    def settings(self) -> dict[str, float]:
        """Return the overridden fields as a mapping."""

        return {key: float(getattr(self, key)) for key in PRESET_KEYS}

    def apply(self, state: AdjustmentState) -> AdjustmentState:
        """Return *state* with this preset's fields replaced."""

        return state.with_changes(**self.settings)


def _preset(name: str, values: tuple[float, ...]) -> FilterPreset:
    return FilterPreset(name, *values)


#                                 bri  con  sat blur  hue gray inv sepia  exp  vig
PRESETS: tuple[FilterPreset, ...] = (
    _preset("Normal", (100, 100, 100, 0, 0, 0, 0, 0, 100, 0)),
    _preset("Vintage", (110, 120, 85, 0, 10, 0, 0, 30, 105, 20)),
    _preset("B&W", (105, 120, 0, 0, 0, 100, 0, 0, 100, 10)),
    _preset("Dramatic", (105, 140, 120, 0, 0, 0, 0, 0, 95, 30)),
    _preset("Warm", (105, 110, 110, 0, 15, 0, 0, 20, 105, 0)),
    _preset("Cool", (100, 105, 90, 0, 210, 0, 0, 0, 100, 0)),
)

_PRESETS_BY_NAME: Mapping[str, FilterPreset] = {preset.name.lower(): preset for preset in PRESETS}


def get_preset(name: str) -> FilterPreset:
    """Return the catalog entry called *name* (case-insensitive)."""

    try:
        return _PRESETS_BY_NAME[name.strip().lower()]
    except KeyError:
        raise UnknownPresetError(name) from None


def preset_names() -> list[str]:
    return [preset.name for preset in PRESETS]


def apply_preset(state: AdjustmentState, preset: Union[FilterPreset, str]) -> AdjustmentState:
    """Return *state* with *preset* applied; accepts a preset or its name."""

    if isinstance(preset, str):
        preset = get_preset(preset)
    return preset.apply(state)


__all__ = ["FilterPreset", "PRESETS", "PRESET_KEYS", "apply_preset", "get_preset", "preset_names"]
