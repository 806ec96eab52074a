"""The parameter vector driving a single render."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Mapping

from ..errors import UnknownAdjustmentError

# The order matches the pipeline: channel filter fields first, then tone, spatial effects and
# geometry.  Serialisers and the CLI iterate this tuple so the output stays stable.
ADJUSTMENT_KEYS = (
    "brightness",
    "contrast",
    "saturation",
    "blur",
    "hue",
    "grayscale",
    "invert",
    "sepia",
    "exposure",
    "highlights",
    "shadows",
    "sharpen",
    "vignette",
    "rotation",
    "flip_horizontal",
    "flip_vertical",
)

ADJUSTMENT_RANGES: Mapping[str, tuple[float, float]] = {
    "brightness": (0.0, 200.0),
    "contrast": (0.0, 200.0),
    "saturation": (0.0, 200.0),
    "blur": (0.0, 10.0),
    "hue": (0.0, 360.0),
    "grayscale": (0.0, 100.0),
    "invert": (0.0, 100.0),
    "sepia": (0.0, 100.0),
    "exposure": (50.0, 150.0),
    "highlights": (50.0, 150.0),
    "shadows": (50.0, 150.0),
    "sharpen": (0.0, 100.0),
    "vignette": (0.0, 100.0),
    "rotation": (0.0, 360.0),
}
"""Inclusive domain of every numeric adjustment."""

FLAG_KEYS = ("flip_horizontal", "flip_vertical")

_ALIASES = {
    "flipHorizontal": "flip_horizontal",
    "flipVertical": "flip_vertical",
}


def _clamp(value: float, minimum: float, maximum: float) -> float:
    """Return *value* constrained to ``[minimum, maximum]``."""

    return max(minimum, min(maximum, float(value)))


def canonical_key(key: str) -> str:
    """Return the field name for *key*, accepting the camelCase flip aliases."""

    name = _ALIASES.get(key, key)
    if name not in ADJUSTMENT_KEYS:
        raise UnknownAdjustmentError(key)
    return name


@dataclass(frozen=True)
class AdjustmentState:
    """Complete, immutable set of adjustments for one render.

    Percentages are expressed the way the sliders show them, so ``100`` is the
    neutral value for brightness, contrast, saturation, exposure, highlights and
    shadows while the remaining effects are neutral at ``0``.
    """

    brightness: float = 100.0
    contrast: float = 100.0
    saturation: float = 100.0
    blur: float = 0.0
    hue: float = 0.0
    grayscale: float = 0.0
    invert: float = 0.0
    sepia: float = 0.0
    exposure: float = 100.0
    highlights: float = 100.0
    shadows: float = 100.0
    sharpen: float = 0.0
    vignette: float = 0.0
    rotation: float = 0.0
    flip_horizontal: bool = False
    flip_vertical: bool = False

    def clamped(self) -> "AdjustmentState":
        """Return a copy with every numeric field limited to its domain.

        ``NaN`` cannot be ordered against the bounds, so it falls back to the
        field's default instead.
        """

        values: dict[str, Any] = {}
        for key, (minimum, maximum) in ADJUSTMENT_RANGES.items():
            raw = float(getattr(self, key))
            if math.isnan(raw):
                raw = float(_DEFAULT_VALUES[key])
            values[key] = _clamp(raw, minimum, maximum)
        for key in FLAG_KEYS:
            values[key] = bool(getattr(self, key))
        return AdjustmentState(**values)

    def with_changes(self, **changes: Any) -> "AdjustmentState":
        """Return a clamped copy with *changes* applied."""

        normalised = {canonical_key(key): value for key, value in changes.items()}
        return replace(self, **normalised).clamped()

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> "AdjustmentState":
        """Build a clamped state from a partial mapping of adjustments."""

        if not mapping:
            return cls()
        return cls().with_changes(**dict(mapping))

    def to_dict(self) -> dict[str, Any]:
        """Return the adjustments as a plain mapping in pipeline order."""

        data = asdict(self)
        return {key: data[key] for key in ADJUSTMENT_KEYS}

    def is_identity(self) -> bool:
        """Return ``True`` when rendering with this state reproduces the source."""

        return self.clamped() == AdjustmentState()


_DEFAULT_VALUES: Mapping[str, Any] = {field.name: field.default for field in fields(AdjustmentState)}

DEFAULT_ADJUSTMENTS: Mapping[str, Any] = dict(_DEFAULT_VALUES)
"""Slider defaults restored by a reset or a new image load."""


__all__ = [
    "ADJUSTMENT_KEYS",
    "ADJUSTMENT_RANGES",
    "AdjustmentState",
    "DEFAULT_ADJUSTMENTS",
    "FLAG_KEYS",
    "canonical_key",
]
