"""iEnhance: a live photo adjustment pipeline."""

from __future__ import annotations

from .core.adjustments import AdjustmentState
from .core.pipeline import render
from .core.presets import PRESETS, apply_preset, get_preset

__all__ = ["AdjustmentState", "PRESETS", "apply_preset", "get_preset", "render"]

__version__ = "0.1.0"
