"""Headless command line: load an image, adjust it and export a PNG."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Optional, Sequence

from .config import EXPORT_FILENAME, MAX_DIMENSION
from .core.adjustments import ADJUSTMENT_KEYS, FLAG_KEYS, AdjustmentState, canonical_key
from .core.export import export_frame
from .core.ingest import ingest_path
from .core.pipeline import render
from .core.presets import PRESETS, apply_preset
from .errors import IEnhanceError, ImageDecodeError
from .utils.logging import get_logger, set_verbose

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def parse_override(text: str) -> tuple[str, Any]:
    """Parse ``key=value`` into a canonical adjustment name and value."""

    if "=" not in text:
        raise argparse.ArgumentTypeError(f"expected key=value, got {text!r}")
    raw_key, raw_value = text.split("=", 1)
    try:
        key = canonical_key(raw_key.strip())
    except IEnhanceError:
        raise argparse.ArgumentTypeError(
            f"unknown adjustment {raw_key!r}; choose from {', '.join(ADJUSTMENT_KEYS)}"
        ) from None

    value = raw_value.strip()
    if key in FLAG_KEYS:
        lowered = value.lower()
        if lowered in _TRUE_VALUES:
            return key, True
        if lowered in _FALSE_VALUES:
            return key, False
        raise argparse.ArgumentTypeError(f"{key} expects a boolean, got {value!r}")
    try:
        return key, float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{key} expects a number, got {value!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="iEnhance",
        description="Apply photo adjustments to an image and export the result as PNG.",
    )
    parser.add_argument("input", nargs="?", type=Path, help="image file to load")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help=f"output file or directory (default: ./{EXPORT_FILENAME})",
    )
    parser.add_argument("-p", "--preset", default=None, help="preset applied before the overrides")
    parser.add_argument(
        "-s",
        "--set",
        dest="overrides",
        action="append",
        type=parse_override,
        default=[],
        metavar="KEY=VALUE",
        help="set one adjustment, e.g. --set brightness=120 --set flip_horizontal=true",
    )
    parser.add_argument(
        "--max-dimension",
        type=int,
        default=MAX_DIMENSION,
        help="bound for the longer edge of the ingested image",
    )
    parser.add_argument("--list-presets", action="store_true", help="print the preset catalog and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def resolve_state(preset: Optional[str], overrides: Sequence[tuple[str, Any]]) -> AdjustmentState:
    state = AdjustmentState()
    if preset:
        state = apply_preset(state, preset)
    if overrides:
        state = state.with_changes(**dict(overrides))
    return state


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logger = get_logger()
    set_verbose(args.verbose)

    if args.list_presets:
        for preset in PRESETS:
            settings = ", ".join(f"{key}={value:g}" for key, value in preset.settings.items())
            print(f"{preset.name}: {settings}")
        return 0

    if args.input is None:
        parser.error("the input image is required")

    try:
        state = resolve_state(args.preset, args.overrides)
        result = ingest_path(args.input, max_dimension=args.max_dimension)
        if result.source is None:
            raise ImageDecodeError(f"Could not decode {args.input}")
        frame = render(result.source, state)
        if frame is None:
            raise ImageDecodeError(f"Could not render {args.input}")
        path = export_frame(frame, args.output)
    except OSError as exc:
        logger.error("%s", exc)
        return 1
    except IEnhanceError as exc:
        logger.error("%s", exc)
        return 1

    logger.info("Wrote %s", path)
    return 0


__all__ = ["build_parser", "main", "parse_override", "resolve_state"]
