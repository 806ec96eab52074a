import os
import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Painting stages need a GUI application object but no display.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="session", autouse=True)
def qapp():
    from PySide6.QtGui import QGuiApplication

    app = QGuiApplication.instance()
    if app is None:
        app = QGuiApplication([])
    yield app


def solid(width: int, height: int, rgb=(128, 128, 128), alpha: int = 255) -> np.ndarray:
    """Return an opaque ``height x width`` RGBA array filled with *rgb*."""

    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[..., 0] = rgb[0]
    pixels[..., 1] = rgb[1]
    pixels[..., 2] = rgb[2]
    pixels[..., 3] = alpha
    return pixels


@pytest.fixture
def make_solid():
    return solid
