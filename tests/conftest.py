"""
Pytest configuration and shared fixtures for Creative Photo Studio tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import io

import numpy as np
import pytest
from PIL import Image

from CPS_Libs.ImageEditingLib.image_models import SourceImage


def make_gradient(width, height, alpha=255):
    """Build an RGBA image whose pixels are all distinct-ish."""
    xs = np.linspace(0, 255, width, dtype=np.float64)
    ys = np.linspace(0, 255, height, dtype=np.float64)
    red = np.tile(xs, (height, 1))
    green = np.tile(ys[:, None], (1, width))
    blue = (red + green) / 2
    data = np.stack(
        [red, green, blue, np.full((height, width), alpha, dtype=np.float64)],
        axis=-1,
    )
    return Image.fromarray(np.rint(data).astype(np.uint8))


def _make_source(width=64, height=48, name="photo.png", image_id="img-1", color=None):
    if color is None:
        image = make_gradient(width, height)
    else:
        image = Image.new("RGBA", (width, height), color)
    return SourceImage(image_id=image_id, name=name, image=image)


@pytest.fixture
def gradient_source():
    """A 64x48 gradient SourceImage."""
    return _make_source()


@pytest.fixture
def solid_source():
    """A 40x30 solid mid-gray SourceImage."""
    return _make_source(40, 30, color=(128, 128, 128, 255))


@pytest.fixture
def png_bytes():
    """
    Provide an encoded 20x10 red PNG.

    Returns:
        Raw PNG bytes
    """
    buffer = io.BytesIO()
    Image.new("RGB", (20, 10), "red").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def recording_sink():
    """Download sink that records (filename, data, mime_type) calls."""
    calls = []

    def sink(filename, data, mime_type):
        calls.append((filename, data, mime_type))

    sink.calls = calls
    return sink


@pytest.fixture
def make_source():
    """Factory fixture: make_source(width, height, name=..., image_id=..., color=...)."""
    return _make_source
