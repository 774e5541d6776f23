"""Pytest configuration and fixtures."""

import numpy as np
import pytest

from pixedit.types import PixelBuffer


def make_solid(width, height, rgba):
    """Buffer filled with a single RGBA colour."""
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[...] = rgba
    return PixelBuffer(width, height, pixels)


@pytest.fixture
def solid_buffer():
    """Factory for single-colour buffers."""
    return make_solid


@pytest.fixture
def black_buffer():
    return make_solid(16, 12, (0, 0, 0, 255))


@pytest.fixture
def white_buffer():
    return make_solid(16, 12, (255, 255, 255, 255))


@pytest.fixture
def checker_buffer():
    """2x2 buffer alternating black and white in row-major order."""
    data = bytes([
        0, 0, 0, 255, 255, 255, 255, 255,
        0, 0, 0, 255, 255, 255, 255, 255,
    ])
    return PixelBuffer.from_bytes(2, 2, data)


@pytest.fixture
def noise_buffer():
    """Reproducible random RGBA buffer with varied alpha."""
    rng = np.random.default_rng(42)
    pixels = rng.integers(0, 256, (24, 32, 4), dtype=np.uint8)
    return PixelBuffer(32, 24, pixels)
