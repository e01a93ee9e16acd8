"""
Conftest: shared fixtures for all Shatter test modules.

1. Synthetic RGBA buffers (gradient, uniform, random), no image files needed
2. Sessions built from those buffers
3. Seeded generators for the stochastic effects
4. Encoded sample images on disk for codec/CLI tests
"""

import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.buffer import PixelBuffer
from core.codec import encode
from core.session import GlitchSession


def _make_test_pixels(width=64, height=48):
    """Synthetic RGBA test pixels (gradient, not blank, opaque)."""
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[:, :, 0] = np.linspace(0, 255, width, dtype=np.uint8)  # R gradient
    pixels[:, :, 1] = np.linspace(0, 255, height, dtype=np.uint8)[:, np.newaxis]  # G vertical
    pixels[:, :, 2] = np.linspace(255, 0, width, dtype=np.uint8)  # B inverse
    pixels[:, :, 3] = 255
    return pixels


def _make_session(pixels):
    return GlitchSession(PixelBuffer(np.array(pixels, dtype=np.uint8)))


class _FixedRng:
    """Stands in for RandomState: replays fixed randint results and records the ranges asked for."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def randint(self, low, high=None):
        self.calls.append((low, high))
        return self.values.pop(0)


@pytest.fixture
def gradient_pixels():
    return _make_test_pixels()


@pytest.fixture
def gradient_session():
    """A 64x48 opaque gradient session."""
    return _make_session(_make_test_pixels())


@pytest.fixture
def random_session():
    """A 40x30 deterministic random RGBA session (alpha varies too)."""
    rng = np.random.RandomState(42)
    return _make_session(rng.randint(0, 256, (30, 40, 4), dtype=np.uint8))


@pytest.fixture
def uniform_session():
    """A 32x32 session filled with one opaque color."""
    pixels = np.empty((32, 32, 4), dtype=np.uint8)
    pixels[:, :] = [90, 160, 30, 255]
    return _make_session(pixels)


@pytest.fixture
def rng():
    return np.random.RandomState(1234)


@pytest.fixture
def png_file(tmp_path):
    """Gradient image written as PNG."""
    path = tmp_path / "input.png"
    path.write_bytes(encode(PixelBuffer(_make_test_pixels()), "PNG"))
    return path
