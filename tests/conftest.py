# ==================================================
# ================ TESTS: fixtures =================
# ==================================================
from __future__ import annotations

from typing import Callable, Tuple

import numpy as np
import pytest

from matbridge import PixelBuffer
from matbridge.core.pixel_kinds import channels_of


def _random_values(rng: np.random.Generator, shape: Tuple[int, ...], dtype) -> np.ndarray:
    """
    Fill an array of `shape` with values covering the whole range of `dtype`.
    Floats are drawn from a standard normal distribution.
    """
    dt = np.dtype(dtype)
    if dt.kind == "f":
        return rng.standard_normal(size=shape).astype(dt)
    info = np.iinfo(dt)
    return rng.integers(info.min, info.max, size=shape, dtype=dt, endpoint=True)


# ===================
# Fixtures
# ===================

@pytest.fixture
def rng() -> np.random.Generator:
    """Deterministic generator; a fixed seed keeps failures reproducible."""
    return np.random.default_rng(123)


@pytest.fixture
def make_mat(rng: np.random.Generator) -> Callable[..., np.ndarray]:
    """
    Factory for random, C-contiguous OpenCV-style matrices.

    make_mat(rows, cols, dtype, channels=1) -> (rows, cols) or (rows, cols, channels)
    """
    def _make(rows: int, cols: int, dtype=np.uint8, channels: int = 1) -> np.ndarray:
        shape = (rows, cols) if channels == 1 else (rows, cols, channels)
        return _random_values(rng, shape, dtype)
    return _make


@pytest.fixture
def make_buffer(rng: np.random.Generator) -> Callable[..., PixelBuffer]:
    """
    Factory for random pixel buffers.

    make_buffer(kind, dtype, width, height) -> PixelBuffer
    """
    def _make(kind: str, dtype, width: int, height: int) -> PixelBuffer:
        data = _random_values(rng, (width * height * channels_of(kind),), dtype)
        return PixelBuffer.from_vec(kind, dtype, width, height, data)
    return _make
