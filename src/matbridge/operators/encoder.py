# ==================================================
# ===============  MODULE: encoder  ================
# ==================================================
from __future__ import annotations

import numpy as np

from matbridge.core.depth_registry import depth_of, itemsize_of, type_name
from matbridge.core.mat_view import MatView
from matbridge.core.pixel_buffer import PixelBuffer
from matbridge.utils.logger import get_logger

# Public API
__all__ = ["encode"]

logger = get_logger("matbridge")


def encode(buffer: PixelBuffer) -> np.ndarray:
    """
    Convert a pixel buffer into a freshly allocated OpenCV matrix.

    Parameters
    ----------
    buffer : PixelBuffer
        Any valid buffer.

    Returns
    -------
    np.ndarray
        (height, width) array for single-channel kinds, (height, width, C)
        otherwise, of the buffer's element type. Usable directly with cv2.

    Raises
    ------
    AllocationError
        If the matrix storage cannot be allocated.

    Notes
    -----
    - The matrix owns its storage; the buffer is not referenced afterwards.
    - Both sides hold ``width * height * channels`` elements in the same
      interleaved row-major order, so one byte copy transfers every pixel.
    """
    width, height = buffer.dimensions()
    depth = depth_of(buffer.dtype)
    mat = MatView.zeros(height, width, depth, buffer.channels)

    nbytes = width * height * buffer.channels * itemsize_of(buffer.dtype)
    dst = mat.array.reshape(-1).view(np.uint8)
    src = buffer.as_raw().view(np.uint8)
    # Full-slice assignment raises on a length mismatch instead of overrunning.
    dst[:] = src

    logger.debug(
        f"[encode] {buffer!r} -> {type_name(depth, buffer.channels)} {height}x{width} ({nbytes} bytes)"
    )
    return mat.array
