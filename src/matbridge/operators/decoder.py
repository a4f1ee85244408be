# ==================================================
# ===============  MODULE: decoder  ================
# ==================================================
from __future__ import annotations

import numpy as np

from matbridge.core.depth_registry import DTypeLike, check_pixel_dtype, depth_of, depth_name
from matbridge.core.errors import (
    ChannelMismatchError,
    DepthMismatchError,
    DimensionalityError,
    MatLayoutError,
)
from matbridge.core.mat_view import MatLike, MatView, as_mat_view
from matbridge.core.pixel_buffer import PixelBuffer
from matbridge.core.pixel_kinds import get_pixel_kind
from matbridge.utils.logger import get_logger

# Public API
__all__ = [
    "check_decodable",
    "decode",
    "decode_elementwise",
    "decode_gray",
    "decode_rgb",
]

logger = get_logger("matbridge")


# ====[ Preconditions ]====
def check_decodable(mat: MatLike, kind: str, dtype: DTypeLike) -> MatView:
    """
    Verify that `mat` can be decoded into (kind, dtype) pixels.

    Checks run in a fixed order and touch no element data:
    dimensionality, channel count, depth.

    Returns
    -------
    MatView
        The wrapped matrix, ready for decoding.

    Raises
    ------
    UnsupportedPixelTypeError
        If (kind, dtype) is not a pixel buffer type.
    DimensionalityError
        If the matrix does not have exactly 2 dimensions.
    ChannelMismatchError
        If the channel count differs from the kind's.
    DepthMismatchError
        If the depth differs from the dtype's.
    """
    channels = get_pixel_kind(kind)["channels"]
    dt = check_pixel_dtype(dtype)
    view = as_mat_view(mat)

    if view.rows == -1 or view.cols == -1:
        raise DimensionalityError(
            f"[decode] Mat with {view.dims} dimensions is not supported, expected 2.",
            expected=2,
            observed=view.dims,
        )
    if view.channels != channels:
        raise ChannelMismatchError(
            f"[decode] Expect {channels} channels for '{kind}' pixels, but get {view.channels} channels.",
            expected=channels,
            observed=view.channels,
        )
    expected_depth = depth_of(dt)
    if view.depth != expected_depth:
        raise DepthMismatchError(
            f"[decode] Subpixel type '{dt.name}' needs depth CV_{depth_name(expected_depth)}, "
            f"but the Mat has depth CV_{depth_name(view.depth)}.",
            expected=expected_depth,
            observed=view.depth,
        )
    return view


# ====[ Decoding paths ]====
def _decode_contiguous(view: MatView, kind: str, dtype: np.dtype) -> PixelBuffer:
    """Single copy of the matrix' flat storage (raises MatLayoutError when unavailable)."""
    flat = view.as_slice(dtype)
    return PixelBuffer(kind, dtype, view.cols, view.rows, flat, copy=True)


def _decode_per_element(view: MatView, kind: str, dtype: np.dtype) -> PixelBuffer:
    """Read every (row, col) through at_2d; correct for any storage layout."""
    return PixelBuffer.from_fn(kind, dtype, view.cols, view.rows, lambda x, y: view.at_2d(y, x))


def decode(
    mat: MatLike,
    kind: str,
    dtype: DTypeLike,
    allow_fallback: bool = True,
) -> PixelBuffer:
    """
    Convert an OpenCV matrix into a pixel buffer of the requested kind and element type.

    Parameters
    ----------
    mat : ndarray | cv2.UMat | MatView
        Source matrix; read only, never modified.
    kind : {'luma', 'luma_alpha', 'rgb', 'rgba'}
        Target pixel kind; its channel count must equal the matrix'.
    dtype : dtype-like
        Target element type (uint8, uint16, float32); its depth must equal the matrix'.
    allow_fallback : bool, default True
        Decode non-continuous matrices element by element. If False they raise.

    Returns
    -------
    PixelBuffer
        Buffer of (width, height) == (cols, rows) holding the matrix values.

    Raises
    ------
    DimensionalityError, ChannelMismatchError, DepthMismatchError
        See `check_decodable`.
    MatLayoutError
        If the matrix is not continuous and `allow_fallback` is False.

    Notes
    -----
    - Continuous matrices are copied in one operation; any other layout
      (ROI, strided or transposed views, foreign byte order) goes through
      the per-element path. Both produce bit-identical buffers.
    """
    dt = check_pixel_dtype(dtype)
    view = check_decodable(mat, kind, dt)
    try:
        return _decode_contiguous(view, kind, dt)
    except MatLayoutError as e:
        if not allow_fallback:
            raise
        logger.debug(f"[decode] Per-element fallback for {view!r}: {e}")
    return _decode_per_element(view, kind, dt)


def decode_elementwise(mat: MatLike, kind: str, dtype: DTypeLike) -> PixelBuffer:
    """Decode through the per-element path regardless of the matrix layout."""
    dt = check_pixel_dtype(dtype)
    view = check_decodable(mat, kind, dt)
    return _decode_per_element(view, kind, dt)


# ====[ Typed shortcuts ]====
def decode_gray(mat: MatLike, dtype: DTypeLike = np.uint8, allow_fallback: bool = True) -> PixelBuffer:
    """Decode a single-channel matrix into a 'luma' buffer."""
    return decode(mat, "luma", dtype, allow_fallback=allow_fallback)


def decode_rgb(mat: MatLike, dtype: DTypeLike = np.uint8, allow_fallback: bool = True) -> PixelBuffer:
    """Decode a three-channel matrix into an 'rgb' buffer (channel order unchanged)."""
    return decode(mat, "rgb", dtype, allow_fallback=allow_fallback)
