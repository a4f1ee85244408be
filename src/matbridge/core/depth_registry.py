# ==================================================
# ============  MODULE: depth_registry  ============
# ==================================================
from __future__ import annotations

from typing import Any, Dict, Tuple, Union

import cv2
import numpy as np

from matbridge.core.errors import UnsupportedMatTypeError, UnsupportedPixelTypeError

__all__ = [
    "CV_CN_MAX",
    "CV_CN_SHIFT",
    "DEPTH_REGISTRY",
    "PIXEL_DTYPES",
    "resolve_dtype",
    "depth_of",
    "itemsize_of",
    "dtype_of_depth",
    "depth_name",
    "depth_matches",
    "is_pixel_dtype",
    "check_pixel_dtype",
    "make_type",
    "split_type",
    "type_name",
]

DTypeLike = Union[np.dtype, type, str]

# ====[ OpenCV type packing constants ]====
# Channel field layout of the installed cv2 build.
CV_CN_MAX: int = 512
_CV_CN_STEP: int = cv2.CV_8UC2 - cv2.CV_8UC1
CV_CN_SHIFT: int = _CV_CN_STEP.bit_length() - 1
_CV_DEPTH_MASK: int = _CV_CN_STEP - 1

# ====[ Central Depth Registry ]====
# Keyed by NumPy dtype name; every OpenCV matrix depth is listed so that
# diagnostics can name any matrix type, even the ones no image can hold.
DEPTH_REGISTRY: Dict[str, Dict[str, Any]] = {
    "uint8": {"depth": cv2.CV_8U, "name": "8U", "itemsize": 1},
    "int8": {"depth": cv2.CV_8S, "name": "8S", "itemsize": 1},
    "uint16": {"depth": cv2.CV_16U, "name": "16U", "itemsize": 2},
    "int16": {"depth": cv2.CV_16S, "name": "16S", "itemsize": 2},
    "int32": {"depth": cv2.CV_32S, "name": "32S", "itemsize": 4},
    "float32": {"depth": cv2.CV_32F, "name": "32F", "itemsize": 4},
    "float64": {"depth": cv2.CV_64F, "name": "64F", "itemsize": 8},
}

# Reverse lookup: depth tag -> dtype name
_DEPTH_TO_DTYPE: Dict[int, str] = {entry["depth"]: key for key, entry in DEPTH_REGISTRY.items()}

# Element types a pixel buffer may hold
PIXEL_DTYPES: Tuple[str, ...] = ("uint8", "uint16", "float32")


# ====[ Internal helpers ]====
def resolve_dtype(dtype: DTypeLike) -> np.dtype:
    """Normalize any dtype-like (np.uint8, 'uint8', np.dtype) to np.dtype."""
    try:
        return np.dtype(dtype)
    except TypeError as e:
        raise UnsupportedMatTypeError(f"[DepthRegistry] Not a dtype: {dtype!r}") from e


def _entry(dtype: DTypeLike) -> Dict[str, Any]:
    dt = resolve_dtype(dtype)
    entry = DEPTH_REGISTRY.get(dt.name)
    if entry is None:
        raise UnsupportedMatTypeError(
            f"[DepthRegistry] dtype '{dt.name}' has no OpenCV depth. "
            f"Expected one of {list(DEPTH_REGISTRY)}."
        )
    return entry


# ====[ Lookups ]====
def depth_of(dtype: DTypeLike) -> int:
    """Return the OpenCV depth tag (e.g. cv2.CV_8U) for a NumPy dtype."""
    return _entry(dtype)["depth"]


def itemsize_of(dtype: DTypeLike) -> int:
    """Return the byte width of one element of `dtype`."""
    return _entry(dtype)["itemsize"]


def dtype_of_depth(depth: int) -> np.dtype:
    """Return the NumPy dtype stored by matrices of the given depth tag."""
    name = _DEPTH_TO_DTYPE.get(int(depth))
    if name is None:
        raise UnsupportedMatTypeError(f"[DepthRegistry] Unknown depth tag {depth}.", depth=depth)
    return np.dtype(name)


def depth_name(depth: int) -> str:
    """Return the short OpenCV name of a depth tag ('8U', '32F', ...), or '?<n>' if unknown."""
    name = _DEPTH_TO_DTYPE.get(int(depth))
    return DEPTH_REGISTRY[name]["name"] if name is not None else f"?{depth}"


def depth_matches(dtype: DTypeLike, depth: int) -> bool:
    """
    Return True if elements of `dtype` are stored by matrices of `depth`.

    Notes
    -----
    - Unknown dtypes never match; no exception is raised.
    """
    dt = resolve_dtype(dtype)
    entry = DEPTH_REGISTRY.get(dt.name)
    return entry is not None and entry["depth"] == int(depth)


def is_pixel_dtype(dtype: DTypeLike) -> bool:
    """Return True if a pixel buffer may use `dtype` as its element type."""
    try:
        return resolve_dtype(dtype).name in PIXEL_DTYPES
    except UnsupportedMatTypeError:
        return False


def check_pixel_dtype(dtype: DTypeLike) -> np.dtype:
    """Return `dtype` as np.dtype, raising UnsupportedPixelTypeError if buffers cannot hold it."""
    if not is_pixel_dtype(dtype):
        raise UnsupportedPixelTypeError(
            f"[DepthRegistry] Pixel element type {dtype!r} is not supported. "
            f"Expected one of {list(PIXEL_DTYPES)}."
        )
    return resolve_dtype(dtype)


# ====[ Type packing ]====
def make_type(depth: int, channels: int) -> int:
    """Pack a depth tag and channel count with cv2.CV_MAKETYPE."""
    if not 1 <= channels <= CV_CN_MAX:
        raise UnsupportedMatTypeError(
            f"[DepthRegistry] Channel count must be in [1, {CV_CN_MAX}], got {channels}.",
            depth=depth,
            channels=channels,
        )
    return int(cv2.CV_MAKETYPE(int(depth), int(channels)))


def split_type(cv_type: int) -> Tuple[int, int]:
    """Unpack an OpenCV type into (depth, channels)."""
    return int(cv_type) & _CV_DEPTH_MASK, (int(cv_type) >> CV_CN_SHIFT) + 1


def type_name(depth: int, channels: int) -> str:
    """Return the OpenCV type name, e.g. 'CV_8UC3'."""
    return f"CV_{depth_name(depth)}C{channels}"
