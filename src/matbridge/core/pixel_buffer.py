# ==================================================
# =============  MODULE: pixel_buffer  =============
# ==================================================
from __future__ import annotations

from typing import Any, Callable, Sequence, Tuple, Union

import numpy as np

from matbridge.core.depth_registry import DTypeLike, check_pixel_dtype
from matbridge.core.errors import BufferSizeError, UnsupportedPixelTypeError
from matbridge.core.pixel_kinds import get_pixel_kind

# Public API
__all__ = ["PixelBuffer", "Pixel"]

Pixel = Tuple[Union[int, float], ...]
PixelFn = Callable[[int, int], Union[int, float, Sequence[Union[int, float]]]]

# ==================================================
# ================== PixelBuffer ===================
# ==================================================

class PixelBuffer:
    """
    Rectangular grid of interleaved pixels of one kind over one element type.

    Notes
    -----
    - Backing store is an owned, 1-D, C-contiguous array of length
      ``width * height * channels``; any other length is rejected here, so a
      buffer that exists is always well-formed.
    - Element order is row-major, channel-interleaved (R,G,B,R,G,B,...).
    - Pixel coordinates follow image convention: ``x`` is the column,
      ``y`` is the row.
    """

    __slots__ = ("_kind", "_dtype", "_width", "_height", "_channels", "_data")

    # ====[ INITIALIZATION ]====
    def __init__(
        self,
        kind: str,
        dtype: DTypeLike,
        width: int,
        height: int,
        data: Any,
        copy: bool = True,
    ) -> None:
        """
        Build a buffer from a flat element sequence.

        Parameters
        ----------
        kind : {'luma', 'luma_alpha', 'rgb', 'rgba'}
            Pixel kind.
        dtype : dtype-like
            Element type; one of uint8, uint16, float32.
        width, height : int
            Dimensions in pixels (non-negative).
        data : array-like
            Flat sequence of ``width * height * channels`` elements. NumPy
            arrays must already have `dtype`; plain sequences are converted
            by value, and floats are refused for integer element types.
        copy : bool, default True
            If False and `data` is already a contiguous array of the right
            dtype, it is adopted without copying (caller gives up ownership).

        Raises
        ------
        UnsupportedPixelTypeError
            Unknown kind, unsupported dtype, array data of another dtype, or
            float values for an integer element type.
        BufferSizeError
            Negative dimensions, non-flat data, or wrong element count.
        """
        desc = get_pixel_kind(kind)
        dt = check_pixel_dtype(dtype)
        width, height = int(width), int(height)
        if width < 0 or height < 0:
            raise BufferSizeError(
                f"[PixelBuffer] Dimensions must be non-negative, got {width}x{height}.",
                expected=">= 0",
                observed=(width, height),
            )

        if isinstance(data, np.ndarray):
            if data.dtype != dt:
                raise UnsupportedPixelTypeError(
                    f"[PixelBuffer] Data dtype '{data.dtype}' does not match element type '{dt.name}'."
                )
            arr = np.array(data, dtype=dt, copy=True, order="C") if copy else np.ascontiguousarray(data)
        else:
            values = np.asarray(data)
            if dt.kind in "ui" and values.size and values.dtype.kind in "fc":
                raise UnsupportedPixelTypeError(
                    f"[PixelBuffer] Non-integer values cannot be stored as '{dt.name}' elements."
                )
            arr = np.array(data, dtype=dt)

        if arr.ndim != 1:
            raise BufferSizeError(
                f"[PixelBuffer] Backing store must be flat, got shape {arr.shape}.",
                expected=1,
                observed=arr.ndim,
            )

        expected = width * height * desc["channels"]
        if arr.size != expected:
            raise BufferSizeError(
                f"[PixelBuffer] Backing store holds {arr.size} elements, expected "
                f"{expected} ({width}x{height}x{desc['channels']}).",
                expected=expected,
                observed=arr.size,
            )

        self._kind: str = desc["name"]
        self._dtype: np.dtype = dt
        self._width: int = width
        self._height: int = height
        self._channels: int = desc["channels"]
        self._data: np.ndarray = arr

    # ====[ CONSTRUCTORS ]====
    @classmethod
    def from_vec(cls, kind: str, dtype: DTypeLike, width: int, height: int, data: Any) -> "PixelBuffer":
        """Build a buffer from a flat element sequence (always copies)."""
        return cls(kind, dtype, width, height, data, copy=True)

    @classmethod
    def from_fn(cls, kind: str, dtype: DTypeLike, width: int, height: int, fn: PixelFn) -> "PixelBuffer":
        """
        Build a buffer by calling ``fn(x, y)`` for every pixel in row-major order.

        `fn` returns a scalar for single-channel kinds, or a sequence of
        ``channels`` values otherwise.
        """
        channels = get_pixel_kind(kind)["channels"]
        dt = check_pixel_dtype(dtype)
        out = np.empty((int(height), int(width), channels), dtype=dt)
        for y in range(int(height)):
            for x in range(int(width)):
                out[y, x] = fn(x, y)
        return cls(kind, dt, width, height, out.reshape(-1), copy=False)

    @classmethod
    def from_array(cls, kind: str, array: np.ndarray, copy: bool = True) -> "PixelBuffer":
        """
        Build a buffer from an (H, W) or (H, W, C) array of a pixel element type.

        Raises
        ------
        BufferSizeError
            If the array shape does not fit the pixel kind.
        """
        channels = get_pixel_kind(kind)["channels"]
        arr = np.asarray(array)
        if arr.ndim == 2 and channels == 1:
            height, width = arr.shape
        elif arr.ndim == 3 and arr.shape[2] == channels:
            height, width = arr.shape[:2]
        else:
            raise BufferSizeError(
                f"[PixelBuffer] Array of shape {arr.shape} cannot hold '{kind}' pixels.",
                expected=channels,
                observed=arr.shape,
            )
        flat = np.ascontiguousarray(arr).reshape(-1)
        return cls(kind, arr.dtype, width, height, flat, copy=copy)

    # ====[ METADATA ]====
    @property
    def kind(self) -> str:
        return self._kind

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def channels(self) -> int:
        return self._channels

    def dimensions(self) -> Tuple[int, int]:
        """Return (width, height)."""
        return self._width, self._height

    # ====[ STORAGE ACCESS ]====
    def as_raw(self) -> np.ndarray:
        """Return the flat backing store (read-only view)."""
        view = self._data.view()
        view.flags.writeable = False
        return view

    def to_array(self) -> np.ndarray:
        """Return a (H, W) or (H, W, C) view sharing the backing store."""
        if self._channels == 1:
            return self._data.reshape(self._height, self._width)
        return self._data.reshape(self._height, self._width, self._channels)

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(
                f"[PixelBuffer] Pixel ({x}, {y}) out of bounds for {self._width}x{self._height}."
            )
        return (y * self._width + x) * self._channels

    def get_pixel(self, x: int, y: int) -> Pixel:
        """Return the channel values of pixel (x, y) as a tuple."""
        i = self._offset(x, y)
        return tuple(self._data[i:i + self._channels].tolist())

    def put_pixel(self, x: int, y: int, pixel: Union[int, float, Sequence[Union[int, float]]]) -> None:
        """Overwrite pixel (x, y) with a scalar (single channel) or a channel sequence."""
        i = self._offset(x, y)
        self._data[i:i + self._channels] = pixel

    def __getitem__(self, xy: Tuple[int, int]) -> Pixel:
        x, y = xy
        return self.get_pixel(x, y)

    # ====[ COMPARISON ]====
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return (
            self._kind == other._kind
            and self._dtype == other._dtype
            and self.dimensions() == other.dimensions()
            and self._data.tobytes() == other._data.tobytes()
        )

    __hash__ = None  # mutable container

    def __repr__(self) -> str:
        return (
            f"PixelBuffer(kind='{self._kind}', dtype='{self._dtype.name}', "
            f"width={self._width}, height={self._height})"
        )
