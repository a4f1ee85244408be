# ==================================================
# ===============  MODULE: mat_view  ===============
# ==================================================
from __future__ import annotations

from typing import Any, Optional, Tuple, Union

import cv2
import numpy as np

from matbridge.core.depth_registry import (
    CV_CN_MAX,
    DEPTH_REGISTRY,
    DTypeLike,
    depth_of,
    dtype_of_depth,
    make_type,
    resolve_dtype,
    type_name,
)
from matbridge.core.errors import (
    AllocationError,
    DimensionalityError,
    MatLayoutError,
    UnsupportedMatTypeError,
)

# Public API
__all__ = ["MatView", "as_mat_view", "MatLike"]

MatLike = Union[np.ndarray, "cv2.UMat", "MatView"]
Element = Union[np.generic, Tuple[np.generic, ...]]

# ==================================================
# ==================== MatView =====================
# ==================================================

class MatView:
    """
    Read-only OpenCV-matrix capabilities over a NumPy array.

    The cv2 binding hands matrices around as ndarrays whose element depth and
    channel count are only implied by dtype and shape. This adapter makes them
    explicit, the way ``cv::Mat`` reports them.

    Notes
    -----
    - Shape interpretation without hints: 1-D -> N x 1 single channel,
      2-D -> single channel, 3-D with last axis <= CV_CN_MAX -> multi-channel
      2-D, 4-D and above -> n-D with the last axis as channels.
    - `channels` overrides the guess; with ``channels=1`` every axis is a
      spatial dimension.
    - ``rows`` and ``cols`` are -1 unless the matrix has exactly 2 dimensions.
    - The wrapped array is never written to.
    """

    __slots__ = ("_array", "_dims", "_channels", "_depth", "_grid")

    # ====[ INITIALIZATION ]====
    def __init__(self, array: Any, channels: Optional[int] = None) -> None:
        """
        Parameters
        ----------
        array : ndarray or cv2.UMat
            Matrix storage. UMat content is downloaded once.
        channels : int, optional
            Explicit channel count, for arrays whose shape is ambiguous.

        Raises
        ------
        TypeError
            If `array` is not array-backed.
        UnsupportedMatTypeError
            If the dtype has no OpenCV depth, or `channels` contradicts the shape.
        """
        if isinstance(array, cv2.UMat):
            array = array.get()
        if not isinstance(array, np.ndarray):
            raise TypeError(f"[MatView] Expected a NumPy array or cv2.UMat, got {type(array).__name__}.")

        ndim = array.ndim
        if channels is None:
            channel_axis = ndim >= 3 and array.shape[-1] <= CV_CN_MAX
            cn = int(array.shape[-1]) if channel_axis else 1
        else:
            cn = int(channels)
            channel_axis = cn != 1
            if channel_axis and (ndim < 2 or array.shape[-1] != cn):
                raise UnsupportedMatTypeError(
                    f"[MatView] Array of shape {array.shape} has no trailing axis of {cn} channels.",
                    channels=cn,
                )

        # A single spatial axis is a column vector, as cv2 reads 1-D arrays.
        spatial = array.shape[:-1] if channel_axis else array.shape
        if len(spatial) == 1:
            spatial = (spatial[0], 1)
        dims = len(spatial)

        if array.dtype.name not in DEPTH_REGISTRY:
            raise UnsupportedMatTypeError(
                f"[MatView] dtype '{array.dtype}' has no OpenCV depth "
                f"(supported: {', '.join(DEPTH_REGISTRY)}).",
                channels=cn,
            )

        self._array: np.ndarray = array
        self._dims: int = dims
        self._channels: int = cn
        self._depth: int = depth_of(array.dtype)
        # Only unit axes are added, so this stays a view of `array`.
        self._grid: Optional[np.ndarray] = (
            array.reshape(spatial[0], spatial[1], cn) if dims == 2 else None
        )

    # ====[ ALLOCATION ]====
    @classmethod
    def zeros(cls, rows: int, cols: int, depth: int, channels: int = 1) -> "MatView":
        """
        Allocate a zero-initialized, C-contiguous rows x cols matrix.

        Raises
        ------
        AllocationError
            If storage cannot be allocated.
        """
        dtype = dtype_of_depth(depth)
        make_type(depth, channels)  # validates channel range
        shape = (int(rows), int(cols)) if channels == 1 else (int(rows), int(cols), int(channels))
        try:
            array = np.zeros(shape, dtype=dtype)
        except (MemoryError, ValueError) as e:
            raise AllocationError(
                f"[MatView] Cannot allocate {type_name(depth, channels)} matrix of {rows}x{cols}: {e}"
            ) from e
        return cls(array, channels=channels)

    # ====[ METADATA ]====
    @property
    def array(self) -> np.ndarray:
        """Underlying ndarray (the value cv2 functions accept)."""
        return self._array

    @property
    def dims(self) -> int:
        return self._dims

    @property
    def rows(self) -> int:
        return int(self._grid.shape[0]) if self._dims == 2 else -1

    @property
    def cols(self) -> int:
        return int(self._grid.shape[1]) if self._dims == 2 else -1

    @property
    def channels(self) -> int:
        return self._channels

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def dtype(self) -> np.dtype:
        return self._array.dtype

    def type(self) -> int:
        """Packed OpenCV type (CV_MAKETYPE(depth, channels))."""
        return make_type(self._depth, self._channels)

    def type_name(self) -> str:
        """OpenCV type name, e.g. 'CV_8UC3'."""
        return type_name(self._depth, self._channels)

    def is_continuous(self) -> bool:
        """True if the elements are densely packed in row-major order."""
        return bool(self._array.flags.c_contiguous)

    def total(self) -> int:
        """Number of pixels (elements counted once per channel group)."""
        return int(self._array.size // self._channels) if self._channels else 0

    def elem_size(self) -> int:
        """Bytes per pixel."""
        return int(self._array.itemsize * self._channels)

    # ====[ CONTIGUOUS VIEW – Capability probe ]====
    def as_slice(self, dtype: DTypeLike) -> np.ndarray:
        """
        Return every element as a flat, read-only, strideless view.

        Parameters
        ----------
        dtype : dtype-like
            Element type the caller expects.

        Returns
        -------
        np.ndarray
            1-D view of ``total() * channels`` elements; no data is copied.

        Raises
        ------
        MatLayoutError
            If the storage is not C-contiguous or its dtype (byte order
            included) differs from `dtype`.
        """
        dt = resolve_dtype(dtype)
        if self._array.dtype != dt:
            raise MatLayoutError(
                f"[MatView] Storage dtype '{self._array.dtype.str}' differs from requested '{dt.str}'."
            )
        if not self._array.flags.c_contiguous:
            raise MatLayoutError(
                f"[MatView] Storage is not continuous (strides={self._array.strides})."
            )
        flat = self._array.reshape(-1)
        flat.flags.writeable = False
        return flat

    # ====[ RANDOM ACCESS ]====
    def at_2d(self, row: int, col: int) -> Element:
        """
        Read the element at (row, col): a scalar for one channel, a tuple otherwise.

        Works for every storage layout. Values are NumPy scalars of the
        matrix dtype, so float payloads (signalling NaNs included) are
        returned bit for bit.

        Raises
        ------
        DimensionalityError
            If the matrix is not 2-D.
        IndexError
            If (row, col) lies outside the matrix.
        """
        if self._grid is None:
            raise DimensionalityError(
                f"[MatView] at_2d requires a 2-D matrix, this one has {self._dims} dimensions.",
                expected=2,
                observed=self._dims,
            )
        rows, cols = self._grid.shape[:2]
        if not (0 <= row < rows and 0 <= col < cols):
            raise IndexError(f"[MatView] ({row}, {col}) out of bounds for {rows}x{cols} matrix.")
        values = self._grid[row, col]
        return values[0] if self._channels == 1 else tuple(values)

    # ====[ SUB-VIEWS ]====
    def roi(self, x: int, y: int, width: int, height: int) -> "MatView":
        """Return a (generally non-continuous) view of a rectangular region."""
        if self._dims != 2:
            raise DimensionalityError(
                f"[MatView] roi requires a 2-D matrix, this one has {self._dims} dimensions.",
                expected=2,
                observed=self._dims,
            )
        if x < 0 or y < 0 or x + width > self.cols or y + height > self.rows:
            raise IndexError(
                f"[MatView] ROI ({x}, {y}, {width}, {height}) exceeds {self.cols}x{self.rows} matrix."
            )
        return MatView(self._array[y:y + height, x:x + width], channels=self._channels)

    def __repr__(self) -> str:
        return (
            f"MatView(type={self.type_name()}, dims={self._dims}, rows={self.rows}, "
            f"cols={self.cols}, continuous={self.is_continuous()})"
        )


def as_mat_view(mat: MatLike) -> MatView:
    """Wrap `mat` in a MatView unless it already is one."""
    return mat if isinstance(mat, MatView) else MatView(mat)
