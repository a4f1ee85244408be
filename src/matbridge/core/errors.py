# ==================================================
# ===============  MODULE: errors  =================
# ==================================================
from __future__ import annotations

from typing import Any, Optional

__all__ = [
    "ConversionError",
    "DimensionalityError",
    "ChannelMismatchError",
    "DepthMismatchError",
    "UnsupportedMatTypeError",
    "UnsupportedColorTypeError",
    "UnsupportedPixelTypeError",
    "BufferSizeError",
    "MatLayoutError",
    "AllocationError",
]


class ConversionError(ValueError):
    """Base class for every failure raised by a buffer <-> matrix conversion."""


class _MismatchError(ConversionError):
    """
    Error carrying the expected and observed values of a failed precondition.

    Attributes
    ----------
    expected : Any
        Value required by the conversion target.
    observed : Any
        Value reported by the source.
    """

    def __init__(self, message: str, expected: Any = None, observed: Any = None) -> None:
        super().__init__(message)
        self.expected = expected
        self.observed = observed


class DimensionalityError(_MismatchError):
    """Matrix does not have exactly two indexed dimensions."""


class ChannelMismatchError(_MismatchError):
    """Target pixel kind and matrix disagree on the channel count."""


class DepthMismatchError(_MismatchError):
    """Target element type and matrix disagree on the depth tag."""


class UnsupportedMatTypeError(ConversionError):
    """
    No conversion exists for the matrix (depth, channels) pair.

    Attributes
    ----------
    depth : int or None
        Observed OpenCV depth tag (None when the dtype has no depth at all).
    channels : int or None
        Observed channel count.
    """

    def __init__(self, message: str, depth: Optional[int] = None, channels: Optional[int] = None) -> None:
        super().__init__(message)
        self.depth = depth
        self.channels = channels


class UnsupportedColorTypeError(ConversionError):
    """Image variant or colour mode has no counterpart on the other side."""


class UnsupportedPixelTypeError(ConversionError):
    """Unknown pixel kind or element dtype requested for a pixel buffer."""


class BufferSizeError(_MismatchError):
    """Backing store length differs from width * height * channels."""


class MatLayoutError(ConversionError):
    """Matrix storage cannot be exposed as a flat contiguous slice."""


class AllocationError(ConversionError, MemoryError):
    """Storage for a converted value could not be allocated."""
