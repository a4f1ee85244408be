# ==================================================
# ============  MODULE: dynamic_image  =============
# ==================================================
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from matbridge.core.depth_registry import DTypeLike, resolve_dtype
from matbridge.core.errors import UnsupportedColorTypeError
from matbridge.core.pixel_buffer import PixelBuffer
from matbridge.core.pixel_kinds import get_pixel_kind

__all__ = [
    "DYNAMIC_VARIANTS",
    "DynamicImage",
    "list_variants",
    "variant_for",
    "get_variant",
]

# ====[ DYNAMIC VARIANTS ]====
# The closed set of (kind, element type) pairs a DynamicImage can hold.
DYNAMIC_VARIANTS: Dict[str, Dict[str, Any]] = {
    "ImageLuma8": {"kind": "luma", "dtype": "uint8", "color": "L8"},
    "ImageLumaA8": {"kind": "luma_alpha", "dtype": "uint8", "color": "La8"},
    "ImageRgb8": {"kind": "rgb", "dtype": "uint8", "color": "Rgb8"},
    "ImageRgba8": {"kind": "rgba", "dtype": "uint8", "color": "Rgba8"},
    "ImageLuma16": {"kind": "luma", "dtype": "uint16", "color": "L16"},
    "ImageLumaA16": {"kind": "luma_alpha", "dtype": "uint16", "color": "La16"},
    "ImageRgb16": {"kind": "rgb", "dtype": "uint16", "color": "Rgb16"},
    "ImageRgba16": {"kind": "rgba", "dtype": "uint16", "color": "Rgba16"},
    "ImageRgb32F": {"kind": "rgb", "dtype": "float32", "color": "Rgb32F"},
    "ImageRgba32F": {"kind": "rgba", "dtype": "float32", "color": "Rgba32F"},
}


def list_variants() -> List[str]:
    """List all DynamicImage variant names."""
    return list(DYNAMIC_VARIANTS.keys())


def get_variant(name: str) -> Dict[str, Any]:
    """Return a copy of the descriptor of variant `name`."""
    if name not in DYNAMIC_VARIANTS:
        raise UnsupportedColorTypeError(
            f"Unknown image variant '{name}'. Available: {', '.join(DYNAMIC_VARIANTS)}"
        )
    return DYNAMIC_VARIANTS[name].copy()


def variant_for(kind: str, dtype: DTypeLike) -> Optional[str]:
    """Return the variant holding (kind, dtype) pixels, or None if there is none."""
    kind_name = get_pixel_kind(kind)["name"]
    dtype_name = resolve_dtype(dtype).name
    for name, desc in DYNAMIC_VARIANTS.items():
        if desc["kind"] == kind_name and desc["dtype"] == dtype_name:
            return name
    return None


def _color_name(kind: str, dtype: np.dtype) -> str:
    bits = dtype.itemsize * 8
    suffix = f"{bits}F" if dtype.kind == "f" else str(bits)
    return f"{get_pixel_kind(kind)['color_name']}{suffix}"


# ==================================================
# ================= DynamicImage ===================
# ==================================================

class DynamicImage:
    """
    Tagged union over the supported pixel buffer types.

    Exactly one variant is active; it owns a PixelBuffer whose kind and
    element type match the variant descriptor.
    """

    __slots__ = ("_variant", "_buffer")

    def __init__(self, variant: str, buffer: PixelBuffer) -> None:
        """
        Parameters
        ----------
        variant : str
            Variant name, e.g. 'ImageRgb8'.
        buffer : PixelBuffer
            Pixels of the variant's kind and element type.

        Raises
        ------
        UnsupportedColorTypeError
            If the variant is unknown or does not match the buffer.
        """
        desc = get_variant(variant)
        if buffer.kind != desc["kind"] or buffer.dtype.name != desc["dtype"]:
            raise UnsupportedColorTypeError(
                f"[DynamicImage] Variant '{variant}' holds {desc['kind']}/{desc['dtype']} pixels, "
                f"got {buffer.kind}/{buffer.dtype.name}."
            )
        self._variant: str = variant
        self._buffer: PixelBuffer = buffer

    @classmethod
    def from_buffer(cls, buffer: PixelBuffer) -> "DynamicImage":
        """Wrap `buffer` in the variant matching its kind and element type."""
        variant = variant_for(buffer.kind, buffer.dtype)
        if variant is None:
            raise UnsupportedColorTypeError(
                f"[DynamicImage] The color type {_color_name(buffer.kind, buffer.dtype)} is not supported."
            )
        return cls(variant, buffer)

    # ====[ ACCESSORS ]====
    @property
    def variant(self) -> str:
        return self._variant

    @property
    def buffer(self) -> PixelBuffer:
        return self._buffer

    def color(self) -> str:
        """Colour type name, e.g. 'Rgb8' or 'L16'."""
        return DYNAMIC_VARIANTS[self._variant]["color"]

    @property
    def width(self) -> int:
        return self._buffer.width

    @property
    def height(self) -> int:
        return self._buffer.height

    def dimensions(self) -> Tuple[int, int]:
        return self._buffer.dimensions()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DynamicImage):
            return NotImplemented
        return self._variant == other._variant and self._buffer == other._buffer

    __hash__ = None

    def __repr__(self) -> str:
        w, h = self.dimensions()
        return f"DynamicImage({self._variant}, width={w}, height={h})"
