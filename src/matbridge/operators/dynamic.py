# ==================================================
# ===============  MODULE: dynamic  ================
# ==================================================
from __future__ import annotations

from typing import Dict, Iterable, Tuple

import numpy as np

from matbridge.core.config import DEFAULT_DECODE_VARIANTS
from matbridge.core.depth_registry import depth_of
from matbridge.core.dynamic_image import DYNAMIC_VARIANTS, DynamicImage
from matbridge.core.errors import (
    DimensionalityError,
    UnsupportedColorTypeError,
    UnsupportedMatTypeError,
)
from matbridge.core.mat_view import MatLike, as_mat_view
from matbridge.core.pixel_kinds import channels_of
from matbridge.operators.decoder import decode
from matbridge.operators.encoder import encode
from matbridge.utils.logger import get_logger

# Public API
__all__ = [
    "ENCODE_VARIANTS",
    "build_decode_table",
    "decode_dynamic",
    "encode_dynamic",
    "supported_decode_pairs",
]

logger = get_logger("matbridge")

# Variants the DynamicImage -> matrix direction accepts.
ENCODE_VARIANTS: Tuple[str, ...] = tuple(DYNAMIC_VARIANTS)


# ====[ Dispatch table ]====
def build_decode_table(variants: Iterable[str] = DEFAULT_DECODE_VARIANTS) -> Dict[Tuple[int, int], str]:
    """
    Map (depth, channels) pairs to the DynamicImage variant decoded from them.

    Parameters
    ----------
    variants : iterable of str
        Variant names to include; unknown names raise UnsupportedColorTypeError.

    Returns
    -------
    dict
        {(cv depth, channel count): variant name}
    """
    table: Dict[Tuple[int, int], str] = {}
    for name in variants:
        desc = DYNAMIC_VARIANTS.get(name)
        if desc is None:
            raise UnsupportedColorTypeError(f"[decode_dynamic] Unknown image variant '{name}'.")
        table[(depth_of(desc["dtype"]), channels_of(desc["kind"]))] = name
    return table


_DEFAULT_DECODE_TABLE: Dict[Tuple[int, int], str] = build_decode_table()


def supported_decode_pairs(variants: Iterable[str] = DEFAULT_DECODE_VARIANTS) -> Tuple[Tuple[int, int], ...]:
    """Return the (depth, channels) pairs `decode_dynamic` accepts, sorted."""
    return tuple(sorted(build_decode_table(variants)))


# ====[ Matrix -> DynamicImage ]====
def decode_dynamic(
    mat: MatLike,
    variants: Iterable[str] = DEFAULT_DECODE_VARIANTS,
    allow_fallback: bool = True,
) -> DynamicImage:
    """
    Convert a matrix into the DynamicImage variant matching its (depth, channels).

    Parameters
    ----------
    mat : ndarray | cv2.UMat | MatView
        Source matrix; read only.
    variants : iterable of str, optional
        Variants allowed as results. Default: ImageLuma8, ImageLuma16,
        ImageRgb8, ImageRgb16, ImageRgb32F.
    allow_fallback : bool, default True
        Forwarded to `decode`.

    Returns
    -------
    DynamicImage

    Raises
    ------
    DimensionalityError
        If the matrix does not have exactly 2 dimensions.
    UnsupportedMatTypeError
        If no allowed variant matches the matrix (depth, channels) pair.

    Notes
    -----
    - A bare 3-D ndarray whose last axis is <= CV_CN_MAX reads as a
      multi-channel 2-D matrix, as in cv2: a (10, 10, 10) volume is reported
      as an unsupported CV_8UC10. Wrap it as ``MatView(array, channels=1)``
      to have it rejected as a 3-D matrix instead.
    """
    view = as_mat_view(mat)
    if view.rows == -1 or view.cols == -1:
        raise DimensionalityError(
            f"[decode_dynamic] Mat with {view.dims} dimensions is not supported, expected 2.",
            expected=2,
            observed=view.dims,
        )

    table = _DEFAULT_DECODE_TABLE if variants is DEFAULT_DECODE_VARIANTS else build_decode_table(variants)
    variant = table.get((view.depth, view.channels))
    if variant is None:
        raise UnsupportedMatTypeError(
            f"[decode_dynamic] Mat of type {view.type_name()} is not supported "
            f"(depth={view.depth}, channels={view.channels}).",
            depth=view.depth,
            channels=view.channels,
        )

    desc = DYNAMIC_VARIANTS[variant]
    buffer = decode(view, desc["kind"], desc["dtype"], allow_fallback=allow_fallback)
    logger.debug(f"[decode_dynamic] {view.type_name()} -> {variant}")
    return DynamicImage(variant, buffer)


# ====[ DynamicImage -> Matrix ]====
def encode_dynamic(image: DynamicImage) -> np.ndarray:
    """
    Convert the active variant of a DynamicImage into a matrix.

    Raises
    ------
    TypeError
        If `image` is not a DynamicImage.
    UnsupportedColorTypeError
        If the variant has no matrix encoding.
    """
    if not isinstance(image, DynamicImage):
        raise TypeError(f"[encode_dynamic] Expected a DynamicImage, got {type(image).__name__}.")
    if image.variant not in ENCODE_VARIANTS:
        raise UnsupportedColorTypeError(f"[encode_dynamic] The color type {image.color()} is not supported.")
    return encode(image.buffer)
