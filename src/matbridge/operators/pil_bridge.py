# ==================================================
# =============  MODULE: pil_bridge  ===============
# ==================================================
from __future__ import annotations

from typing import Dict

import numpy as np
from PIL import Image

from matbridge.core.dynamic_image import DYNAMIC_VARIANTS, DynamicImage
from matbridge.core.errors import UnsupportedColorTypeError
from matbridge.core.pixel_buffer import PixelBuffer

# Public API
__all__ = ["PIL_MODES", "dynamic_to_pil", "dynamic_from_pil"]

# ====[ Variant <-> PIL mode ]====
# Only modes Pillow stores with the same interleaved layout and element type.
PIL_MODES: Dict[str, str] = {
    "ImageLuma8": "L",
    "ImageLumaA8": "LA",
    "ImageRgb8": "RGB",
    "ImageRgba8": "RGBA",
    "ImageLuma16": "I;16",
}

_MODE_TO_VARIANT: Dict[str, str] = {mode: variant for variant, mode in PIL_MODES.items()}


def dynamic_to_pil(image: DynamicImage) -> Image.Image:
    """
    Convert a DynamicImage into an independent PIL image.

    Raises
    ------
    UnsupportedColorTypeError
        If Pillow has no mode for the variant (16-bit colour, float).
    """
    mode = PIL_MODES.get(image.variant)
    if mode is None:
        raise UnsupportedColorTypeError(
            f"[dynamic_to_pil] The color type {image.color()} has no PIL mode. "
            f"Supported: {', '.join(PIL_MODES)}"
        )
    # fromarray may share memory with its input; hand it a private copy
    return Image.fromarray(image.buffer.to_array().copy())


def dynamic_from_pil(pil: Image.Image) -> DynamicImage:
    """
    Convert a PIL image into the DynamicImage variant of its mode.

    Raises
    ------
    UnsupportedColorTypeError
        If the mode has no variant (e.g. 'P', '1', 'CMYK'); convert it first.
    """
    variant = _MODE_TO_VARIANT.get(pil.mode)
    if variant is None:
        raise UnsupportedColorTypeError(
            f"[dynamic_from_pil] PIL mode '{pil.mode}' is not supported. "
            f"Supported: {', '.join(_MODE_TO_VARIANT)}"
        )
    desc = DYNAMIC_VARIANTS[variant]
    # astype normalizes byte order ('I;16' is little-endian on every host)
    array = np.asarray(pil).astype(desc["dtype"], copy=False)
    buffer = PixelBuffer.from_array(desc["kind"], array, copy=True)
    return DynamicImage(variant, buffer)
