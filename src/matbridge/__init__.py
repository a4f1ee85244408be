"""
matbridge - pixel buffer <-> OpenCV matrix conversion
=====================================================

Converts typed, interleaved pixel buffers into the NumPy matrices the cv2
binding works with, and back. Continuous matrices are copied in one
operation; strided views are read element by element. Unsupported
(depth, channels) pairs raise precise errors instead of producing corrupt
images.

Quick Start
-----------
>>> import numpy as np
>>> from matbridge import PixelBuffer, encode, decode, decode_dynamic
>>> buf = PixelBuffer.from_vec("rgb", np.uint8, 2, 1, [1, 2, 3, 4, 5, 6])
>>> mat = encode(buf)                 # (1, 2, 3) uint8 array, CV_8UC3
>>> decode(mat, "rgb", np.uint8) == buf
True
>>> decode_dynamic(mat).variant
'ImageRgb8'
"""

from matbridge.core.config import DEFAULT_DECODE_VARIANTS, ConverterConfig
from matbridge.core.depth_registry import (
    PIXEL_DTYPES,
    depth_of,
    depth_matches,
    dtype_of_depth,
    itemsize_of,
    make_type,
    split_type,
    type_name,
)
from matbridge.core.dynamic_image import DYNAMIC_VARIANTS, DynamicImage
from matbridge.core.errors import (
    AllocationError,
    BufferSizeError,
    ChannelMismatchError,
    ConversionError,
    DepthMismatchError,
    DimensionalityError,
    MatLayoutError,
    UnsupportedColorTypeError,
    UnsupportedMatTypeError,
    UnsupportedPixelTypeError,
)
from matbridge.core.mat_view import MatView
from matbridge.core.pixel_buffer import PixelBuffer
from matbridge.core.pixel_kinds import PIXEL_KINDS, channels_of
from matbridge.operators.converter import MatConverter
from matbridge.operators.decoder import decode, decode_elementwise, decode_gray, decode_rgb
from matbridge.operators.dynamic import decode_dynamic, encode_dynamic, supported_decode_pairs
from matbridge.operators.encoder import encode
from matbridge.operators.pil_bridge import dynamic_from_pil, dynamic_to_pil

__version__ = "0.1.0"

__all__ = [
    # Conversions
    "encode", "decode", "decode_gray", "decode_rgb", "decode_elementwise",
    "decode_dynamic", "encode_dynamic", "supported_decode_pairs",
    "dynamic_to_pil", "dynamic_from_pil",
    "MatConverter", "ConverterConfig", "DEFAULT_DECODE_VARIANTS",

    # Value types
    "PixelBuffer", "DynamicImage", "MatView",
    "PIXEL_KINDS", "DYNAMIC_VARIANTS", "PIXEL_DTYPES",

    # Registry helpers
    "depth_of", "depth_matches", "dtype_of_depth", "itemsize_of",
    "make_type", "split_type", "type_name", "channels_of",

    # Errors
    "ConversionError", "DimensionalityError", "ChannelMismatchError",
    "DepthMismatchError", "UnsupportedMatTypeError", "UnsupportedColorTypeError",
    "UnsupportedPixelTypeError", "BufferSizeError", "MatLayoutError", "AllocationError",

    "__version__",
]
