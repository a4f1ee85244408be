# ==================================================
# ==============  MODULE: converter  ===============
# ==================================================
from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Union

import numpy as np
from PIL import Image

from matbridge.core.config import ConverterConfig
from matbridge.core.depth_registry import DTypeLike
from matbridge.core.dynamic_image import DynamicImage
from matbridge.core.mat_view import MatLike
from matbridge.core.pixel_buffer import PixelBuffer
from matbridge.operators.decoder import decode
from matbridge.operators.dynamic import decode_dynamic, encode_dynamic
from matbridge.operators.encoder import encode
from matbridge.operators.pil_bridge import dynamic_from_pil, dynamic_to_pil
from matbridge.utils.decorators import TimerManager, log_exceptions
from matbridge.utils.logger import get_error_logger, get_logger

# Public API
__all__ = ["MatConverter"]

ImageLike = Union[PixelBuffer, DynamicImage, Image.Image]

# ==================================================
# ================= MatConverter ===================
# ==================================================

class MatConverter:
    """
    Configured entry point for pixel buffer <-> OpenCV matrix conversions.

    Notes
    -----
    - Every call allocates a fresh result; inputs are never modified.
    - Failures are logged through the error logger and re-raised unchanged.
    - With ``config.profile`` each operation's wall time is accumulated.
    - ``config.verbose`` and ``config.log_level`` set the level of the package
      logger ``matbridge``; the most recently built converter wins.
    """

    def __init__(self, config: Optional[ConverterConfig] = None) -> None:
        """
        Parameters
        ----------
        config : ConverterConfig, optional
            Fallback policy, decode table, logging and profiling options.
        """
        # ====[ Configuration ]====
        self.config: ConverterConfig = config if config is not None else ConverterConfig()

        # ====[ Logging & Profiling ]====
        # Package logger: encode/decode/fallback records share its level and files.
        self.logger = get_logger("matbridge", log_dir=self.config.log_dir, level=self.config.level)
        self.error_logger = get_error_logger(log_dir=self.config.log_dir)
        self.timers: TimerManager = TimerManager()

    # ====[ Shared call wrapper ]====
    def _run(self, label: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        wrapped = log_exceptions(self.error_logger, raise_exception=True)(func)
        if self.config.profile:
            wrapped = self.timers.track(label)(wrapped)
        result = wrapped(*args, **kwargs)
        self.logger.debug(f"[MatConverter] {label} -> {type(result).__name__}")
        return result

    # ====[ Image -> Matrix ]====
    def to_mat(self, image: ImageLike) -> np.ndarray:
        """
        Encode a PixelBuffer, DynamicImage or PIL image into a matrix.

        Raises
        ------
        TypeError
            If `image` is none of the accepted types.
        """
        if isinstance(image, PixelBuffer):
            return self._run("encode", encode, image)
        if isinstance(image, DynamicImage):
            return self._run("encode_dynamic", encode_dynamic, image)
        if isinstance(image, Image.Image):
            return self._run("encode_dynamic", encode_dynamic, self.from_pil(image))
        raise TypeError(
            f"[MatConverter] Cannot encode {type(image).__name__}; "
            "expected PixelBuffer, DynamicImage or PIL.Image.Image."
        )

    # ====[ Matrix -> Image ]====
    def to_buffer(self, mat: MatLike, kind: str, dtype: DTypeLike) -> PixelBuffer:
        """Decode `mat` into a (kind, dtype) PixelBuffer, honouring `allow_fallback`."""
        return self._run("decode", decode, mat, kind, dtype, allow_fallback=self.config.allow_fallback)

    def to_dynamic(self, mat: MatLike) -> DynamicImage:
        """Decode `mat` into the configured DynamicImage variant for its type."""
        return self._run(
            "decode_dynamic",
            decode_dynamic,
            mat,
            variants=self.config.decode_variants,
            allow_fallback=self.config.allow_fallback,
        )

    # ====[ PIL ]====
    def to_pil(self, mat: MatLike) -> Image.Image:
        """Decode `mat` and hand it to Pillow (8-bit kinds and 16-bit luma only)."""
        return self._run("to_pil", dynamic_to_pil, self.to_dynamic(mat))

    def from_pil(self, pil: Image.Image) -> DynamicImage:
        """Wrap a PIL image as a DynamicImage."""
        return self._run("from_pil", dynamic_from_pil, pil)

    # ====[ Profiling ]====
    def timings(self, digits: int = 3) -> Dict[str, Dict[str, float]]:
        """Accumulated timings per operation (empty unless profiling is enabled)."""
        return self.timers.summary(digits=digits)

    def log_timings(self) -> None:
        """Write the timing summary to the converter logger."""
        self.timers.log_summary(self.logger, level=self.config.level)
