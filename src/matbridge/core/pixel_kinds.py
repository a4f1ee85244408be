# ==================================================
# =============  MODULE: pixel_kinds  ==============
# ==================================================
from __future__ import annotations

from typing import Any, Dict, List, Literal

from matbridge.core.errors import UnsupportedPixelTypeError

__all__ = [
    "PixelKind",
    "PIXEL_KINDS",
    "get_pixel_kind",
    "channels_of",
    "has_alpha",
    "list_pixel_kinds",
    "is_valid_kind",
    "kind_for_channels",
]

PixelKind = Literal["luma", "luma_alpha", "rgb", "rgba"]

# ====[ PIXEL KINDS ]====
# Channels are always interleaved; order is passed through unchanged (a BGR
# matrix decodes into an "rgb" buffer holding B, G, R).
PIXEL_KINDS: Dict[str, Dict[str, Any]] = {
    "luma": {
        "name": "luma",
        "channels": 1,
        "has_alpha": False,
        "color_name": "L",
        "description": "Single luminance channel (grayscale)",
    },
    "luma_alpha": {
        "name": "luma_alpha",
        "channels": 2,
        "has_alpha": True,
        "color_name": "La",
        "description": "Luminance followed by alpha",
    },
    "rgb": {
        "name": "rgb",
        "channels": 3,
        "has_alpha": False,
        "color_name": "Rgb",
        "description": "Three colour channels",
    },
    "rgba": {
        "name": "rgba",
        "channels": 4,
        "has_alpha": True,
        "color_name": "Rgba",
        "description": "Three colour channels followed by alpha",
    },
}


def get_pixel_kind(kind: str) -> Dict[str, Any]:
    """
    Retrieve the descriptor of a pixel kind.

    Parameters
    ----------
    kind : {'luma', 'luma_alpha', 'rgb', 'rgba'}
        Pixel kind name (case-insensitive).

    Returns
    -------
    dict
        Copy of the descriptor with keys 'name', 'channels', 'has_alpha',
        'color_name', 'description'.

    Raises
    ------
    UnsupportedPixelTypeError
        If the kind is unknown.
    """
    key = str(kind).lower()
    if key not in PIXEL_KINDS:
        raise UnsupportedPixelTypeError(
            f"Unknown pixel kind '{kind}'. Available: {', '.join(PIXEL_KINDS)}"
        )
    return PIXEL_KINDS[key].copy()


def channels_of(kind: str) -> int:
    """Return the channel count of a pixel kind."""
    return get_pixel_kind(kind)["channels"]


def has_alpha(kind: str) -> bool:
    """Return True if the pixel kind carries an alpha channel."""
    return get_pixel_kind(kind)["has_alpha"]


def list_pixel_kinds() -> List[str]:
    """List all pixel kind names."""
    return list(PIXEL_KINDS.keys())


def is_valid_kind(kind: str) -> bool:
    """Return True if the pixel kind exists."""
    return str(kind).lower() in PIXEL_KINDS


def kind_for_channels(channels: int) -> str:
    """Return the pixel kind holding exactly `channels` interleaved channels."""
    for name, desc in PIXEL_KINDS.items():
        if desc["channels"] == channels:
            return name
    raise UnsupportedPixelTypeError(f"No pixel kind has {channels} channels.")
