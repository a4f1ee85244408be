# ==================================================
# ================  MODULE: config  ================
# ==================================================
from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import logging

import yaml

from matbridge.core.dynamic_image import DYNAMIC_VARIANTS

__all__ = ["ConverterConfig", "DEFAULT_DECODE_VARIANTS"]

# ====[ Matrix -> DynamicImage dispatch table ]====
# Narrower than the encode direction on purpose: two-channel, four-channel
# and the float32 luma/alpha variants are never produced from a matrix.
DEFAULT_DECODE_VARIANTS: Tuple[str, ...] = (
    "ImageLuma8",
    "ImageLuma16",
    "ImageRgb8",
    "ImageRgb16",
    "ImageRgb32F",
)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ==================================================
# =============  CLASS: ConverterConfig  ===========
# ==================================================
@dataclass
class ConverterConfig:
    """
    Configuration of a MatConverter.

    Attributes
    ----------
    allow_fallback : bool, default True
        Decode non-continuous matrices element by element. If False, such
        matrices raise MatLayoutError instead.
    decode_variants : tuple of str
        DynamicImage variants `to_dynamic` may produce; each must be a known
        variant (variants never share a (depth, channels) pair).
    profile : bool, default False
        Accumulate per-operation timings in a TimerManager.
    verbose : bool, default False
        Log every conversion (forces DEBUG level).
    log_level : str, default "INFO"
        Level of the converter logger.
    log_dir : str or None
        Directory for rotating log files; console only when None.
    """

    allow_fallback: bool = True
    decode_variants: Tuple[str, ...] = field(default_factory=lambda: DEFAULT_DECODE_VARIANTS)
    profile: bool = False
    verbose: bool = False
    log_level: str = "INFO"
    log_dir: Optional[str] = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check field values; raise ValueError on the first invalid one."""
        self.decode_variants = tuple(self.decode_variants)
        unknown = [v for v in self.decode_variants if v not in DYNAMIC_VARIANTS]
        if unknown:
            raise ValueError(f"[ConverterConfig] Unknown decode variants: {unknown}")

        if str(self.log_level).upper() not in _LOG_LEVELS:
            raise ValueError(
                f"[ConverterConfig] Invalid log_level '{self.log_level}'. Expected one of {_LOG_LEVELS}."
            )
        self.log_level = str(self.log_level).upper()

    def update_config(self, **kwargs) -> "ConverterConfig":
        """Dynamically update configuration attributes (in-place)."""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
            else:
                raise AttributeError(f"[ConverterConfig] Unknown config key: '{key}'")
        self.validate()
        return self

    @property
    def level(self) -> int:
        """Effective logging level as an int."""
        return logging.DEBUG if self.verbose else getattr(logging, self.log_level)

    def params(self) -> Dict[str, Any]:
        """
        Compact dictionary of the configuration, useful for logs/serialization.
        """
        out = asdict(self)
        out["decode_variants"] = list(self.decode_variants)
        return out

    # ====[ Serialization ]====
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConverterConfig":
        """Build a config from a mapping; unknown keys raise AttributeError."""
        known = {f.name for f in fields(cls)}
        extra = set(data) - known
        if extra:
            raise AttributeError(f"[ConverterConfig] Unknown config keys: {sorted(extra)}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "ConverterConfig":
        """Load a config from a YAML mapping; an empty file gives the defaults."""
        with Path(path).open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"[ConverterConfig] Expected a mapping in {path}, got {type(data).__name__}.")
        return cls.from_dict(data)

    def to_yaml(self, path: Union[str, Path]) -> Path:
        """Write the config to `path` as YAML and return the path."""
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        with out.open("w", encoding="utf-8") as f:
            yaml.safe_dump(self.params(), f, sort_keys=False)
        return out
