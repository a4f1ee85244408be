# ==================================================
# ============ TESTS: ConverterConfig ==============
# ==================================================
from __future__ import annotations

import logging

import pytest
import yaml

from matbridge import DEFAULT_DECODE_VARIANTS, ConverterConfig


def test_defaults():
    cfg = ConverterConfig()
    assert cfg.allow_fallback is True
    assert cfg.decode_variants == DEFAULT_DECODE_VARIANTS
    assert cfg.profile is False
    assert cfg.log_dir is None
    assert cfg.level == logging.INFO


def test_update_config_in_place():
    cfg = ConverterConfig()
    same = cfg.update_config(allow_fallback=False, log_level="warning")
    assert same is cfg
    assert cfg.allow_fallback is False
    assert cfg.log_level == "WARNING"
    assert cfg.level == logging.WARNING

    with pytest.raises(AttributeError):
        cfg.update_config(fallback=True)


def test_verbose_forces_debug():
    assert ConverterConfig(verbose=True, log_level="ERROR").level == logging.DEBUG


def test_invalid_values():
    with pytest.raises(ValueError):
        ConverterConfig(decode_variants=("ImageRgb8", "ImageCmyk8"))
    with pytest.raises(ValueError):
        ConverterConfig(log_level="LOUD")


def test_variants_are_normalized_to_tuple():
    cfg = ConverterConfig(decode_variants=["ImageRgb8", "ImageRgba8"])
    assert cfg.decode_variants == ("ImageRgb8", "ImageRgba8")


def test_yaml_round_trip(tmp_path):
    cfg = ConverterConfig(allow_fallback=False, decode_variants=("ImageLuma8",), profile=True)
    path = cfg.to_yaml(tmp_path / "cfg" / "converter.yaml")
    assert path.exists()

    with path.open() as f:
        raw = yaml.safe_load(f)
    assert raw["decode_variants"] == ["ImageLuma8"]
    assert list(raw) == ["allow_fallback", "decode_variants", "profile", "verbose", "log_level", "log_dir"]

    assert ConverterConfig.from_yaml(path) == cfg


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert ConverterConfig.from_yaml(path) == ConverterConfig()


def test_yaml_must_hold_a_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        ConverterConfig.from_yaml(path)


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(AttributeError):
        ConverterConfig.from_dict({"allow_fallback": True, "threads": 4})
    assert ConverterConfig.from_dict({"profile": True}).profile is True
