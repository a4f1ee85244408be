# ==================================================
# ============== TESTS: PixelBuffer ================
# ==================================================
from __future__ import annotations

import numpy as np
import pytest

from matbridge import BufferSizeError, PixelBuffer, UnsupportedPixelTypeError


# ===================
# Construction
# ===================

def test_from_vec_builds_interleaved_buffer():
    buf = PixelBuffer.from_vec("rgb", np.uint8, 2, 1, [1, 2, 3, 4, 5, 6])
    assert buf.dimensions() == (2, 1)
    assert buf.channels == 3
    assert buf.dtype == np.dtype(np.uint8)
    assert buf.get_pixel(0, 0) == (1, 2, 3)
    assert buf.get_pixel(1, 0) == (4, 5, 6)
    assert buf[1, 0] == (4, 5, 6)


def test_wrong_length_is_rejected_at_construction():
    with pytest.raises(BufferSizeError) as exc:
        PixelBuffer.from_vec("rgb", np.uint8, 2, 2, [0] * 11)
    assert exc.value.expected == 12
    assert exc.value.observed == 11


def test_negative_dimensions_are_rejected():
    with pytest.raises(BufferSizeError):
        PixelBuffer.from_vec("luma", np.uint8, -1, 2, [])


def test_non_flat_data_is_rejected():
    with pytest.raises(BufferSizeError):
        PixelBuffer("luma", np.uint8, 2, 2, np.zeros((2, 2), dtype=np.uint8))


@pytest.mark.parametrize("kind, dtype", [("cmyk", np.uint8), ("rgb", np.float64), ("luma", np.int32)])
def test_unsupported_kind_or_dtype(kind, dtype):
    with pytest.raises(UnsupportedPixelTypeError):
        PixelBuffer.from_vec(kind, dtype, 1, 1, [0] * 4)


def test_array_of_other_dtype_is_not_cast():
    with pytest.raises(UnsupportedPixelTypeError):
        PixelBuffer("luma", np.uint8, 2, 1, np.array([1, 2], dtype=np.uint16))


def test_float_values_are_not_truncated_into_integers():
    with pytest.raises(UnsupportedPixelTypeError):
        PixelBuffer.from_vec("luma", np.uint8, 2, 1, [1.7, 255.9])
    with pytest.raises(UnsupportedPixelTypeError):
        PixelBuffer.from_vec("luma", np.uint16, 1, 1, [np.nan])

    assert PixelBuffer.from_vec("luma", np.uint8, 2, 1, [1, 255]).as_raw().tolist() == [1, 255]
    assert PixelBuffer.from_vec("luma", np.float32, 2, 1, [1, 2]).get_pixel(1, 0) == (2.0,)


def test_buffer_owns_its_data():
    src = np.arange(6, dtype=np.uint16)
    buf = PixelBuffer("rgb", np.uint16, 1, 2, src)
    src[0] = 999
    assert buf.get_pixel(0, 0) == (0, 1, 2)
    assert not np.shares_memory(buf.as_raw(), src)


def test_copy_false_adopts_array():
    src = np.arange(4, dtype=np.float32)
    buf = PixelBuffer("luma", np.float32, 2, 2, src, copy=False)
    assert np.shares_memory(buf.as_raw(), src)


def test_from_fn_visits_pixels_row_major():
    buf = PixelBuffer.from_fn("luma", np.uint16, 3, 2, lambda x, y: y * 10 + x)
    assert buf.as_raw().tolist() == [0, 1, 2, 10, 11, 12]

    rgb = PixelBuffer.from_fn("rgb", np.uint8, 2, 2, lambda x, y: (x, y, x + y))
    assert rgb.get_pixel(1, 0) == (1, 0, 1)
    assert rgb.get_pixel(1, 1) == (1, 1, 2)


def test_from_array_accepts_hw_and_hwc():
    gray = PixelBuffer.from_array("luma", np.zeros((3, 5), dtype=np.uint8))
    assert gray.dimensions() == (5, 3)

    rgba = PixelBuffer.from_array("rgba", np.ones((2, 4, 4), dtype=np.float32))
    assert rgba.dimensions() == (4, 2)
    assert rgba.get_pixel(3, 1) == (1.0, 1.0, 1.0, 1.0)

    with pytest.raises(BufferSizeError):
        PixelBuffer.from_array("rgb", np.zeros((2, 2, 4), dtype=np.uint8))


def test_from_array_of_strided_view():
    base = np.arange(48, dtype=np.uint8).reshape(4, 4, 3)
    view = base[:, ::2]
    buf = PixelBuffer.from_array("rgb", view)
    assert np.array_equal(buf.to_array(), view)


# ===================
# Access
# ===================

def test_put_pixel_and_bounds():
    buf = PixelBuffer.from_vec("luma_alpha", np.uint8, 2, 2, [0] * 8)
    buf.put_pixel(1, 1, (7, 255))
    assert buf.get_pixel(1, 1) == (7, 255)
    assert buf.as_raw().tolist()[-2:] == [7, 255]
    with pytest.raises(IndexError):
        buf.get_pixel(2, 0)
    with pytest.raises(IndexError):
        buf.put_pixel(0, -1, (0, 0))


def test_as_raw_is_read_only():
    buf = PixelBuffer.from_vec("luma", np.uint8, 2, 1, [1, 2])
    raw = buf.as_raw()
    with pytest.raises(ValueError):
        raw[0] = 5


def test_to_array_shapes():
    gray = PixelBuffer.from_vec("luma", np.uint8, 4, 3, [0] * 12)
    assert gray.to_array().shape == (3, 4)
    rgb = PixelBuffer.from_vec("rgb", np.uint8, 4, 3, [0] * 36)
    assert rgb.to_array().shape == (3, 4, 3)


# ===================
# Equality
# ===================

def test_equality_is_bitwise(make_buffer):
    a = make_buffer("rgb", np.float32, 5, 4)
    b = PixelBuffer.from_vec("rgb", np.float32, 5, 4, a.as_raw())
    assert a == b

    b.put_pixel(0, 0, (0.5, 0.5, 0.5))
    assert a != b

    nan = PixelBuffer.from_vec("luma", np.float32, 1, 1, [np.nan])
    assert nan == PixelBuffer.from_vec("luma", np.float32, 1, 1, [np.nan])


def test_equality_requires_same_type_and_shape():
    a = PixelBuffer.from_vec("luma", np.uint8, 2, 3, [0] * 6)
    assert a != PixelBuffer.from_vec("luma", np.uint8, 3, 2, [0] * 6)
    assert a != PixelBuffer.from_vec("luma", np.uint16, 2, 3, [0] * 6)
    assert a != PixelBuffer.from_vec("luma_alpha", np.uint8, 3, 1, [0] * 6)
