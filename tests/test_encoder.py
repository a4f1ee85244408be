# ==================================================
# ================ TESTS: encode ===================
# ==================================================
from __future__ import annotations

import cv2
import numpy as np
import pytest

from matbridge import AllocationError, MatView, PixelBuffer, encode
from matbridge.core.pixel_kinds import channels_of

KINDS = ["luma", "luma_alpha", "rgb", "rgba"]
DTYPES = [np.uint8, np.uint16, np.float32]


@pytest.mark.parametrize("dtype", DTYPES)
@pytest.mark.parametrize("kind", KINDS)
def test_encode_shape_type_and_content(make_buffer, kind, dtype):
    buf = make_buffer(kind, dtype, 7, 5)
    mat = encode(buf)

    cn = channels_of(kind)
    assert mat.shape == ((5, 7) if cn == 1 else (5, 7, cn))
    assert mat.dtype == np.dtype(dtype)
    assert mat.flags.c_contiguous

    view = MatView(mat)
    assert (view.rows, view.cols, view.channels) == (5, 7, cn)
    for y in range(5):
        for x in range(7):
            got = view.at_2d(y, x)
            if cn == 1:
                got = (got,)
            assert got == buf.get_pixel(x, y)


def test_encode_bytes_are_identical(make_buffer):
    buf = make_buffer("rgb", np.float32, 9, 4)
    mat = encode(buf)
    assert mat.tobytes() == buf.as_raw().tobytes()


def test_encoded_matrix_owns_its_storage(make_buffer):
    buf = make_buffer("rgba", np.uint16, 3, 3)
    mat = encode(buf)
    assert not np.shares_memory(mat, buf.as_raw())

    before = buf.get_pixel(0, 0)
    mat[0, 0] = (1, 2, 3, 4)
    assert buf.get_pixel(0, 0) == before
    assert mat.flags.writeable


def test_encode_empty_buffer():
    mat = encode(PixelBuffer.from_vec("rgb", np.uint8, 0, 0, []))
    assert mat.shape == (0, 0, 3)
    assert mat.dtype == np.uint8


def test_encode_single_row_and_column(make_buffer):
    row = encode(make_buffer("luma", np.uint8, 6, 1))
    col = encode(make_buffer("luma", np.uint8, 1, 6))
    assert row.shape == (1, 6)
    assert col.shape == (6, 1)


def test_allocation_failure_is_reported(make_buffer, monkeypatch):
    buf = make_buffer("luma", np.uint8, 4, 4)

    def _no_memory(*args, **kwargs):
        raise MemoryError("out of memory")

    monkeypatch.setattr(np, "zeros", _no_memory)
    with pytest.raises(AllocationError):
        encode(buf)


def test_encoded_matrix_is_accepted_by_opencv(make_buffer):
    buf = make_buffer("rgb", np.uint8, 8, 6)
    mat = encode(buf)
    gray = cv2.cvtColor(mat, cv2.COLOR_RGB2GRAY)
    assert gray.shape == (6, 8)

    r, g, b = buf.get_pixel(2, 3)
    expected = round(0.299 * r + 0.587 * g + 0.114 * b)
    assert abs(int(gray[3, 2]) - expected) <= 1
