# ==================================================
# ================ TESTS: MatView ==================
# ==================================================
from __future__ import annotations

import cv2
import numpy as np
import pytest

from matbridge import (
    AllocationError,
    DimensionalityError,
    MatLayoutError,
    MatView,
    UnsupportedMatTypeError,
)


# ===================
# Shape interpretation
# ===================

def test_two_dimensional_array_is_single_channel():
    view = MatView(np.zeros((4, 6), dtype=np.uint8))
    assert (view.dims, view.rows, view.cols, view.channels) == (2, 4, 6, 1)
    assert view.depth == cv2.CV_8U
    assert view.type() == cv2.CV_8UC1
    assert view.type_name() == "CV_8UC1"


def test_trailing_axis_is_channels():
    view = MatView(np.zeros((4, 6, 3), dtype=np.float32))
    assert (view.dims, view.rows, view.cols, view.channels) == (2, 4, 6, 3)
    assert view.type() == cv2.CV_32FC3
    assert view.elem_size() == 12
    assert view.total() == 24


def test_higher_dimensional_array_has_no_rows_or_cols():
    view = MatView(np.zeros((2, 3, 4, 1), dtype=np.uint16))
    assert view.dims == 3
    assert view.rows == -1 and view.cols == -1


def test_explicit_single_channel_volume():
    view = MatView(np.zeros((5, 4, 3), dtype=np.uint8), channels=1)
    assert view.dims == 3
    assert view.channels == 1
    assert view.rows == -1 and view.cols == -1


def test_one_dimensional_array_is_a_column():
    view = MatView(np.arange(5, dtype=np.uint8))
    assert (view.rows, view.cols, view.channels) == (5, 1, 1)
    assert view.at_2d(3, 0) == 3


def test_explicit_channels_must_match_shape():
    with pytest.raises(UnsupportedMatTypeError):
        MatView(np.zeros((4, 4, 3), dtype=np.uint8), channels=4)


def test_unsupported_dtype_and_type():
    with pytest.raises(UnsupportedMatTypeError):
        MatView(np.zeros((2, 2), dtype=bool))
    with pytest.raises(TypeError):
        MatView([[1, 2], [3, 4]])


def test_umat_is_downloaded():
    arr = np.arange(12, dtype=np.uint8).reshape(3, 4)
    view = MatView(cv2.UMat(arr))
    assert np.array_equal(view.array, arr)
    assert view.type() == cv2.CV_8UC1


# ===================
# Contiguous view probe
# ===================

def test_as_slice_is_a_read_only_view(make_mat):
    mat = make_mat(5, 7, np.uint16, channels=3)
    flat = MatView(mat).as_slice(np.uint16)
    assert flat.shape == (5 * 7 * 3,)
    assert np.shares_memory(flat, mat)
    assert np.array_equal(flat, mat.reshape(-1))
    with pytest.raises(ValueError):
        flat[0] = 1
    # the caller's array stays writable
    assert mat.flags.writeable


def test_as_slice_unavailable_for_strided_storage(make_mat):
    mat = make_mat(6, 8, np.uint8, channels=3)
    view = MatView(mat[1:5, 2:6])
    assert not view.is_continuous()
    with pytest.raises(MatLayoutError):
        view.as_slice(np.uint8)


def test_as_slice_requires_exact_dtype(make_mat):
    mat = make_mat(3, 3, np.uint16)
    with pytest.raises(MatLayoutError):
        MatView(mat).as_slice(np.uint8)
    swapped = mat.astype(mat.dtype.newbyteorder())
    with pytest.raises(MatLayoutError):
        MatView(swapped).as_slice(np.uint16)


# ===================
# Random access
# ===================

def test_at_2d_reads_scalars_and_tuples(make_mat):
    gray = make_mat(4, 5, np.uint8)
    rgb = make_mat(4, 5, np.float32, channels=3)
    assert MatView(gray).at_2d(2, 3) == int(gray[2, 3])
    assert MatView(rgb).at_2d(3, 1) == tuple(rgb[3, 1].tolist())


def test_at_2d_returns_elements_bit_for_bit():
    bits = np.array([[0x7F800001, 0xFFC12345]], dtype=np.uint32)
    view = MatView(bits.view(np.float32))
    for col in range(2):
        value = view.at_2d(0, col)
        assert value.dtype == np.float32
        assert np.array([value]).view(np.uint32)[0] == bits[0, col]


def test_at_2d_on_strided_view(make_mat):
    mat = make_mat(10, 12, np.uint16, channels=3)
    sub = mat[::3, 1::2]
    view = MatView(sub)
    for row in range(view.rows):
        for col in range(view.cols):
            assert view.at_2d(row, col) == tuple(sub[row, col].tolist())


def test_at_2d_errors():
    view = MatView(np.zeros((2, 3), dtype=np.uint8))
    with pytest.raises(IndexError):
        view.at_2d(2, 0)
    with pytest.raises(IndexError):
        view.at_2d(0, -1)
    with pytest.raises(DimensionalityError):
        MatView(np.zeros((2, 2, 2), dtype=np.uint8), channels=1).at_2d(0, 0)


def test_roi(make_mat):
    mat = make_mat(6, 8, np.uint8, channels=4)
    roi = MatView(mat).roi(2, 1, 3, 4)
    assert (roi.rows, roi.cols, roi.channels) == (4, 3, 4)
    assert roi.at_2d(0, 0) == tuple(mat[1, 2].tolist())
    with pytest.raises(IndexError):
        MatView(mat).roi(6, 0, 3, 1)


# ===================
# Allocation
# ===================

@pytest.mark.parametrize(
    "depth, channels, shape, dtype",
    [
        (cv2.CV_8U, 1, (3, 4), np.uint8),
        (cv2.CV_16U, 3, (3, 4, 3), np.uint16),
        (cv2.CV_32F, 4, (3, 4, 4), np.float32),
    ],
)
def test_zeros(depth, channels, shape, dtype):
    view = MatView.zeros(3, 4, depth, channels)
    assert view.array.shape == shape
    assert view.array.dtype == np.dtype(dtype)
    assert view.is_continuous()
    assert not view.array.any()


def test_zeros_rejects_bad_requests():
    with pytest.raises(UnsupportedMatTypeError):
        MatView.zeros(2, 2, cv2.CV_8U, 0)
    with pytest.raises(UnsupportedMatTypeError):
        MatView.zeros(2, 2, 99, 1)
    with pytest.raises(AllocationError):
        MatView.zeros(-1, 2, cv2.CV_8U, 1)
