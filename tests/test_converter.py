import os
import sys
import numpy as np
import pytest
import scipy.sparse as sp

# Add the src directory to Python path to import local dok_matrix
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from dok_matrix import coo_to_csr, coo_to_csc, DoKArgumentError, IndexOutOfRangeError


@pytest.fixture
def coo() -> tuple[list[int], list[int], list[float]]:
    # unsorted on purpose
    rows = [2, 0, 1, 0]
    cols = [1, 2, 0, 0]
    values = [4.0, 2.0, 3.0, 1.0]
    return rows, cols, values


def test_coo_to_csr(coo):
    rows, cols, values = coo
    csr = coo_to_csr(rows, cols, values, 3, 3)

    assert isinstance(csr, sp.csr_matrix)
    assert csr.shape == (3, 3)
    assert csr.dtype == np.float32
    np.testing.assert_array_equal(csr.indptr, [0, 2, 3, 4])
    np.testing.assert_array_equal(csr.indices, [0, 2, 0, 1])
    np.testing.assert_array_equal(csr.data, [1.0, 2.0, 3.0, 4.0])


def test_coo_to_csc(coo):
    rows, cols, values = coo
    csc = coo_to_csc(rows, cols, values, 3, 3)

    assert isinstance(csc, sp.csc_matrix)
    assert csc.shape == (3, 3)
    assert csc.dtype == np.float32
    np.testing.assert_array_equal(csc.indptr, [0, 2, 3, 4])
    np.testing.assert_array_equal(csc.indices, [0, 1, 2, 0])
    np.testing.assert_array_equal(csc.data, [1.0, 3.0, 4.0, 2.0])


def test_csr_and_csc_agree(coo):
    rows, cols, values = coo
    expected = np.array([[1.0, 0.0, 2.0],
                         [3.0, 0.0, 0.0],
                         [0.0, 4.0, 0.0]], dtype=np.float32)
    np.testing.assert_array_equal(coo_to_csr(rows, cols, values, 3, 3).toarray(), expected)
    np.testing.assert_array_equal(coo_to_csc(rows, cols, values, 3, 3).toarray(), expected)


def test_empty_rows_get_empty_slices():
    csr = coo_to_csr([3, 0], [1, 1], [5.0, 6.0], 5, 2)
    np.testing.assert_array_equal(csr.indptr, [0, 1, 1, 1, 2, 2])
    np.testing.assert_array_equal(csr.data, [6.0, 5.0])


def test_duplicates_are_summed():
    csr = coo_to_csr([0, 1, 0], [1, 0, 1], [1.5, 3.0, 2.5], 2, 2, sum_duplicates=True)
    assert csr.nnz == 2
    np.testing.assert_array_equal(csr.indptr, [0, 1, 2])
    np.testing.assert_array_equal(csr.indices, [1, 0])
    np.testing.assert_array_equal(csr.data, [4.0, 3.0])

    csc = coo_to_csc([0, 1, 0], [1, 0, 1], [1.5, 3.0, 2.5], 2, 2)
    assert csc.nnz == 2
    np.testing.assert_array_equal(csc.toarray(), [[0.0, 4.0], [3.0, 0.0]])


def test_duplicates_kept_when_not_summing():
    csr = coo_to_csr([0, 1, 0], [1, 0, 1], [1.5, 3.0, 2.5], 2, 2, sum_duplicates=False)
    assert csr.nnz == 3
    np.testing.assert_array_equal(csr.indptr, [0, 2, 3])
    np.testing.assert_array_equal(csr.indices, [1, 1, 0])
    # scatter is stable, so duplicates keep their input order
    np.testing.assert_array_equal(csr.data, [1.5, 2.5, 3.0])


def test_explicit_zeros_are_kept():
    csr = coo_to_csr([0, 1], [0, 1], [0.0, 2.0], 2, 2)
    assert csr.nnz == 2
    np.testing.assert_array_equal(csr.data, [0.0, 2.0])


def test_empty_input():
    csr = coo_to_csr([], [], [], 3, 4)
    assert csr.shape == (3, 4)
    assert csr.nnz == 0
    np.testing.assert_array_equal(csr.indptr, [0, 0, 0, 0])

    csc = coo_to_csc([], [], [], 0, 0)
    assert csc.shape == (0, 0)
    assert csc.nnz == 0


def test_mismatched_lengths():
    with pytest.raises(DoKArgumentError):
        coo_to_csr([0, 1], [0], [1.0, 2.0], 2, 2)


@pytest.mark.parametrize("rows,cols", [([2], [0]), ([0], [5]), ([-1], [0])])
def test_coordinates_outside_shape(rows, cols):
    with pytest.raises(IndexOutOfRangeError):
        coo_to_csr(rows, cols, [1.0], 2, 2)
    with pytest.raises(IndexOutOfRangeError):
        coo_to_csc(rows, cols, [1.0], 2, 2)


def test_matches_scipy_reference():
    rng = np.random.default_rng(3)
    n = 400
    rows = rng.integers(0, 30, size=n)
    cols = rng.integers(0, 20, size=n)
    values = rng.uniform(-1, 1, size=n).astype(np.float32)

    expected = sp.coo_matrix((values.astype(np.float64), (rows, cols)), shape=(30, 20)).toarray()
    csr = coo_to_csr(rows, cols, values, 30, 20)
    csc = coo_to_csc(rows, cols, values, 30, 20)

    assert csr.has_sorted_indices
    np.testing.assert_allclose(csr.toarray(), expected, rtol=1e-5, atol=1e-5)
    np.testing.assert_allclose(csc.toarray(), expected, rtol=1e-5, atol=1e-5)
    # no coordinate is stored twice after summing
    assert csr.nnz == len(set(zip(rows.tolist(), cols.tolist())))
