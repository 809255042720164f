"""
Conversion of coordinate (COO) triplets into compressed sparse row/column form.

Both conversions are counting sorts: a histogram along the compressed axis,
a prefix sum giving each bucket's start offset, and a cursor scatter of the
entries into their buckets. Entries are first scattered along the other axis
so that the final scatter leaves indices sorted inside every bucket.
"""

import logging
import numpy as np
import scipy.sparse as sp

from .dok_errors import DoKArgumentError, IndexOutOfRangeError

logger = logging.getLogger(__name__)


def _check_coordinates(name: str, index: np.ndarray, bound: int) -> None:
    if len(index) == 0:
        return
    lo = int(index.min())
    hi = int(index.max())
    if lo < 0:
        raise IndexOutOfRangeError(name, lo, bound)
    if hi >= bound:
        raise IndexOutOfRangeError(name, hi, bound)


def _bucket_offsets(index: np.ndarray, n_buckets: int) -> np.ndarray:
    """Histogram of entries per bucket, prefix-summed into start offsets of length n_buckets + 1."""
    offsets = np.zeros(n_buckets + 1, dtype=np.int64)
    offsets[1:] = np.cumsum(np.bincount(index, minlength=n_buckets))
    return offsets


def _scatter_order(index: np.ndarray, offsets: np.ndarray, order: list[int]) -> list[int]:
    """
    Stable cursor scatter of the entry positions in `order` into the buckets
    given by `index`. Returns the entry positions in bucket order.
    """
    cursor = offsets[:-1].tolist()
    bucket_of = index.tolist()
    out = [0] * len(order)
    for pos in order:
        b = bucket_of[pos]
        out[cursor[b]] = pos
        cursor[b] += 1
    return out


def _coo_to_compressed(major: np.ndarray, minor: np.ndarray, values: np.ndarray,
                       n_major: int, n_minor: int,
                       sum_duplicates: bool) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Builds (data, indices, indptr) compressed along `major`.

    Returns:
        data: float32 values ordered by (major, minor)
        indices: int32 minor-axis index of each value
        indptr: int32 array of length n_major + 1, the start of each major slice in data
    """
    nnz = len(values)

    # minor pass first so the major pass leaves each bucket sorted by minor index
    minor_offsets = _bucket_offsets(minor, n_minor)
    order = _scatter_order(minor, minor_offsets, list(range(nnz)))
    indptr = _bucket_offsets(major, n_major)
    order = np.asarray(_scatter_order(major, indptr, order), dtype=np.int64)

    sorted_major = major[order]
    indices = minor[order]
    data = values[order]

    if sum_duplicates and nnz > 1:
        is_new = np.ones(nnz, dtype=bool)
        is_new[1:] = (sorted_major[1:] != sorted_major[:-1]) | (indices[1:] != indices[:-1])
        if not np.all(is_new):
            starts = np.flatnonzero(is_new)
            data = np.add.reduceat(data, starts).astype(np.float32)
            indices = indices[starts]
            indptr = _bucket_offsets(sorted_major[starts], n_major)
            logger.debug(f"Summed {nnz - len(starts)} duplicate entries")

    return data.astype(np.float32, copy=False), indices.astype(np.int32), indptr.astype(np.int32)


def _as_coo_arrays(rows, cols, values) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    rows = np.asarray(rows, dtype=np.int64).ravel()
    cols = np.asarray(cols, dtype=np.int64).ravel()
    values = np.asarray(values, dtype=np.float32).ravel()
    if not (len(rows) == len(cols) == len(values)):
        raise DoKArgumentError(
            f"rows, cols and values must have equal length, got {len(rows)}, {len(cols)}, {len(values)}")
    return rows, cols, values


def coo_to_csr(rows, cols, values, num_rows: int, num_cols: int,
               sum_duplicates: bool = True) -> sp.csr_matrix:
    """
    Convert coordinate triplets into a CSR matrix.

    Args:
        rows: Row index of each entry.
        cols: Column index of each entry.
        values: Value of each entry.
        num_rows: Number of rows of the result.
        num_cols: Number of columns of the result.
        sum_duplicates: Whether entries sharing a (row, col) are combined by addition.
            When False duplicates are kept as separate stored entries.

    Returns:
        float32 scipy.sparse.csr_matrix of shape (num_rows, num_cols) with sorted column indices.

    Raises:
        DoKArgumentError: If the input arrays differ in length.
        IndexOutOfRangeError: If a coordinate lies outside the shape.
    """
    rows, cols, values = _as_coo_arrays(rows, cols, values)
    _check_coordinates("Row", rows, num_rows)
    _check_coordinates("Column", cols, num_cols)
    logger.debug(f"Converting {len(values)} entries to CSR of shape ({num_rows}, {num_cols})")
    data, indices, indptr = _coo_to_compressed(rows, cols, values, num_rows, num_cols, sum_duplicates)
    return sp.csr_matrix((data, indices, indptr), shape=(num_rows, num_cols))


def coo_to_csc(rows, cols, values, num_rows: int, num_cols: int,
               sum_duplicates: bool = True) -> sp.csc_matrix:
    """
    Convert coordinate triplets into a CSC matrix.

    Same contract as coo_to_csr(), compressed along columns, with sorted row indices.
    """
    rows, cols, values = _as_coo_arrays(rows, cols, values)
    _check_coordinates("Row", rows, num_rows)
    _check_coordinates("Column", cols, num_cols)
    logger.debug(f"Converting {len(values)} entries to CSC of shape ({num_rows}, {num_cols})")
    data, indices, indptr = _coo_to_compressed(cols, rows, values, num_cols, num_rows, sum_duplicates)
    return sp.csc_matrix((data, indices, indptr), shape=(num_rows, num_cols))
