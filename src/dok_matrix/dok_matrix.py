import logging
import operator
import numpy as np
import pandas as pd
from dataclasses import replace
from typing import Iterator, Optional

from .config import DoKConfig
from .constants import DEFAULT_SPARSITY, MAX_INDEX, MAX_INITIAL_CAPACITY, CooColumn
from .coordinates import pack, unpack, unpack_keys
from .converter import coo_to_csr, coo_to_csc
from .hash_table import SparseHashTable
from .dok_errors import (
    InvalidSparsityError,
    InvalidDimensionError,
    NegativeIndexError,
    IndexOutOfRangeError,
    TableIteratorExhaustedError,
)

logger = logging.getLogger(__name__)


def _check_non_negative(axis: str, index) -> int:
    index = operator.index(index)
    if index < 0:
        raise NegativeIndexError(axis, index)
    if index > MAX_INDEX:
        raise IndexOutOfRangeError(axis, index, MAX_INDEX + 1)
    return index


def _check_bounded(axis: str, index, bound: int) -> int:
    index = _check_non_negative(axis, index)
    if index >= bound:
        raise IndexOutOfRangeError(axis, index, bound)
    return index


class DoKMatrix:
    """
    Dictionary-Of-Keys sparse float32 matrix.

    Entries live in a SparseHashTable keyed by the packed (row, col) coordinate,
    which makes random-order construction cheap. Row and column traversals scan
    the full extent of the other axis; use each_nonzero_cell() or one of the
    to_*_major_matrix() conversions when the whole matrix has to be read.

    A growable matrix extends num_rows/num_columns whenever a write inserts a
    new entry past the current extent. A fixed matrix (growable=False) keeps its
    shape and rejects out-of-range accesses.

    nnz counts the entries present in the table. Writing 0.0 over an existing
    entry keeps it as an explicit zero, so nnz never decreases.
    """

    def __init__(self,
                 num_rows: int = 0,
                 num_cols: int = 0,
                 sparsity: float = DEFAULT_SPARSITY,
                 growable: bool = True,
                 config: Optional[DoKConfig] = None):
        """
        Initialize an empty DoKMatrix.

        Args:
            num_rows: Initial number of rows.
            num_cols: Initial number of columns.
            sparsity: Expected fraction of non-zero cells, in [0, 1]. Only used to size the hash table.
            growable: Whether writes past the current extent grow the matrix.
            config: Hash table tuning, see DoKConfig.
        """
        if not 0.0 <= sparsity <= 1.0:
            raise InvalidSparsityError(sparsity)
        if num_rows < 0 or num_cols < 0:
            raise InvalidDimensionError(num_rows, num_cols)
        self.config = config if config is not None else DoKConfig()
        self.config.validate()

        size_hint = min(round(num_rows * num_cols * sparsity), MAX_INITIAL_CAPACITY)
        initial_capacity = max(self.config.min_initial_capacity, size_hint)
        self._elements = SparseHashTable(initial_capacity,
                                         load_factor=self.config.load_factor,
                                         growth_factor=self.config.growth_factor,
                                         default_value=0.0)
        self._num_rows = num_rows
        self._num_cols = num_cols
        self._nnz = 0
        self.growable = growable

    @classmethod
    def with_capacity(cls, init_size: int, config: Optional[DoKConfig] = None) -> 'DoKMatrix':
        """Create an empty growable matrix whose table holds at least init_size slots."""
        config = config if config is not None else DoKConfig()
        return cls(config=replace(config, min_initial_capacity=max(init_size, config.min_initial_capacity)))

    @property
    def num_rows(self) -> int:
        return self._num_rows

    @property
    def num_columns(self) -> int:
        return self._num_cols

    @property
    def shape(self) -> tuple[int, int]:
        return self._num_rows, self._num_cols

    @property
    def nnz(self) -> int:
        """Number of stored entries, explicit zeros included."""
        return self._nnz

    @property
    def is_sparse(self) -> bool:
        return True

    @property
    def is_row_major(self) -> bool:
        return False

    @property
    def is_column_major(self) -> bool:
        return False

    @property
    def read_only(self) -> bool:
        return False

    @property
    def swappable(self) -> bool:
        return True

    def _check_index(self, row, col) -> tuple[int, int]:
        if self.growable:
            return _check_non_negative("Row", row), _check_non_negative("Column", col)
        return _check_bounded("Row", row, self._num_rows), _check_bounded("Column", col, self._num_cols)

    # ************************************
    # element access
    # ************************************

    def get(self, row: int, col: int, default: float = 0.0) -> float:
        """Get the value at position (row, col), or default if there is no entry."""
        row, col = self._check_index(row, col)
        return self._elements.get(pack(row, col), default)

    def set(self, row: int, col: int, value: float) -> None:
        """Set the value at position (row, col). Writing 0.0 where there is no entry does nothing."""
        self._write(row, col, value)

    def get_and_set(self, row: int, col: int, value: float) -> float:
        """Set the value at position (row, col) and return the previous value (0.0 if there was no entry)."""
        return self._write(row, col, value)

    def _write(self, row, col, value: float) -> float:
        row, col = self._check_index(row, col)
        # stored values are float32, compare against zero after narrowing
        value = float(np.float32(value))
        key = pack(row, col)
        table = self._elements

        slot = table._find_slot(key)
        if slot >= 0:
            return table._set_at(slot, value)
        if value == 0.0:
            # never materialize a zero for an absent cell
            return 0.0

        table.put(key, value)
        self._nnz += 1
        if self.growable:
            self._num_rows = max(self._num_rows, row + 1)
            self._num_cols = max(self._num_cols, col + 1)
        return 0.0

    def swap(self, row1: int, row2: int) -> None:
        """
        Exchange the contents of two rows.

        Where both rows hold an entry for a column the values are exchanged in
        place; where only one does, the entry is moved to the other row.
        """
        row1 = _check_bounded("Row", row1, self._num_rows)
        row2 = _check_bounded("Row", row2, self._num_rows)
        if row1 == row2:
            return

        table = self._elements
        for col in range(self._num_cols):
            key1 = pack(row1, col)
            key2 = pack(row2, col)
            slot1 = table._find_slot(key1)
            slot2 = table._find_slot(key2)

            if slot1 >= 0 and slot2 >= 0:
                v1 = table._get_at(slot1)
                table._set_at(slot1, table._set_at(slot2, v1))
            elif slot1 >= 0:
                table.put(key2, table._remove_at(slot1))
            elif slot2 >= 0:
                table.put(key1, table._remove_at(slot2))

    def num_columns_in_row(self, row: int) -> int:
        """Number of columns holding an entry in the given row. Scans every column."""
        row = _check_non_negative("Row", row)
        table = self._elements
        return sum(1 for col in range(self._num_cols) if table.contains_key(pack(row, col)))

    def new_row(self) -> np.ndarray:
        """A zeroed float32 array long enough to hold one row."""
        return np.zeros(self._num_cols, dtype=np.float32)

    def get_row(self, row: int, dst=None):
        """
        Copy a row into dst.

        Args:
            row: The row index.
            dst: One of
                - None: a new float32 array of length num_columns is allocated
                - an array or list: the first min(len(dst), num_columns) positions are
                  overwritten, the rest are left untouched
                - a vector exposing clear() and set(index, value), e.g. DenseVector or
                  SparseVector: it is cleared, then every non-zero value is set

        Returns:
            dst
        """
        row = _check_bounded("Row", row, self._num_rows)
        if dst is None:
            dst = self.new_row()
        table = self._elements

        if callable(getattr(dst, "clear", None)) and callable(getattr(dst, "set", None)):
            dst.clear()
            for col in range(self._num_cols):
                v = table.get(pack(row, col), 0.0)
                if v != 0.0:
                    dst.set(col, v)
            return dst

        end = min(len(dst), self._num_cols)
        for col in range(end):
            dst[col] = table.get(pack(row, col), 0.0)
        return dst

    # ************************************
    # traversal
    # ************************************

    def each_in_row(self, row: int, include_zeros: bool = False) -> Iterator[tuple[int, float]]:
        """
        Yields (col, value) for every entry in the row, in column order.
        With include_zeros, absent cells are yielded as (col, 0.0) too.
        """
        row = _check_bounded("Row", row, self._num_rows)
        return self._each_in_row(row, include_zeros)

    def _each_in_row(self, row: int, include_zeros: bool) -> Iterator[tuple[int, float]]:
        table = self._elements
        for col in range(self._num_cols):
            slot = table._find_slot(pack(row, col))
            if slot >= 0:
                yield col, table._get_at(slot)
            elif include_zeros:
                yield col, 0.0

    def each_nonzero_in_row(self, row: int) -> Iterator[tuple[int, float]]:
        """Yields (col, value) for every non-zero value in the row. Explicit zeros are skipped."""
        row = _check_bounded("Row", row, self._num_rows)
        return self._each_nonzero_in_row(row)

    def _each_nonzero_in_row(self, row: int) -> Iterator[tuple[int, float]]:
        table = self._elements
        for col in range(self._num_cols):
            v = table.get(pack(row, col), 0.0)
            if v != 0.0:
                yield col, v

    def each_column_index_in_row(self, row: int) -> Iterator[int]:
        """Yields the column index of every entry in the row, whatever its value."""
        row = _check_bounded("Row", row, self._num_rows)
        return self._each_column_index_in_row(row)

    def _each_column_index_in_row(self, row: int) -> Iterator[int]:
        table = self._elements
        for col in range(self._num_cols):
            if table._find_slot(pack(row, col)) >= 0:
                yield col

    def each_in_column(self, col: int, include_zeros: bool = False) -> Iterator[tuple[int, float]]:
        """
        Yields (row, value) for every entry in the column, in row order.
        With include_zeros, absent cells are yielded as (row, 0.0) too.
        """
        col = _check_bounded("Column", col, self._num_cols)
        return self._each_in_column(col, include_zeros)

    def _each_in_column(self, col: int, include_zeros: bool) -> Iterator[tuple[int, float]]:
        table = self._elements
        for row in range(self._num_rows):
            slot = table._find_slot(pack(row, col))
            if slot >= 0:
                yield row, table._get_at(slot)
            elif include_zeros:
                yield row, 0.0

    def each_nonzero_in_column(self, col: int) -> Iterator[tuple[int, float]]:
        """Yields (row, value) for every non-zero value in the column."""
        col = _check_bounded("Column", col, self._num_cols)
        return self._each_nonzero_in_column(col)

    def _each_nonzero_in_column(self, col: int) -> Iterator[tuple[int, float]]:
        table = self._elements
        for row in range(self._num_rows):
            v = table.get(pack(row, col), 0.0)
            if v != 0.0:
                yield row, v

    def each_nonzero_cell(self) -> Iterator[tuple[int, int, float]]:
        """
        Yields (row, col, value) for every stored entry in one pass over the hash table.

        Order is the table's slot order, not row or column order. The matrix must not
        gain or lose entries while the iterator is in use.
        """
        for key, value in self._elements.entries():
            row, col = unpack(key)
            yield row, col, value

    # ************************************
    # conversion
    # ************************************

    def _drain_coo(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Copies every entry into parallel (rows, cols, values) arrays, in slot order."""
        nnz = self._elements.size()
        keys = np.empty(nnz, dtype=np.int64)
        values = np.empty(nnz, dtype=np.float32)

        entries = self._elements.entries()
        for i in range(nnz):
            entry = next(entries, None)
            if entry is None:
                raise TableIteratorExhaustedError(i, nnz)
            keys[i], values[i] = entry

        rows, cols = unpack_keys(keys)
        return rows, cols, values

    def to_row_major_matrix(self):
        """Convert into a float32 scipy.sparse.csr_matrix of shape (num_rows, num_columns)."""
        rows, cols, values = self._drain_coo()
        logger.debug(f"Converting DoK matrix {self.shape} with {len(values)} entries to row-major")
        # keys are unique here, so summing never merges anything
        return coo_to_csr(rows, cols, values, self._num_rows, self._num_cols, sum_duplicates=True)

    def to_column_major_matrix(self):
        """Convert into a float32 scipy.sparse.csc_matrix of shape (num_rows, num_columns)."""
        rows, cols, values = self._drain_coo()
        logger.debug(f"Converting DoK matrix {self.shape} with {len(values)} entries to column-major")
        return coo_to_csc(rows, cols, values, self._num_rows, self._num_cols, sum_duplicates=True)

    def to_dataframe(self) -> pd.DataFrame:
        """One row per stored entry with columns row, col, value, in slot order."""
        rows, cols, values = self._drain_coo()
        return pd.DataFrame({CooColumn.ROW: rows, CooColumn.COL: cols, CooColumn.VALUE: values})

    def builder(self):
        """A DoKMatrixBuilder sized for a matrix like this one."""
        from .builders import DoKMatrixBuilder
        return DoKMatrixBuilder(self._elements.size())

    # ************************************
    # container protocol
    # ************************************

    def __getitem__(self, key) -> float:
        """Returns the value at position (row, col), or 0.0 if there is no entry."""
        if isinstance(key, tuple) and len(key) == 2:
            row, col = key
        else:
            raise KeyError("DoKMatrix indices must be a tuple of length 2")
        return self.get(row, col)

    def __setitem__(self, key, value: float) -> None:
        if isinstance(key, tuple) and len(key) == 2:
            row, col = key
        else:
            raise KeyError("DoKMatrix indices must be a tuple of length 2")
        self.set(row, col, value)

    def __contains__(self, key) -> bool:
        """Checks if there is an entry at position (row, col)."""
        if not (isinstance(key, tuple) and len(key) == 2):
            return False
        row, col = key
        if not (0 <= row <= MAX_INDEX and 0 <= col <= MAX_INDEX):
            return False
        return self._elements.contains_key(pack(row, col))

    def __len__(self) -> int:
        """Returns the number of stored entries."""
        return self._nnz

    def __iter__(self) -> Iterator[tuple[int, int]]:
        """Iterates over the (row, col) positions holding an entry, in slot order."""
        for row, col, _ in self.each_nonzero_cell():
            yield row, col

    def items(self) -> list[tuple[tuple[int, int], float]]:
        """Returns a list of ((row, col), value) pairs, mimicking dict.items()."""
        return [((row, col), value) for row, col, value in self.each_nonzero_cell()]

    def copy(self) -> 'DoKMatrix':
        """Returns a copy of the matrix with the same shape, variant and config."""
        result = DoKMatrix(self._num_rows, self._num_cols, growable=self.growable,
                           config=replace(self.config,
                                          min_initial_capacity=max(self.config.min_initial_capacity, self._nnz)))
        for key, value in self._elements.entries():
            result._elements.put(key, value)
        result._nnz = self._nnz
        return result

    def __repr__(self) -> str:
        """String representation of the matrix."""
        if self._nnz == 0:
            return f"DoKMatrix(shape={self.shape}, {{}})"
        items_str = ", ".join(f"{k}: {v}" for k, v in sorted(self.items()))
        return f"DoKMatrix(shape={self.shape}, {{{items_str}}})"
