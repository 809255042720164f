"""
Dictionary-Of-Keys sparse float32 matrix.

An open-addressing hash table keyed by packed (row, col) coordinates, built for
incremental construction and converted in one pass into CSR/CSC form.
"""

__version__ = "0.1.0"

from .dok_matrix import DoKMatrix
from .builders import DoKMatrixBuilder
from .hash_table import SparseHashTable
from .coordinates import pack, unpack, pack_keys, unpack_keys
from .converter import coo_to_csr, coo_to_csc
from .vector import DenseVector, SparseVector
from .config import DoKConfig
from .dok_errors import (
    DoKArgumentError,
    DoKInvariantError,
    InvalidSparsityError,
    InvalidDimensionError,
    NegativeIndexError,
    InvalidLoadFactorError,
    InvalidGrowthFactorError,
    IndexOutOfRangeError,
    TableIteratorExhaustedError,
    ConcurrentModificationError,
)

__all__ = [
    "DoKMatrix",
    "DoKMatrixBuilder",
    "SparseHashTable",
    "pack",
    "unpack",
    "pack_keys",
    "unpack_keys",
    "coo_to_csr",
    "coo_to_csc",
    "DenseVector",
    "SparseVector",
    "DoKConfig",
    "DoKArgumentError",
    "DoKInvariantError",
    "InvalidSparsityError",
    "InvalidDimensionError",
    "NegativeIndexError",
    "InvalidLoadFactorError",
    "InvalidGrowthFactorError",
    "IndexOutOfRangeError",
    "TableIteratorExhaustedError",
    "ConcurrentModificationError",
]
