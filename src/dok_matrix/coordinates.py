"""
Packing of (row, column) coordinates into a single 64-bit key.

The row occupies the high 32 bits and the column the low 32 bits. Keys are
kept in the signed int64 range so they can be stored in numpy int64 arrays;
rows at or above 2**31 therefore produce negative keys.
"""

import numpy as np

_LOW_MASK = 0xFFFFFFFF
_KEY_MASK = 0xFFFFFFFFFFFFFFFF
_SIGN_BIT = 1 << 63


def pack(row: int, col: int) -> int:
    """Pack a (row, col) pair of unsigned 32-bit ints into one signed 64-bit key."""
    key = ((row & _LOW_MASK) << 32) | (col & _LOW_MASK)
    if key & _SIGN_BIT:
        key -= 1 << 64
    return key


def unpack(key: int) -> tuple[int, int]:
    """Inverse of pack()."""
    key &= _KEY_MASK
    return key >> 32, key & _LOW_MASK


def pack_keys(rows: np.ndarray, cols: np.ndarray) -> np.ndarray:
    """Vectorised pack() over parallel row and column arrays."""
    rows = np.asarray(rows).astype(np.uint64) & np.uint64(_LOW_MASK)
    cols = np.asarray(cols).astype(np.uint64) & np.uint64(_LOW_MASK)
    return ((rows << np.uint64(32)) | cols).view(np.int64)


def unpack_keys(keys: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Vectorised unpack(). Returns int64 row and column arrays."""
    keys = np.ascontiguousarray(keys, dtype=np.int64).view(np.uint64)
    rows = (keys >> np.uint64(32)).astype(np.int64)
    cols = (keys & np.uint64(_LOW_MASK)).astype(np.int64)
    return rows, cols
