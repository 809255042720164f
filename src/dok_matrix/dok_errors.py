

class DoKArgumentError(ValueError):
    """Base class for invalid arguments passed to the DoK matrix or its hash table."""
    pass

class DoKInvariantError(RuntimeError):
    """Base class for internal invariant violations. These are not recoverable."""
    pass



class InvalidSparsityError(DoKArgumentError):
    """Raised when the sparsity hint is outside the range [0, 1]."""

    def __init__(self, sparsity: float):
        self.sparsity = sparsity
        message = f"Invalid sparsity value: {sparsity}. Must be in range [0, 1]"
        super().__init__(message)


class InvalidDimensionError(DoKArgumentError):
    """Raised when a matrix is constructed with a negative number of rows or columns."""

    def __init__(self, num_rows: int, num_cols: int):
        self.num_rows = num_rows
        self.num_cols = num_cols
        message = f"Matrix dimensions must be non-negative, got ({num_rows}, {num_cols})"
        super().__init__(message)


class NegativeIndexError(DoKArgumentError):
    """Raised when a negative row or column index is passed to an accessor."""

    def __init__(self, axis: str, index: int):
        self.axis = axis
        self.index = index
        message = f"{axis} index must be non-negative, got {index}"
        super().__init__(message)


class InvalidLoadFactorError(DoKArgumentError):
    """Raised when the hash table load factor is outside the open range (0, 1)."""

    def __init__(self, load_factor: float):
        self.load_factor = load_factor
        message = f"Load factor {load_factor} must be in range (0, 1)"
        super().__init__(message)


class InvalidGrowthFactorError(DoKArgumentError):
    """Raised when the hash table growth factor would not grow the table."""

    def __init__(self, growth_factor: float):
        self.growth_factor = growth_factor
        message = f"Growth factor {growth_factor} must be greater than 1"
        super().__init__(message)


class IndexOutOfRangeError(IndexError):
    """Raised when a row or column index is at or beyond the bound it is checked against."""

    def __init__(self, axis: str, index: int, bound: int):
        self.axis = axis
        self.index = index
        self.bound = bound
        message = f"{axis} index {index} out of range [0, {bound})"
        super().__init__(message)


class TableIteratorExhaustedError(DoKInvariantError):
    """Raised when the hash table iterator yields fewer entries than the table reports."""

    def __init__(self, position: int, expected: int):
        self.position = position
        self.expected = expected
        message = (
            f"Hash table iterator exhausted at entry {position}, expected {expected} entries. "
            f"Table size and iteration are out of sync."
        )
        super().__init__(message)


class ConcurrentModificationError(DoKInvariantError):
    """Raised when the hash table is structurally modified while an iterator over it is live."""

    def __init__(self):
        message = "Hash table changed size during iteration"
        super().__init__(message)
