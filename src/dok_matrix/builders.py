from .dok_matrix import DoKMatrix
from .dok_errors import NegativeIndexError, DoKArgumentError


class DoKMatrixBuilder:
    """
    Builds a DoKMatrix one row at a time.

    Columns are written into the current row with next_column(); next_row()
    moves the cursor down. The returned matrix is growable, so its shape is
    the extent of the cells actually written.
    """

    def __init__(self, init_size: int = 0):
        self.matrix = DoKMatrix.with_capacity(init_size)
        self.row = 0

    def next_row(self) -> 'DoKMatrixBuilder':
        self.row += 1
        return self

    def next_column(self, col: int, value: float) -> 'DoKMatrixBuilder':
        """Write value at (current row, col). Zero values are skipped."""
        if col < 0:
            raise NegativeIndexError("Column", col)
        if value == 0.0:
            return self
        self.matrix.set(self.row, col, value)
        return self

    def next_column_from_string(self, feature: str) -> 'DoKMatrixBuilder':
        """Parse a "col:value" feature, or a bare "col" meaning value 1.0."""
        col_str, sep, value_str = feature.partition(':')
        try:
            col = int(col_str)
            value = float(value_str) if sep else 1.0
        except ValueError as e:
            raise DoKArgumentError(f"Invalid feature '{feature}', expected 'col:value' or 'col'") from e
        return self.next_column(col, value)

    def build_matrix(self) -> DoKMatrix:
        return self.matrix
