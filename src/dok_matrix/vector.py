import numpy as np
from dataclasses import dataclass, field
from typing import Optional


class DenseVector:
    """Fixed-length float32 vector backed by a numpy array."""

    def __init__(self, size: int):
        self.values = np.zeros(size, dtype=np.float32)

    def get(self, i: int, default: float = 0.0) -> float:
        """Get the value at index i, or default if i is past the end."""
        if i >= len(self.values):
            return default
        return float(self.values[i])

    def set(self, i: int, value: float) -> None:
        """Set the value at index i."""
        self.values[i] = value

    def clear(self) -> None:
        """Resets every element to zero."""
        self.values.fill(0.0)

    def size(self) -> int:
        return len(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def to_array(self) -> np.ndarray:
        """Returns a copy of the underlying array."""
        return self.values.copy()

    def __repr__(self) -> str:
        return f"DenseVector({self.values.tolist()})"


@dataclass
class SparseVector:
    data_store: dict[int, float] = field(default_factory=dict)

    def get(self, i: int, default: float = 0.0) -> float:
        """Get the value at index i."""
        return self.data_store.get(i, default)

    def set(self, i: int, value: float) -> None:
        """Sets the value at index i.

        Args:
            i: The index to set the value for.
            value: The value to set.
        """
        if value == 0:
            # Remove zero values to maintain sparsity
            self.data_store.pop(i, None)
        else:
            self.data_store[i] = float(np.float32(value))

    def __getitem__(self, i: int) -> float:
        return self.data_store.get(i, 0.0)

    def __setitem__(self, i: int, value: float) -> None:
        self.set(i, value)

    def __contains__(self, i: int) -> bool:
        return i in self.data_store

    def __len__(self) -> int:
        """Returns the number of non-zero elements."""
        return len(self.data_store)

    def nnz(self) -> int:
        return len(self.data_store)

    def items(self) -> list[tuple[int, float]]:
        """Returns (index, value) pairs sorted by index."""
        return sorted(self.data_store.items())

    def clear(self) -> None:
        """Removes all elements from the vector."""
        self.data_store.clear()

    def to_array(self, size: Optional[int] = None) -> np.ndarray:
        """Densify into a float32 array. size defaults to one past the largest index."""
        if size is None:
            size = max(self.data_store.keys(), default=-1) + 1
        out = np.zeros(size, dtype=np.float32)
        for i, v in self.data_store.items():
            if i < size:
                out[i] = v
        return out

    def __repr__(self) -> str:
        """String representation of the vector."""
        if not self.data_store:
            return "SparseVector({})"
        items_str = ", ".join(f"{k}: {v}" for k, v in self.items())
        return f"SparseVector({{{items_str}}})"
