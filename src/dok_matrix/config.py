from dataclasses import dataclass

from .constants import MIN_INITIAL_CAPACITY, DEFAULT_LOAD_FACTOR, DEFAULT_GROWTH_FACTOR
from .dok_errors import InvalidLoadFactorError, InvalidGrowthFactorError, DoKArgumentError


@dataclass
class DoKConfig:
    """
    Configuration for the hash table backing a DoKMatrix.

    These parameters only affect memory use and speed, never the contents
    of the matrix.
    """

    min_initial_capacity: int = MIN_INITIAL_CAPACITY
    """Lower bound on the number of slots allocated up front, regardless of the sparsity hint."""

    load_factor: float = DEFAULT_LOAD_FACTOR
    """Fraction of occupied (including removed) slots that triggers a rehash."""

    growth_factor: float = DEFAULT_GROWTH_FACTOR
    """Multiplier applied to the slot count when the table grows."""

    def validate(self) -> None:
        """Validate configuration parameters."""
        if self.min_initial_capacity < 0:
            raise DoKArgumentError(f"min_initial_capacity must be non-negative, got {self.min_initial_capacity}")
        if not 0.0 < self.load_factor < 1.0:
            raise InvalidLoadFactorError(self.load_factor)
        if self.growth_factor <= 1.0:
            raise InvalidGrowthFactorError(self.growth_factor)
