DEFAULT_SPARSITY = 0.05  # expected fill ratio used to size the hash table
MIN_INITIAL_CAPACITY = 16384
# upper bound on the slots preallocated from a sparsity hint
MAX_INITIAL_CAPACITY = 1 << 20

DEFAULT_LOAD_FACTOR = 0.7
DEFAULT_GROWTH_FACTOR = 2.0
MIN_TABLE_CAPACITY = 11

# indices are packed into the two halves of a signed 64-bit key
MAX_INDEX = 2**31 - 1


class SlotState:
    FREE = 0
    FULL = 1
    REMOVED = 2


class CooColumn:
    ROW = "row"
    COL = "col"
    VALUE = "value"
