import logging
import numpy as np
from typing import Iterator, Optional

from .constants import SlotState, MIN_TABLE_CAPACITY, DEFAULT_LOAD_FACTOR, DEFAULT_GROWTH_FACTOR
from .dok_errors import InvalidLoadFactorError, InvalidGrowthFactorError, ConcurrentModificationError

logger = logging.getLogger(__name__)

_KEY_MASK = 0xFFFFFFFFFFFFFFFF


def _is_prime(n: int) -> bool:
    if n < 2:
        return False
    if n % 2 == 0:
        return n == 2
    i = 3
    while i * i <= n:
        if n % i == 0:
            return False
        i += 2
    return True


def _least_prime_at_least(n: int) -> int:
    while not _is_prime(n):
        n += 1
    return n


def _hash(key: int) -> int:
    # splitmix64 finalizer, every key bit affects every output bit
    z = key & _KEY_MASK
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _KEY_MASK
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _KEY_MASK
    return z ^ (z >> 31)


class SparseHashTable:
    """
    Open-addressing hash table mapping 64-bit integer keys to float32 values.

    Slots live in three parallel numpy arrays (keys, values, slot states).
    Collisions are resolved by double hashing over a prime number of slots, and
    removals leave tombstones that are purged on the next rehash. Absent keys
    read as the configured default value.

    The slot-level methods (_find_slot, _get_at, _set_at, _remove_at) are
    intended for DoKMatrix only. Slot numbers are invalidated by any insert
    that triggers a rehash.
    """

    def __init__(self,
                 initial_capacity: int = MIN_TABLE_CAPACITY,
                 load_factor: float = DEFAULT_LOAD_FACTOR,
                 growth_factor: float = DEFAULT_GROWTH_FACTOR,
                 default_value: float = 0.0):
        """
        Args:
            initial_capacity: Minimum number of slots to allocate. Rounded up to a prime.
            load_factor: Fraction of non-free slots that triggers a rehash, in (0, 1).
            growth_factor: Multiplier applied to the slot count when growing, > 1.
            default_value: Value returned by get() for absent keys.
        """
        if not 0.0 < load_factor < 1.0:
            raise InvalidLoadFactorError(load_factor)
        if growth_factor <= 1.0:
            raise InvalidGrowthFactorError(growth_factor)
        self._load_factor = load_factor
        self._growth_factor = growth_factor
        self._default_value = float(np.float32(default_value))

        self._size = 0  # FULL slots
        self._removed = 0  # REMOVED slots (tombstones)
        self._mod_count = 0  # bumped on every structural change
        self._allocate(_least_prime_at_least(max(int(initial_capacity), MIN_TABLE_CAPACITY)))

    def _allocate(self, capacity: int) -> None:
        self._keys = np.zeros(capacity, dtype=np.int64)
        self._values = np.zeros(capacity, dtype=np.float32)
        self._states = np.full(capacity, SlotState.FREE, dtype=np.int8)
        # at least one slot must stay FREE so that probing terminates
        self._threshold = max(1, min(int(capacity * self._load_factor), capacity - 1))

    @property
    def default_return_value(self) -> float:
        return self._default_value

    @default_return_value.setter
    def default_return_value(self, value: float) -> None:
        self._default_value = float(np.float32(value))

    @property
    def capacity(self) -> int:
        """Number of slots currently allocated."""
        return len(self._states)

    def size(self) -> int:
        """Number of keys stored."""
        return self._size

    def __len__(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self._size == 0

    def _probe(self, key: int) -> Iterator[int]:
        """Yields the slot sequence visited when looking up key."""
        length = len(self._states)
        key_hash = _hash(key)
        idx = (key_hash >> 32) % length
        yield idx
        # length is prime, so any step in [1, length - 2] visits every slot
        decr = 1 + (key_hash & 0xFFFFFFFF) % (length - 2)
        while True:
            idx -= decr
            if idx < 0:
                idx += length
            yield idx

    def _find_slot(self, key: int) -> int:
        """Returns the slot holding key, or -1 if the key is absent."""
        states, keys = self._states, self._keys
        for idx in self._probe(key):
            state = states[idx]
            if state == SlotState.FREE:
                return -1
            if state == SlotState.FULL and keys[idx] == key:
                return idx

    def _find_insert_slot(self, key: int) -> tuple[int, bool]:
        """
        Returns (slot, found). If found is False the slot is where key should be
        inserted: the first tombstone on the probe path, otherwise the free slot
        that ended the probe.
        """
        states, keys = self._states, self._keys
        first_removed = -1
        for idx in self._probe(key):
            state = states[idx]
            if state == SlotState.FREE:
                return (first_removed if first_removed >= 0 else idx), False
            if state == SlotState.FULL:
                if keys[idx] == key:
                    return idx, True
            elif first_removed < 0:
                first_removed = idx

    def _get_at(self, slot: int) -> float:
        return float(self._values[slot])

    def _set_at(self, slot: int, value: float) -> float:
        """Overwrites the value in an occupied slot and returns the old value."""
        old = float(self._values[slot])
        self._values[slot] = value
        return old

    def _remove_at(self, slot: int) -> float:
        """Marks an occupied slot as removed and returns the value it held."""
        old = float(self._values[slot])
        self._states[slot] = SlotState.REMOVED
        self._values[slot] = 0.0
        self._size -= 1
        self._removed += 1
        self._mod_count += 1
        return old

    def contains_key(self, key: int) -> bool:
        return self._find_slot(key) >= 0

    def __contains__(self, key: int) -> bool:
        return self.contains_key(key)

    def get(self, key: int, default: Optional[float] = None) -> float:
        """Returns the value stored for key, or default (the table default if None) when absent."""
        slot = self._find_slot(key)
        if slot < 0:
            return self._default_value if default is None else default
        return float(self._values[slot])

    def put(self, key: int, value: float, default_if_absent: Optional[float] = None) -> float:
        """
        Inserts or overwrites the value for key.

        Args:
            key: The packed key.
            value: The value to store, narrowed to float32.
            default_if_absent: What to return when key was not present. Defaults to the
                table default value.

        Returns:
            The previous value for key, or default_if_absent if the key was new.
        """
        slot, found = self._find_insert_slot(key)
        if found:
            return self._set_at(slot, value)

        if self._states[slot] == SlotState.REMOVED:
            self._removed -= 1
        self._keys[slot] = key
        self._values[slot] = value
        self._states[slot] = SlotState.FULL
        self._size += 1
        self._mod_count += 1
        if self._size + self._removed > self._threshold:
            self._rehash()
        return self._default_value if default_if_absent is None else default_if_absent

    def remove(self, key: int) -> float:
        """Removes key and returns its value, or the table default if it was absent."""
        slot = self._find_slot(key)
        if slot < 0:
            return self._default_value
        return self._remove_at(slot)

    def clear(self) -> None:
        """Removes all entries, keeping the current capacity."""
        self._allocate(len(self._states))
        self._size = 0
        self._removed = 0
        self._mod_count += 1

    def _rehash(self) -> None:
        old_capacity = len(self._states)
        if self._size > self._threshold // 2:
            new_capacity = _least_prime_at_least(int(old_capacity * self._growth_factor))
        else:
            # mostly tombstones, purge them without growing
            new_capacity = old_capacity

        occupied = self._states == SlotState.FULL
        old_keys = self._keys[occupied].tolist()
        old_values = self._values[occupied].tolist()

        self._allocate(new_capacity)
        self._removed = 0
        for key, value in zip(old_keys, old_values):
            slot, _ = self._find_insert_slot(key)
            self._keys[slot] = key
            self._values[slot] = value
            self._states[slot] = SlotState.FULL
        self._mod_count += 1
        logger.debug(f"Rehashed table from {old_capacity} to {new_capacity} slots holding {self._size} entries")

    def entries(self) -> Iterator[tuple[int, float]]:
        """
        Iterates (key, value) pairs in slot order.

        Each call starts a fresh pass. Inserting a new key, removing a key or
        rehashing while the iterator is live causes its next step to raise
        ConcurrentModificationError. Overwriting values in place is allowed.
        """
        expected = self._mod_count
        keys, values = self._keys, self._values
        for slot in np.flatnonzero(self._states == SlotState.FULL).tolist():
            if self._mod_count != expected:
                raise ConcurrentModificationError()
            yield int(keys[slot]), float(values[slot])
        if self._mod_count != expected:
            raise ConcurrentModificationError()

    def __iter__(self) -> Iterator[tuple[int, float]]:
        return self.entries()

    def __repr__(self) -> str:
        return f"SparseHashTable(size={self._size}, capacity={len(self._states)}, default={self._default_value})"
