"""
Generational slot allocator for arena_lru.lru, dood!

The Arena owns all node storage. Values are reachable only through
Index handles; a handle whose slot was freed (and possibly reused) is
detected by its generation and treated as "not found".
"""

import logging
from typing import Generic, List, Optional

from .errors import ArenaCorruptedError, ArenaOutOfMemoryError
from .types import FreeSlot, Index, OccupiedSlot, Slot, T

logger = logging.getLogger(__name__)


class Arena(Generic[T]):
    """
    Append-only slot store with a LIFO free list, dood!

    The backing store only grows: ``reserve(n)`` appends ``n`` free slots
    and existing slots are never moved, so indices stay valid across growth.
    Free slots form an intrusive singly-linked chain through
    ``FreeSlot.nextFree`` starting at ``_freeListHead``.

    The generation counter is global: every successful insert anywhere in
    the arena gets a generation never issued before.

    Example:
        >>> arena = Arena[str](capacity=2)
        >>> idx = arena.insert("a")
        >>> arena.get(idx)
        'a'
        >>> arena.remove(idx)
        'a'
        >>> arena.get(idx) is None
        True
    """

    def __init__(self, capacity: int = 0):
        """
        Initialize the arena.

        Args:
            capacity: Number of slots to reserve right away
        """
        self._items: List[Slot[T]] = []
        self._cap = 0
        self._generation = 0
        self._freeListHead: Optional[int] = None
        self._used = 0

        if capacity:
            self.reserve(capacity)

    @classmethod
    def withCapacity(cls, capacity: int) -> "Arena[T]":
        """Create an arena with ``capacity`` slots reserved."""
        return cls(capacity=capacity)

    def reserve(self, count: int) -> None:
        """
        Grow the backing store by exactly ``count`` free slots.

        New slots are chained start -> start+1 -> ... -> end-1 -> old head
        and become the head of the free list, so freshly reserved capacity is
        handed out before older free slots.

        Args:
            count: Number of slots to add

        Raises:
            ValueError: If count is negative
        """
        if count < 0:
            raise ValueError("count must be non-negative")
        if count == 0:
            return

        start = len(self._items)
        end = start + count
        oldHead = self._freeListHead

        self._items.extend(FreeSlot(nextFree=i + 1) for i in range(start, end - 1))
        self._items.append(FreeSlot(nextFree=oldHead))

        self._freeListHead = start
        self._cap += count
        logger.debug(f"Arena grew by {count} slots, capacity is now {self._cap}")

    def insert(self, value: T) -> Index:
        """
        Store a value in the first free slot.

        Args:
            value: Value to store

        Returns:
            Index: Handle carrying the generation at the time of insertion

        Raises:
            ArenaOutOfMemoryError: If there is no free slot
            ArenaCorruptedError: If the free list head is not a free slot
        """
        slotNo = self._freeListHead
        if slotNo is None:
            raise ArenaOutOfMemoryError()

        slot = self._items[slotNo]
        if not isinstance(slot, FreeSlot):
            logger.warning(f"Free list head {slotNo} is occupied")
            raise ArenaCorruptedError()

        self._freeListHead = slot.nextFree
        generation = self._generation
        self._items[slotNo] = OccupiedSlot(value=value, generation=generation)
        self._generation += 1
        self._used += 1

        return Index(slot=slotNo, generation=generation)

    def _occupied(self, index: Index) -> Optional[OccupiedSlot[T]]:
        if not 0 <= index.slot < len(self._items):
            return None
        slot = self._items[index.slot]
        if isinstance(slot, OccupiedSlot) and slot.generation == index.generation:
            return slot
        return None

    def get(self, index: Index) -> Optional[T]:
        """
        Resolve an index to its value.

        Returns:
            Optional[T]: The stored value, or None if the slot is out of range,
                free, or holds a different generation
        """
        slot = self._occupied(index)
        return slot.value if slot is not None else None

    def set(self, index: Index, value: T) -> bool:
        """
        Overwrite the value behind an index, keeping its generation.

        Returns:
            bool: True if the index was live and the value was replaced
        """
        slot = self._occupied(index)
        if slot is None:
            return False
        slot.value = value
        return True

    def remove(self, index: Index) -> Optional[T]:
        """
        Free the slot behind an index and hand its value back.

        The freed slot is pushed to the head of the free list. On a
        generation mismatch nothing changes.

        Returns:
            Optional[T]: The removed value, or None if the index is stale
        """
        slot = self._occupied(index)
        if slot is None:
            return None

        self._items[index.slot] = FreeSlot(nextFree=self._freeListHead)
        self._freeListHead = index.slot
        self._used -= 1
        return slot.value

    def contains(self, index: Index) -> bool:
        """Check whether an index still resolves to a live value."""
        return self._occupied(index) is not None

    def __contains__(self, index: object) -> bool:
        return isinstance(index, Index) and self.contains(index)

    def __len__(self) -> int:
        return self._used

    @property
    def cap(self) -> int:
        """Total number of slots ever reserved."""
        return self._cap

    @property
    def generation(self) -> int:
        """Generation the next insert will receive."""
        return self._generation

    def freeSlots(self) -> List[int]:
        """Slot numbers on the free list, head first."""
        result: List[int] = []
        current = self._freeListHead
        while current is not None:
            result.append(current)
            slot = self._items[current]
            if not isinstance(slot, FreeSlot):
                break
            current = slot.nextFree
        return result

    def __repr__(self) -> str:
        return f"Arena(used={self._used}, cap={self._cap}, generation={self._generation})"
