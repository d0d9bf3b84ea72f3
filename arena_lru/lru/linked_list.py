"""
Arena-backed doubly-linked list for arena_lru.lru, dood!

Nodes live inside an Arena and link to each other by Index, never by
object reference. Every traversal goes through the arena's
generation-checked accessors, so a stale link shows up as
LinkBrokenError instead of silently reaching the wrong node.
"""

import logging
import time
from typing import Generic, Iterator, List, Optional

from .arena import Arena
from .errors import ArenaCorruptedError, ArenaOutOfMemoryError, LinkBrokenError, ListEmptyError, ListOutOfMemoryError
from .types import Clock, Index, Node, T

logger = logging.getLogger(__name__)


class LinkedList(Generic[T]):
    """
    Doubly-linked list with LRU-friendly operations, dood!

    Supports push/pop at both ends, O(1) removal by index,
    move-to-front and, when a TTL is configured, bulk retirement of
    expired nodes from the tail.

    Capacity is the arena capacity: ``isFull()`` is ``len == arena.cap``.

    Example:
        >>> lst = LinkedList[int](capacity=3)
        >>> first = lst.pushBack(1)
        >>> second = lst.pushBack(2)
        >>> second = lst.repositionToHead(second)  # old index is now invalid
        >>> list(lst)
        [2, 1]
    """

    def __init__(self, capacity: int = 0, ttl: Optional[float] = None, clock: Clock = time.monotonic):
        """
        Initialize the list.

        Args:
            capacity: Number of arena slots to reserve
            ttl: Node lifetime in seconds, None disables expiry
            clock: Monotonic time source in seconds

        Raises:
            ValueError: If ttl is not positive
        """
        if ttl is not None and ttl <= 0:
            raise ValueError("ttl must be positive")

        self._arena: Arena[Node[T]] = Arena(capacity)
        self._head: Optional[Index] = None
        self._tail: Optional[Index] = None
        self._len = 0
        self._ttl = ttl
        self._clock = clock

    def reserve(self, count: int) -> None:
        """Grow the underlying arena by ``count`` slots."""
        self._arena.reserve(count)

    def _newNode(self, value: T, next: Optional[Index], prev: Optional[Index]) -> Index:
        node = Node(value=value, next=next, prev=prev)
        if self._ttl is not None:
            node.expireAt = self._clock() + self._ttl

        try:
            return self._arena.insert(node)
        except ArenaOutOfMemoryError as e:
            raise ListOutOfMemoryError() from e
        except ArenaCorruptedError as e:
            raise LinkBrokenError() from e

    def pushFront(self, value: T) -> Index:
        """
        Insert a value at the head.

        Returns:
            Index: Handle of the new node

        Raises:
            ListOutOfMemoryError: If the arena has no free slot
            LinkBrokenError: If the arena free list is corrupted
        """
        index = self._newNode(value, next=self._head, prev=None)

        if self._head is not None:
            self.getNode(self._head).prev = index
        else:
            self._tail = index

        self._head = index
        self._len += 1
        return index

    def pushBack(self, value: T) -> Index:
        """
        Insert a value at the tail.

        Returns:
            Index: Handle of the new node

        Raises:
            ListOutOfMemoryError: If the arena has no free slot
            LinkBrokenError: If the arena free list is corrupted
        """
        index = self._newNode(value, next=None, prev=self._tail)

        if self._tail is not None:
            self.getNode(self._tail).next = index
        else:
            self._head = index

        self._tail = index
        self._len += 1
        return index

    def remove(self, index: Index) -> T:
        """
        Unlink the node at ``index`` and return its value.

        Raises:
            ListEmptyError: If the list is empty
            LinkBrokenError: If the index is stale or invalid
        """
        if self.isEmpty():
            raise ListEmptyError()

        node = self._arena.remove(index)
        if node is None:
            raise LinkBrokenError()

        prevIndex, nextIndex = node.prev, node.next
        match (prevIndex, nextIndex):
            case (None, None):
                # Sole node
                self._head = None
                self._tail = None
            case (None, _):
                self.getNode(nextIndex).prev = None
                self._head = nextIndex
            case (_, None):
                self.getNode(prevIndex).next = None
                self._tail = prevIndex
            case _:
                self.getNode(prevIndex).next = nextIndex
                self.getNode(nextIndex).prev = prevIndex

        self._len -= 1
        return node.value

    def popFront(self) -> T:
        """Remove and return the head value, ListEmptyError when empty."""
        if self._head is None:
            raise ListEmptyError()
        return self.remove(self._head)

    def popBack(self) -> T:
        """Remove and return the tail value, ListEmptyError when empty."""
        if self._tail is None:
            raise ListEmptyError()
        return self.remove(self._tail)

    def repositionToHead(self, index: Index) -> Index:
        """
        Move the node at ``index`` to the head.

        The node is removed and its value pushed again, so the supplied
        index becomes invalid and a new one is returned. Callers holding
        a copy of the old index must replace it. With a TTL the moved node
        gets a fresh expiration time.

        Returns:
            Index: New handle of the moved node

        Raises:
            ListEmptyError: If the list is empty
            LinkBrokenError: If the index is stale or invalid
        """
        value = self.remove(index)
        return self.pushFront(value)

    def retire(self) -> Optional[List[T]]:
        """
        Remove expired nodes from the tail.

        Walks from the tail while ``clock() >= expireAt`` and stops at the
        first live node. Does nothing when no TTL is configured.

        Returns:
            Optional[List[T]]: Values of the retired nodes, tail first,
                or None if nothing expired
        """
        if self._ttl is None:
            return None

        now = self._clock()
        retired: List[T] = []
        while self._tail is not None:
            tailIndex = self._tail
            expireAt = self.getNode(tailIndex).expireAt
            if expireAt is None or now < expireAt:
                break
            retired.append(self.remove(tailIndex))

        if not retired:
            return None

        logger.debug(f"Retired {len(retired)} expired nodes, {self._len} left")
        return retired

    def peekFront(self) -> T:
        """Value at the head without removing it."""
        if self._head is None:
            raise ListEmptyError()
        return self.getNode(self._head).value

    def peekBack(self) -> T:
        """Value at the tail without removing it."""
        if self._tail is None:
            raise ListEmptyError()
        return self.getNode(self._tail).value

    def getNode(self, index: Index) -> Node[T]:
        """
        Resolve an index to its node.

        Raises:
            LinkBrokenError: If the index is stale or invalid
        """
        node = self._arena.get(index)
        if node is None:
            raise LinkBrokenError()
        return node

    def get(self, index: Index) -> T:
        """Resolve an index to its value, LinkBrokenError if stale."""
        return self.getNode(index).value

    def indices(self) -> Iterator[Index]:
        """Yield node indices from head to tail."""
        current = self._head
        while current is not None:
            node = self.getNode(current)
            yield current
            current = node.next

    def values(self) -> Iterator[T]:
        """Yield values from head to tail."""
        for index in self.indices():
            yield self.getNode(index).value

    def __iter__(self) -> Iterator[T]:
        return self.values()

    def __len__(self) -> int:
        return self._len

    def isEmpty(self) -> bool:
        return self._head is None

    def isFull(self) -> bool:
        return self._len == self._arena.cap

    @property
    def head(self) -> Optional[Index]:
        return self._head

    @property
    def tail(self) -> Optional[Index]:
        return self._tail

    @property
    def ttl(self) -> Optional[float]:
        return self._ttl

    @property
    def capacity(self) -> int:
        return self._arena.cap

    def __repr__(self) -> str:
        return f"LinkedList(len={self._len}, capacity={self._arena.cap}, ttl={self._ttl})"
