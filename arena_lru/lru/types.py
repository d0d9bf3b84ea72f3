"""
Core type definitions for arena_lru.lru, dood!

Arena slots are modelled as a tagged variant (FreeSlot / OccupiedSlot),
and every reference into the arena is an Index value carrying the slot
number together with the generation it was issued with.
"""

import sys
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, NotRequired, Optional, TypeVar, Union

if sys.version_info >= (3, 14):
    from typing import TypedDict
else:
    from typing_extensions import TypedDict

# Type variables for generic containers, dood!
K = TypeVar("K", bound=Hashable)  # Cache key type
V = TypeVar("V")  # Cache value type
T = TypeVar("T")  # Arena / list payload type

# Source of monotonic timestamps in seconds
Clock = Callable[[], float]


@dataclass(frozen=True)
class Index:
    """
    Generation-checked handle to a value stored in an Arena.

    Two indices are equal only if both the slot number and the generation
    match. An index becomes stale as soon as its slot is freed: the next
    occupant of the slot gets a strictly greater generation, so lookups
    with the old index are rejected.

    Attributes:
        slot: Position in the arena backing store
        generation: Arena generation at the moment of insertion
    """

    slot: int
    generation: int

    def __repr__(self) -> str:
        return f"Index({self.slot}@{self.generation})"


@dataclass
class FreeSlot:
    """Unused arena slot, linked into the free list through nextFree."""

    nextFree: Optional[int] = None


@dataclass
class OccupiedSlot(Generic[T]):
    """Arena slot holding a live value."""

    value: T
    generation: int


Slot = Union[FreeSlot, OccupiedSlot[T]]


@dataclass
class Node(Generic[T]):
    """
    Linked list node stored inside an arena slot.

    Attributes:
        value: Payload
        expireAt: Clock reading after which the node may be retired,
            None when the list has no TTL
        next: Index of the node closer to the tail
        prev: Index of the node closer to the head
    """

    value: T
    expireAt: Optional[float] = None
    next: Optional[Index] = None
    prev: Optional[Index] = None


@dataclass
class CacheItem(Generic[K, V]):
    """Key/value pair kept in the cache's linked list."""

    key: K
    value: V


class CacheConfig(TypedDict):
    """Configuration for an LruCache.

    Attributes:
        capacity: Maximum number of entries
        ttl: Entry lifetime, seconds or a duration string ("1500ms", "1m30s")
    """

    capacity: int
    ttl: NotRequired[float | str]
