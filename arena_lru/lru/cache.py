"""
LRU cache with optional TTL for arena_lru.lru, dood!

LruCache keeps a hash index (key -> Index) and an arena-backed
LinkedList ordered by recency in lock-step. Any operation that moves a
node updates the index entry with the node's new Index; if the two ever
disagree the cache raises CacheBrokenError instead of guessing.
"""

import logging
import time
from typing import Any, Dict, Generic, Iterator, Optional, Tuple

from ..utils import parseDuration
from .errors import (
    CacheBrokenError,
    CacheMissError,
    CacheOutOfMemoryError,
    ListError,
    ListOutOfMemoryError,
)
from .linked_list import LinkedList
from .types import CacheConfig, CacheItem, Clock, Index, K, V

logger = logging.getLogger(__name__)


class LruCache(Generic[K, V]):
    """
    Fixed-capacity key/value cache with LRU eviction and lazy TTL expiry, dood!

    Every ``insert`` first sweeps expired entries from the tail, then either
    refreshes an existing key or evicts the least-recently-used entry when
    the cache is full. ``query`` moves the entry to the front.

    Expired entries stay visible to ``query`` until a sweep runs (on the next
    ``insert`` or an explicit ``retire()``).

    Not thread-safe: wrap every public call in a lock if the cache is shared.

    Example:
        >>> cache = LruCache[int, str](capacity=2)
        >>> cache.insert(1, "one")
        >>> cache.insert(2, "two")
        >>> cache.query(1)
        'one'
        >>> cache.insert(3, "three")  # evicts 2
        >>> 2 in cache
        False
    """

    def __init__(self, capacity: int, ttl: Optional[float] = None, clock: Clock = time.monotonic):
        """
        Initialize the cache.

        Args:
            capacity: Maximum number of entries, may be 0
            ttl: Entry lifetime in seconds, None disables expiry
            clock: Monotonic time source in seconds

        Raises:
            ValueError: If capacity is negative or ttl is not positive
        """
        if capacity < 0:
            raise ValueError("capacity must be non-negative")

        self._list: LinkedList[CacheItem[K, V]] = LinkedList(capacity=capacity, ttl=ttl, clock=clock)
        self._index: Dict[K, Index] = {}
        self._clock = clock

        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0

    @classmethod
    def fromConfig(cls, config: CacheConfig, clock: Clock = time.monotonic) -> "LruCache[K, V]":
        """
        Build a cache from a ``[cache]`` configuration table.

        Args:
            config: Mapping with ``capacity`` and optional ``ttl``
                (seconds or a duration string such as "1500ms" or "1m30s")
            clock: Monotonic time source in seconds

        Returns:
            LruCache: Configured cache
        """
        capacity = int(config.get("capacity", 0))
        rawTtl = config.get("ttl")
        ttl: Optional[float] = None
        if isinstance(rawTtl, str):
            ttl = parseDuration(rawTtl)
        elif rawTtl is not None:
            ttl = float(rawTtl)
        return cls(capacity=capacity, ttl=ttl, clock=clock)

    def _reposition(self, index: Index) -> Index:
        try:
            return self._list.repositionToHead(index)
        except ListError as e:
            logger.warning(f"Failed to reposition {index}: {e}")
            raise CacheBrokenError() from e

    def _item(self, index: Index) -> CacheItem[K, V]:
        try:
            return self._list.get(index)
        except ListError as e:
            logger.warning(f"Index {index} does not resolve: {e}")
            raise CacheBrokenError() from e

    def query(self, key: K) -> V:
        """
        Get a value and mark it most-recently-used.

        Args:
            key: Key to look up

        Returns:
            V: Cached value

        Raises:
            CacheMissError: If the key is not cached
            CacheBrokenError: If the index points at a dead node
        """
        index = self._index.get(key)
        if index is None:
            self._misses += 1
            raise CacheMissError(key)

        newIndex = self._reposition(index)
        self._index[key] = newIndex
        self._hits += 1
        return self._item(newIndex).value

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        """Like ``query`` but returns ``default`` on a miss."""
        try:
            return self.query(key)
        except CacheMissError:
            return default

    def peek(self, key: K) -> V:
        """Get a value without changing its recency."""
        index = self._index.get(key)
        if index is None:
            raise CacheMissError(key)
        return self._item(index).value

    def insert(self, key: K, value: V) -> None:
        """
        Store a value, evicting the least-recently-used entry if needed.

        Expired entries are swept first, so only live entries count against
        the capacity. Overwriting an existing key moves it to the front and
        never evicts.

        Raises:
            CacheOutOfMemoryError: If the cache has zero capacity
            CacheBrokenError: If the index and the list are out of sync
        """
        self.retire()

        index = self._index.get(key)
        if index is not None:
            newIndex = self._reposition(index)
            self._index[key] = newIndex
            self._item(newIndex).value = value
            return

        if self._list.isFull() and not self._list.isEmpty():
            self._evict()

        try:
            newIndex = self._list.pushFront(CacheItem(key=key, value=value))
        except ListOutOfMemoryError as e:
            raise CacheOutOfMemoryError() from e
        except ListError as e:
            raise CacheBrokenError() from e
        self._index[key] = newIndex

    def _evict(self) -> None:
        try:
            item = self._list.popBack()
        except ListError as e:
            raise CacheBrokenError() from e

        if self._index.pop(item.key, None) is None:
            logger.warning(f"Evicted key {item.key!r} was not in the index")
            raise CacheBrokenError()

        self._evictions += 1
        logger.debug(f"Evicted least-recently-used key {item.key!r}, dood!")

    def remove(self, key: K) -> V:
        """
        Remove an entry and return its value.

        Raises:
            CacheMissError: If the key is not cached
            CacheBrokenError: If the index points at a dead node
        """
        index = self._index.get(key)
        if index is None:
            raise CacheMissError(key)

        try:
            item = self._list.remove(index)
        except ListError as e:
            logger.warning(f"Failed to remove {key!r} at {index}: {e}")
            raise CacheBrokenError() from e

        del self._index[key]
        return item.value

    def retire(self) -> int:
        """
        Sweep expired entries from the least-recently-used end.

        Returns:
            int: Number of entries removed

        Raises:
            CacheBrokenError: If a retired key was missing from the index
        """
        try:
            retired = self._list.retire()
        except ListError as e:
            raise CacheBrokenError() from e

        if retired is None:
            return 0

        for item in retired:
            if self._index.pop(item.key, None) is None:
                logger.warning(f"Retired key {item.key!r} was not in the index")
                raise CacheBrokenError()

        self._expirations += len(retired)
        logger.debug(f"Swept {len(retired)} expired entries, dood!")
        return len(retired)

    def reserve(self, count: int) -> None:
        """Grow the capacity by ``count`` entries."""
        self._list.reserve(count)

    def clear(self) -> None:
        """Drop every entry, keeping capacity and TTL."""
        self._list = LinkedList(capacity=self._list.capacity, ttl=self._list.ttl, clock=self._clock)
        self._index.clear()

    def keys(self) -> Iterator[K]:
        """Keys from most- to least-recently-used."""
        for item in self._list.values():
            yield item.key

    def items(self) -> Iterator[Tuple[K, V]]:
        """(key, value) pairs from most- to least-recently-used."""
        for item in self._list.values():
            yield item.key, item.value

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __len__(self) -> int:
        return len(self._list)

    @property
    def capacity(self) -> int:
        return self._list.capacity

    @property
    def ttl(self) -> Optional[float]:
        return self._list.ttl

    def getStats(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dict[str, Any]: entries, capacity, ttl, hits, misses,
                evictions and expirations
        """
        return {
            "entries": len(self._list),
            "capacity": self._list.capacity,
            "ttl": self._list.ttl,
            "hits": self._hits,
            "misses": self._misses,
            "evictions": self._evictions,
            "expirations": self._expirations,
        }

    def __repr__(self) -> str:
        return f"LruCache(len={len(self)}, capacity={self.capacity}, ttl={self.ttl})"
