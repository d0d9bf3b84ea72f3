"""
arena_lru.lru - Arena-backed LRU cache with optional TTL, dood!

This library provides a bounded in-process key/value cache built from three
layers, each usable on its own:

Core Components:
- Arena: Generational slot allocator handing out Index handles
- LinkedList: Doubly-linked list whose links are arena indices
- LruCache: Hash index + linked list with LRU eviction and lazy TTL sweeping

Example Usage:
    >>> from arena_lru.lru import LruCache, CacheMissError
    >>>
    >>> cache = LruCache[str, dict](capacity=1000, ttl=3600)
    >>> cache.insert("user:123", {"name": "Prinny", "level": 99})
    >>> userData = cache.query("user:123")
    >>> try:
    ...     cache.query("user:456")
    ... except CacheMissError:
    ...     print("Not cached, dood!")
"""

from .arena import Arena
from .cache import LruCache
from .errors import (
    ArenaCorruptedError,
    ArenaOutOfMemoryError,
    CacheBrokenError,
    CacheError,
    CacheMissError,
    CacheOutOfMemoryError,
    LinkBrokenError,
    ListEmptyError,
    ListError,
    ListOutOfMemoryError,
    LruError,
)
from .linked_list import LinkedList
from .types import CacheConfig, CacheItem, Clock, FreeSlot, Index, K, Node, OccupiedSlot, T, V

__version__ = "0.1.0"

__all__ = [
    # Core types
    "Index",
    "FreeSlot",
    "OccupiedSlot",
    "Node",
    "CacheItem",
    "CacheConfig",
    "Clock",
    "K",
    "V",
    "T",
    # Storage layers
    "Arena",
    "LinkedList",
    "LruCache",
    # Errors
    "LruError",
    "ArenaOutOfMemoryError",
    "ArenaCorruptedError",
    "ListError",
    "LinkBrokenError",
    "ListEmptyError",
    "ListOutOfMemoryError",
    "CacheError",
    "CacheMissError",
    "CacheBrokenError",
    "CacheOutOfMemoryError",
]
