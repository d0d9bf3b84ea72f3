"""
Error hierarchy for arena_lru.lru.

Errors are layered the same way the storage is: the arena raises
ArenaOutOfMemoryError, the linked list wraps it (and reports its own
broken-link and empty-list conditions), and the cache wraps list errors.
Every wrapping is done with ``raise ... from``, so ``__cause__`` always
leads back to the innermost failure.
"""

from typing import Any


class LruError(Exception):
    """Base class for every error raised by arena_lru.lru."""

    message: str = "LRU error."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class ArenaOutOfMemoryError(LruError):
    """The arena has no free slot left."""

    message = "Arena out of memory."


class ArenaCorruptedError(LruError):
    """The free list points at a slot that is not free, always a bug."""

    message = "Arena free list points at an occupied slot."


class ListError(LruError):
    """Base class for linked list errors."""

    message = "List error."


class LinkBrokenError(ListError):
    """An index no longer resolves to a live arena entry (stale or invalid)."""

    message = "Link does not point to a valid location."


class ListEmptyError(ListError):
    """Removal or peek on an empty list."""

    message = "List is empty."


class ListOutOfMemoryError(ListError):
    """The arena backing the list is exhausted."""

    message = f"List out of memory: {ArenaOutOfMemoryError.message}"


class CacheError(LruError):
    """Base class for cache errors."""

    message = "Cache error."


class CacheMissError(CacheError, KeyError):
    """Requested key is not in the cache."""

    def __init__(self, key: Any):
        self.key = key
        super().__init__(f"Cache miss: {key!r}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the whole message
        return str(self.args[0])


class CacheBrokenError(CacheError):
    """Hash index and linked list went out of sync, always a bug."""

    message = "Cache is broken: index and list are out of sync."


class CacheOutOfMemoryError(CacheError):
    """There is no storage at all to put a new entry into."""

    message = "Cache out of memory."
