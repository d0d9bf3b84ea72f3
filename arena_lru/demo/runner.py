"""
Walkthrough of the LruCache public operations, dood!

DemoRunner inserts a batch of keys in two rounds separated by a pause,
queries hits and misses, removes an entry, waits for the first round to
expire and shows how the next insert sweeps it. Every step prints one line.
"""

import logging
import time
from typing import Any, Callable, Optional

from arena_lru.lru import CacheError, LruCache
from arena_lru.utils import parseDuration

from .config.types import DemoConfig

logger = logging.getLogger(__name__)

DEFAULT_KEYS = 5


class DemoRunner:
    """Replays the demo scenario against a cache."""

    def __init__(
        self,
        cache: LruCache[int, int],
        keys: int = DEFAULT_KEYS,
        pause: Optional[float] = None,
        sleep: Callable[[float], Any] = time.sleep,
    ):
        """
        Initialize the runner.

        Args:
            cache: Cache to exercise
            keys: Number of keys inserted in the first two rounds
            pause: Seconds between rounds, defaults to half of the cache TTL
                (0 without TTL)
            sleep: Sleep function, replaced in tests
        """
        if keys < 1:
            raise ValueError("keys must be positive")
        if pause is None:
            pause = cache.ttl / 2 if cache.ttl is not None else 0.0

        self.cache = cache
        self.keys = keys
        self.pause = pause
        self._sleep = sleep

    @classmethod
    def fromConfig(
        cls, cache: LruCache[int, int], config: DemoConfig, sleep: Callable[[float], Any] = time.sleep
    ) -> "DemoRunner":
        rawPause = config.get("pause")
        pause: Optional[float] = None
        if isinstance(rawPause, str):
            pause = parseDuration(rawPause)
        elif rawPause is not None:
            pause = float(rawPause)
        return cls(cache, keys=int(config.get("keys", DEFAULT_KEYS)), pause=pause, sleep=sleep)

    def _insert(self, key: int, value: int) -> None:
        try:
            self.cache.insert(key, value)
        except CacheError as e:
            print(f"insert {key}: {e}")

    def _query(self, key: int) -> None:
        try:
            value = self.cache.query(key)
        except CacheError as e:
            print(f"get {key}: {e}")
            return
        print(f"get {key}: {value}")

    def _remove(self, key: int) -> None:
        try:
            value = self.cache.remove(key)
        except CacheError as e:
            print(f"remove {key}: {e}")
            return
        print(f"remove {key}: {value}")

    def _printLength(self) -> None:
        print(f"current length: {len(self.cache)}")

    def _wait(self) -> None:
        if self.pause > 0:
            logger.debug(f"Sleeping {self.pause:.3f}s, dood!")
            self._sleep(self.pause)

    def run(self) -> None:
        """Run the walkthrough."""
        logger.info(f"Running demo on {self.cache!r} with {self.keys} keys, dood!")
        firstRound = (self.keys + 1) // 2
        lastKey = self.keys

        # First round, inserted at t0
        for key in range(1, firstRound + 1):
            self._insert(key, key)
            self._query(key)
        self._wait()

        # Second round, inserted at t0 + pause
        for key in range(firstRound + 1, lastKey + 1):
            self._insert(key, key)
            self._query(key)
        self._printLength()

        self._query(lastKey + 1)

        self._remove(lastKey)
        self._query(lastKey)

        # First round is now past its TTL but nothing has swept it yet
        self._wait()
        self._printLength()

        # Inserting key 1 again sweeps the expired first round first
        self._insert(1, 10)
        self._printLength()

        for key in range(lastKey - 1, 0, -1):
            self._query(key)

        stats = self.cache.getStats()
        logger.info(f"Demo finished, stats: {stats}")

