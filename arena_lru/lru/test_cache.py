"""
Comprehensive tests for LruCache, dood!

This test suite validates:
- Basic operations (insert, query, remove)
- LRU eviction order
- TTL expiry and lazy sweeping
- Zero capacity behaviour
- Error wrapping
- Statistics
"""

import time

import pytest

from .cache import LruCache
from .errors import (
    ArenaCorruptedError,
    ArenaOutOfMemoryError,
    CacheBrokenError,
    CacheMissError,
    CacheOutOfMemoryError,
    LinkBrokenError,
    ListOutOfMemoryError,
)


class TestLruCacheBasic:
    """Test basic cache operations, dood!"""

    def test_cache_initialization(self):
        """Cache starts empty with the requested capacity, dood!"""
        cache = LruCache[int, int](capacity=3)

        assert len(cache) == 0
        assert cache.capacity == 3
        assert cache.ttl is None

    def test_negative_capacity_rejected(self):
        """Capacity must be non-negative, dood!"""
        with pytest.raises(ValueError):
            LruCache[int, int](capacity=-1)

    def test_query_on_fresh_cache_misses(self):
        """Querying right after construction is a miss, dood!"""
        cache = LruCache[int, int](capacity=5)

        with pytest.raises(CacheMissError) as excInfo:
            cache.query(0)

        assert excInfo.value.key == 0
        assert str(excInfo.value) == "Cache miss: 0"

    def test_miss_is_also_key_error(self):
        """Callers can catch a miss as KeyError, dood!"""
        cache = LruCache[str, str](capacity=1)

        with pytest.raises(KeyError):
            cache.query("absent")

    def test_insert_and_query(self):
        """Inserted values are returned by query, dood!"""
        cache = LruCache[int, int](capacity=5)
        for key in range(5):
            cache.insert(key, key)

        for key in range(5):
            assert cache.query(key) == key
        assert len(cache) == 5

    def test_insert_existing_key_overwrites(self):
        """Re-inserting a key replaces the value without eviction, dood!"""
        cache = LruCache[int, str](capacity=2)
        cache.insert(1, "a")
        cache.insert(2, "b")

        cache.insert(1, "c")

        assert len(cache) == 2
        assert cache.query(1) == "c"
        assert cache.query(2) == "b"
        assert cache.getStats()["evictions"] == 0

    def test_remove(self):
        """remove returns the value and makes the key miss, dood!"""
        cache = LruCache[int, int](capacity=5)
        for key in range(5):
            cache.insert(key, key)

        assert cache.remove(2) == 2
        assert len(cache) == 4

        with pytest.raises(CacheMissError):
            cache.query(2)
        with pytest.raises(CacheMissError):
            cache.remove(2)

    def test_removed_slot_is_reused(self):
        """Removing frees room for a new key without eviction, dood!"""
        cache = LruCache[int, int](capacity=2)
        cache.insert(1, 1)
        cache.insert(2, 2)
        cache.remove(1)

        cache.insert(3, 3)

        assert sorted(cache.keys()) == [2, 3]
        assert cache.getStats()["evictions"] == 0

    def test_get_returns_default_on_miss(self):
        """get never raises on a miss, dood!"""
        cache = LruCache[str, int](capacity=1)
        cache.insert("a", 1)

        assert cache.get("a") == 1
        assert cache.get("b") is None
        assert cache.get("b", -1) == -1

    def test_peek_does_not_touch_recency(self):
        """peek leaves the LRU order alone, dood!"""
        cache = LruCache[int, int](capacity=2)
        cache.insert(1, 1)
        cache.insert(2, 2)

        assert cache.peek(1) == 1
        cache.insert(3, 3)

        # 1 was only peeked, so it was still least-recently-used
        assert 1 not in cache
        assert 2 in cache
        with pytest.raises(CacheMissError):
            cache.peek(1)

    def test_keys_and_items_most_recent_first(self):
        """Iteration goes from most- to least-recently-used, dood!"""
        cache = LruCache[str, int](capacity=3)
        cache.insert("a", 1)
        cache.insert("b", 2)
        cache.insert("c", 3)
        cache.query("a")

        assert list(cache.keys()) == ["a", "c", "b"]
        assert list(cache.items()) == [("a", 1), ("c", 3), ("b", 2)]

    def test_clear(self):
        """clear empties the cache but keeps its capacity, dood!"""
        cache = LruCache[int, int](capacity=2)
        cache.insert(1, 1)
        cache.insert(2, 2)

        cache.clear()

        assert len(cache) == 0
        assert cache.capacity == 2
        assert 1 not in cache
        cache.insert(3, 3)
        assert cache.query(3) == 3

    def test_reserve_grows_capacity(self):
        """reserve lets more entries in before eviction starts, dood!"""
        cache = LruCache[int, int](capacity=1)
        cache.insert(1, 1)
        cache.reserve(1)

        cache.insert(2, 2)

        assert cache.capacity == 2
        assert sorted(cache.keys()) == [1, 2]


class TestLruCacheEviction:
    """Test least-recently-used eviction, dood!"""

    def test_capacity_two_scenario(self):
        """insert 1, 2; query 1; insert 3 evicts 2, dood!"""
        cache = LruCache[int, int](capacity=2)
        cache.insert(1, 1)
        cache.insert(2, 2)
        assert cache.query(1) == 1

        cache.insert(3, 3)

        with pytest.raises(CacheMissError):
            cache.query(2)
        assert cache.query(1) == 1
        assert cache.query(3) == 3

    def test_overwrite_refreshes_recency(self):
        """Overwritten key moves to the front, dood!"""
        cache = LruCache[int, int](capacity=2)
        cache.insert(1, 1)
        cache.insert(2, 2)
        cache.query(1)
        cache.insert(3, 3)

        # [3, 1] -> overwrite 1 -> [1, 3] -> insert 4 evicts 3
        cache.insert(1, -1)
        assert cache.query(1) == -1
        cache.insert(4, 4)

        with pytest.raises(CacheMissError):
            cache.query(3)
        assert cache.query(4) == 4

    def test_eviction_removes_least_recently_inserted(self):
        """Without touches the oldest insert goes first, dood!"""
        capacity = 5
        cache = LruCache[int, int](capacity=capacity)
        for key in range(capacity):
            cache.insert(key, key)
        for key in range(capacity):
            assert cache.query(key) == key

        cache.insert(capacity, capacity)

        assert cache.query(capacity) == capacity
        with pytest.raises(CacheMissError):
            cache.query(0)
        assert len(cache) == capacity

    def test_touched_key_survives_eviction(self):
        """Touched keys outlive untouched newer ones, dood!"""
        cache = LruCache[str, int](capacity=3)
        cache.insert("a", 1)
        cache.insert("b", 2)
        cache.insert("c", 3)
        cache.query("a")

        cache.insert("d", 4)
        cache.insert("e", 5)

        assert "a" in cache
        assert "b" not in cache
        assert "c" not in cache

    def test_capacity_one(self):
        """A single slot always holds the latest key, dood!"""
        cache = LruCache[int, int](capacity=1)
        for key in range(10):
            cache.insert(key, key * 10)
            assert len(cache) == 1
            assert cache.query(key) == key * 10

        assert cache.getStats()["evictions"] == 9


class TestLruCacheZeroCapacity:
    """Test a cache with no storage at all, dood!"""

    def test_insert_raises_out_of_memory(self):
        """Zero capacity cannot store anything, dood!"""
        cache = LruCache[int, int](capacity=0)

        with pytest.raises(CacheOutOfMemoryError) as excInfo:
            cache.insert(0, 0)

        listError = excInfo.value.__cause__
        assert isinstance(listError, ListOutOfMemoryError)
        assert isinstance(listError.__cause__, ArenaOutOfMemoryError)
        assert len(cache) == 0
        assert 0 not in cache

    def test_query_misses(self):
        """Zero capacity still answers misses normally, dood!"""
        cache = LruCache[int, int](capacity=0)

        with pytest.raises(CacheMissError):
            cache.query(0)


class TestLruCacheTTL:
    """Test TTL expiry with a fake clock, dood!"""

    def test_entry_visible_until_sweep(self, fakeClock):
        """Expired entry stays queryable until something sweeps, dood!"""
        cache = LruCache[str, int](capacity=5, ttl=1.0, clock=fakeClock)
        cache.insert("a", 1)

        fakeClock.advance(0.999)
        assert cache.peek("a") == 1

        fakeClock.advance(0.001)
        # Lazy expiry: nothing has swept yet
        assert cache.peek("a") == 1

        assert cache.retire() == 1
        with pytest.raises(CacheMissError):
            cache.query("a")

    def test_insert_sweeps_expired_entries(self, fakeClock):
        """Any insert runs the sweep first, dood!"""
        cache = LruCache[int, int](capacity=5, ttl=1.0, clock=fakeClock)
        cache.insert(1, 1)
        cache.insert(2, 2)

        fakeClock.advance(1.0)
        cache.insert(3, 3)

        assert list(cache.keys()) == [3]
        assert cache.getStats()["expirations"] == 2

    def test_ttl_scenario_with_refresh(self, fakeClock):
        """Only the entry touched after expiry survives a sweep, dood!"""
        cache = LruCache[int, int](capacity=5, ttl=1.0, clock=fakeClock)
        for key in range(1, 6):
            cache.insert(key, key)

        fakeClock.advance(1.001)
        assert cache.query(1) == 1
        assert len(cache) == 5

        assert cache.retire() == 4
        assert list(cache.keys()) == [1]

    def test_sweep_on_insert_walkthrough(self, fakeClock):
        """Sweep on insert only drops the expired tail, dood!"""
        cache = LruCache[int, int](capacity=5, ttl=1.0, clock=fakeClock)

        cache.insert(1, 1)
        assert cache.query(1) == 1
        cache.insert(2, 2)
        cache.insert(3, 3)

        fakeClock.advance(0.5)
        assert len(cache) == 3

        cache.insert(4, 4)
        cache.insert(5, 5)
        assert len(cache) == 5

        fakeClock.advance(0.5)
        assert len(cache) == 5

        # [1 5 4 3 2]
        assert cache.query(1) == 1
        # Sweep drops 2 and 3, then [6 1 5 4]
        cache.insert(6, 6)

        assert len(cache) == 4
        with pytest.raises(CacheMissError):
            cache.query(2)
        with pytest.raises(CacheMissError):
            cache.query(3)

    def test_overwrite_sets_fresh_expiry(self, fakeClock):
        """Overwriting an entry restarts its lifetime, dood!"""
        cache = LruCache[str, str](capacity=2, ttl=1.0, clock=fakeClock)
        cache.insert("a", "old")

        fakeClock.advance(0.9)
        cache.insert("a", "new")
        fakeClock.advance(0.9)

        assert cache.retire() == 0
        assert cache.query("a") == "new"

    def test_sweep_makes_room_before_eviction(self, fakeClock):
        """Expired entries are dropped instead of evicting live ones, dood!"""
        cache = LruCache[int, int](capacity=2, ttl=1.0, clock=fakeClock)
        cache.insert(1, 1)
        fakeClock.advance(0.5)
        cache.insert(2, 2)
        fakeClock.advance(0.5)

        cache.insert(3, 3)

        assert sorted(cache.keys()) == [2, 3]
        stats = cache.getStats()
        assert stats["evictions"] == 0
        assert stats["expirations"] == 1

    def test_retire_without_ttl_is_noop(self, fakeClock):
        """Without a TTL nothing expires, dood!"""
        cache = LruCache[int, int](capacity=2, clock=fakeClock)
        cache.insert(1, 1)
        fakeClock.advance(10_000)

        assert cache.retire() == 0
        assert cache.query(1) == 1

    def test_real_clock_expiry(self):
        """TTL works with the default monotonic clock, dood!"""
        cache = LruCache[str, str](capacity=2, ttl=0.1)
        cache.insert("key1", "value1")
        assert cache.query("key1") == "value1"

        time.sleep(0.15)
        assert cache.retire() == 1

        with pytest.raises(CacheMissError):
            cache.query("key1")


class TestLruCacheBroken:
    """Test that index/list disagreement is reported, dood!"""

    def test_stale_index_in_map_raises_broken(self):
        """A corrupted index entry surfaces as CacheBrokenError, dood!"""
        cache = LruCache[str, int](capacity=2)
        cache.insert("a", 1)
        cache.insert("b", 2)

        # Simulate a bookkeeping bug: point "a" at a stale index
        staleIndex = cache._index["a"]
        cache._list.repositionToHead(staleIndex)

        with pytest.raises(CacheBrokenError) as excInfo:
            cache.query("a")

        assert isinstance(excInfo.value.__cause__, LinkBrokenError)

    def test_failed_remove_keeps_index_entry(self):
        """A broken removal does not drop the key from the index, dood!"""
        cache = LruCache[str, int](capacity=2)
        cache.insert("a", 1)
        cache.insert("b", 2)

        staleIndex = cache._index["a"]
        cache._list.repositionToHead(staleIndex)

        with pytest.raises(CacheBrokenError) as excInfo:
            cache.remove("a")

        assert isinstance(excInfo.value.__cause__, LinkBrokenError)
        assert "a" in cache
        assert cache._index["a"] == staleIndex
        assert len(cache) == 2

    def test_insert_with_corrupted_arena_raises_broken(self):
        """Free list corruption surfaces as CacheBrokenError, not out of memory, dood!"""
        cache = LruCache[str, int](capacity=2)
        cache.insert("a", 1)
        cache._list._arena._freeListHead = cache._index["a"].slot

        with pytest.raises(CacheBrokenError) as excInfo:
            cache.insert("b", 2)

        assert isinstance(excInfo.value.__cause__, LinkBrokenError)
        assert isinstance(excInfo.value.__cause__.__cause__, ArenaCorruptedError)
        assert "b" not in cache

    def test_retired_key_missing_from_index_raises_broken(self, fakeClock):
        """Retiring a key the index does not know is a bug signal, dood!"""
        cache = LruCache[str, int](capacity=2, ttl=1.0, clock=fakeClock)
        cache.insert("a", 1)
        del cache._index["a"]

        fakeClock.advance(1.0)
        with pytest.raises(CacheBrokenError):
            cache.retire()


class TestLruCacheConfigAndStats:
    """Test construction from config and statistics, dood!"""

    def test_from_config_with_duration_string(self):
        """ttl accepts duration strings, dood!"""
        cache = LruCache[int, int].fromConfig({"capacity": 3, "ttl": "1500ms"})

        assert cache.capacity == 3
        assert cache.ttl == 1.5

    def test_from_config_with_number(self):
        """ttl accepts plain seconds, dood!"""
        cache = LruCache[int, int].fromConfig({"capacity": 1, "ttl": 2})

        assert cache.ttl == 2.0

    def test_from_config_without_ttl(self):
        """Missing ttl disables expiry, dood!"""
        cache = LruCache[int, int].fromConfig({"capacity": 4})

        assert cache.capacity == 4
        assert cache.ttl is None

    def test_get_stats(self, fakeClock):
        """Counters track hits, misses, evictions and expirations, dood!"""
        cache = LruCache[int, int](capacity=2, ttl=1.0, clock=fakeClock)

        stats = cache.getStats()
        assert stats == {
            "entries": 0,
            "capacity": 2,
            "ttl": 1.0,
            "hits": 0,
            "misses": 0,
            "evictions": 0,
            "expirations": 0,
        }

        cache.insert(1, 1)
        cache.insert(2, 2)
        cache.query(1)
        cache.get(5)
        cache.insert(3, 3)
        fakeClock.advance(1.0)
        cache.retire()

        stats = cache.getStats()
        assert stats["entries"] == 0
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["evictions"] == 1
        assert stats["expirations"] == 2
