"""
arena-lru - bounded in-process LRU/TTL cache built on a generational arena.
"""
