"""Demo program exercising the arena_lru.lru public operations."""
