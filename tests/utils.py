"""
Test utilities for arena-lru tests.

Provides a controllable clock so TTL behaviour can be tested without
sleeping.
"""


class FakeClock:
    """
    Manually advanced monotonic clock.

    Pass the instance wherever a ``clock`` callable is expected and its
    ``sleep`` method wherever a sleep function is expected.

    Example:
        clock = FakeClock()
        cache = LruCache(capacity=2, ttl=1.0, clock=clock)
        clock.advance(1.0)
    """

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.advance(seconds)
