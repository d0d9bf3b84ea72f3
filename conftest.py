"""
Pytest configuration and common fixtures for arena-lru tests.
"""

import pytest

from tests.utils import FakeClock


@pytest.fixture
def fakeClock() -> FakeClock:
    """
    Provide a manually advanced clock starting at 0.

    Returns:
        FakeClock: Clock to pass as ``clock=`` to LinkedList / LruCache
    """
    return FakeClock()
