"""Type definitions for the demo configuration."""

import sys
from typing import NotRequired

if sys.version_info >= (3, 14):
    from typing import TypedDict
else:
    from typing_extensions import TypedDict


class DemoConfig(TypedDict, total=False):
    """Settings of the demo walkthrough.

    Attributes:
        pause: Pause between the two halves of the walkthrough, seconds or
            a duration string. Defaults to half of the cache TTL.
        keys: How many keys the walkthrough inserts before re-inserting key 1
    """

    pause: NotRequired[float | str]
    keys: NotRequired[int]
