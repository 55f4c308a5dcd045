"""Time helpers shared by the auth and transaction stores."""

import time
from typing import Callable, Container

# Returns the current epoch time in seconds, like time.time
Clock = Callable[[], float]

system_clock: Clock = time.time


def now_ms(clock: Clock = system_clock) -> int:
    """Current epoch time in milliseconds."""
    return int(clock() * 1000)


def timestamp_id(clock: Clock, taken: Container[str]) -> str:
    """
    Millisecond-timestamp identifier.

    Two records created within the same millisecond would collide, so the
    value is bumped until it is free.
    """
    candidate = now_ms(clock)
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)
