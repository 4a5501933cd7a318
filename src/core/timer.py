"""Monotonic request timing.

Start tokens come from ``time.perf_counter_ns`` so measurements are immune
to wall-clock adjustments. Elapsed values are floats in milliseconds with
the sub-millisecond fraction preserved.
"""

import time

from src.core.constants import NANOSECONDS_PER_MILLISECOND

type StartToken = int


def start() -> StartToken:
    """Capture a monotonic start token for the current request."""
    return time.perf_counter_ns()


def elapsed_ms(token: StartToken) -> float:
    """Milliseconds elapsed since ``token`` was captured.

    Args:
        token: Value previously returned by ``start()``.

    Returns:
        float: Elapsed time in milliseconds, never negative.
    """
    return max(time.perf_counter_ns() - token, 0) / NANOSECONDS_PER_MILLISECOND
