"""Bounded retry combinator."""

import time
from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T")


def retry_until(
    operation: Callable[[], T],
    predicate: Callable[[T], bool],
    max_attempts: int = 10,
    delay_seconds: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> T | None:
    """Call ``operation`` until its result satisfies ``predicate``.

    Sleeps a fixed delay between attempts, never after the last one.
    Exceptions raised by ``operation`` are not caught and end the loop.

    Parameters
    ----------
    operation : Callable[[], T]
        Zero-argument callable producing a candidate result.
    predicate : Callable[[T], bool]
        Returns True when a result is acceptable.
    max_attempts : int, optional
        Maximum number of calls to ``operation`` (default=10).
    delay_seconds : float, optional
        Fixed delay between attempts in seconds (default=1.0).
    sleep : Callable[[float], None], optional
        Sleep function, replaceable in tests (default=time.sleep).

    Returns
    -------
    T or None
        First accepted result, or None if every attempt was rejected.

    """
    for attempt in range(1, max_attempts + 1):
        result = operation()
        if predicate(result):
            return result
        if attempt < max_attempts:
            sleep(delay_seconds)
    return None
