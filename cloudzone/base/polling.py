"""
Bounded polling with a wall-clock deadline.

Both convergence waiters run the same loop: call a probe, stop when it
reports success, otherwise sleep on a delay schedule until the deadline.
The deadline is checked once per iteration and a sleep never runs past
it, so a probe that never succeeds fails exactly at the deadline.
"""

from __future__ import annotations

import time
from typing import Callable, TypeVar

T = TypeVar("T")

Clock = Callable[[], float]
Sleep = Callable[[float], None]


class Deadline:
    """A point in time ``timeout`` seconds after construction."""

    def __init__(self, timeout: float, clock: Clock = time.monotonic) -> None:
        self.clock = clock
        self.started = clock()
        self.expires = self.started + timeout

    def remaining(self) -> float:
        return max(0.0, self.expires - self.clock())

    def expired(self) -> bool:
        return self.clock() >= self.expires

    def elapsed(self) -> float:
        return self.clock() - self.started


def delay_schedule(
    initial_interval: float, initial_attempts: int, interval: float
) -> Callable[[int], float]:
    """Return ``attempt -> delay``: *initial_interval* for the first
    *initial_attempts* attempts (0-based), *interval* afterwards."""

    def delay(attempt: int) -> float:
        return initial_interval if attempt < initial_attempts else interval

    return delay


def poll(
    probe: Callable[[int], T],
    done: Callable[[T], bool],
    deadline: Deadline,
    delay: Callable[[int], float],
    sleep: Sleep = time.sleep,
    on_wait: Callable[[int, T], None] | None = None,
) -> tuple[bool, T, int]:
    """Run *probe* until *done* accepts its result or *deadline* expires.

    Args:
        probe: Called with the 0-based attempt number.
        done: Predicate on the probe result.
        deadline: Overall wall-clock deadline.
        delay: Attempt number to seconds of sleep before the next attempt.
        sleep: Blocking sleep function.
        on_wait: Called with the attempt number and result before each sleep.

    Returns:
        ``(succeeded, last_result, attempts)``.
    """
    attempt = 0
    while True:
        result = probe(attempt)
        attempt += 1
        if done(result):
            return True, result, attempt
        remaining = deadline.remaining()
        if remaining <= 0:
            return False, result, attempt
        if on_wait is not None:
            on_wait(attempt - 1, result)
        sleep(min(delay(attempt - 1), remaining))
