"""
Transaction Id Generators

Ids are produced by an injectable generator so that recurrence expansion
and the ledger are deterministic under test.
"""

import itertools
import threading
import time
from typing import Callable, Protocol


class IdGenerator(Protocol):
    """Anything that returns a new unique id when called."""

    def __call__(self) -> int:
        ...


class TimestampIdGenerator:
    """
    Millisecond time-derived ids, strictly increasing.

    Several ids requested within the same millisecond are bumped by one
    each, so a burst (e.g. a recurrence) never repeats an id.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            candidate = int(self._clock() * 1000)
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return candidate


class SequentialIdGenerator:
    """Ids start, start + 1, start + 2, ..."""

    def __init__(self, start: int = 1):
        if start < 0:
            raise ValueError("Ids must be non-negative")
        self._counter = itertools.count(start)

    def __call__(self) -> int:
        return next(self._counter)
