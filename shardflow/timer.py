"""A coarse clock for actors, refreshed only every few executions."""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import timedelta

DEFAULT_ACTOR_QUOTA = timedelta(microseconds=500)


class ActorClock:
    """Caches the time and refreshes it once per ``execution_interval`` advances.

    ``quota`` is the run time an actor may use before yielding.
    """

    def __init__(
        self,
        execution_interval: int = 1,
        quota: timedelta = DEFAULT_ACTOR_QUOTA,
        now: Callable[[], float] = time.monotonic,
    ) -> None:
        if execution_interval < 1:
            raise ValueError("execution_interval must be at least 1")
        self.execution_interval = execution_interval
        self.quota = quota
        self._now = now
        self._clock = now()
        self.execution_count = 0

    def read(self) -> float:
        """The time as of the last refresh."""
        return self._clock

    def advance(self) -> None:
        """Count one execution and refresh the time when the interval is reached."""
        self.execution_count += 1
        if self.execution_count < self.execution_interval:
            return
        self.execution_count = 0
        self._clock = self._now()