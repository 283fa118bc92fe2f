"""
Simulated clock and deferred task queue.

Delays in the engine are scheduled future invocations on the simulated
clock, fired by the tick loop, never blocking waits.
"""

import heapq
import logging
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)


class SimulationClock:
    """Simulated time in seconds, advanced only by the tick loop."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start

    @property
    def now(self) -> float:
        return self._now

    def advance(self, dt: float) -> float:
        """Move time forward by dt seconds. Returns the new time."""
        if dt < 0:
            raise ValueError(f"Cannot advance the clock backwards (dt={dt})")
        self._now += dt
        return self._now

    def __repr__(self) -> str:
        return f"SimulationClock(now={self._now:.2f})"


@dataclass(order=True)
class DeferredTask:
    """An action to run once the clock reaches `fire_at`."""

    fire_at: float
    seq: int
    action: Callable[[], object] = field(compare=False)
    label: str = field(default="", compare=False)


class DeferredTaskQueue:
    """
    Priority queue of (fire time, action) pairs.
    Tasks due at the same time run in the order they were scheduled.
    """

    def __init__(self, clock: SimulationClock) -> None:
        self._clock = clock
        self._queue: list[DeferredTask] = []
        self._seq = 0

    def schedule(self, fire_at: float, action: Callable[[], object], label: str = "") -> DeferredTask:
        """Schedule an action at an absolute simulated time."""
        self._seq += 1
        task = DeferredTask(fire_at, self._seq, action, label)
        heapq.heappush(self._queue, task)
        return task

    def schedule_in(self, delay: float, action: Callable[[], object], label: str = "") -> DeferredTask:
        """Schedule an action `delay` seconds after the current time."""
        return self.schedule(self._clock.now + max(0.0, delay), action, label)

    def run_due(self, now: float | None = None) -> int:
        """
        Run every task whose fire time has been reached.
        Returns the number of tasks run.
        """
        if now is None:
            now = self._clock.now
        fired = 0
        while self._queue and self._queue[0].fire_at <= now:
            task = heapq.heappop(self._queue)
            logger.debug(f"Running deferred task '{task.label}' (due {task.fire_at:.2f})")
            task.action()
            fired += 1
        return fired

    @property
    def pending(self) -> list[DeferredTask]:
        """Pending tasks in firing order."""
        return sorted(self._queue)

    def next_fire_time(self) -> float | None:
        return self._queue[0].fire_at if self._queue else None

    def __len__(self) -> int:
        return len(self._queue)
