"""
Cancellable timers driven by the frame loop.

The driver calls `advance(elapsed_ms)` once per frame, before the session
update, so callbacks only ever run between frames. Time is whatever the driver
feeds in: wall-clock delta in the window, a fixed step in the headless env.
"""

import logging
from typing import Callable, List, Optional

logger = logging.getLogger("neon_arena.scheduler")


class ScheduledTask:
    """Handle for a pending one-shot or repeating callback"""

    def __init__(self, callback: Callable[[], None], due: float, interval: Optional[float] = None, name: str = ""):
        self.callback = callback
        self.due = due
        self.interval = interval
        self.name = name or getattr(callback, "__name__", "task")
        self.cancelled = False
        self.fired = 0

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    @property
    def active(self) -> bool:
        return not self.cancelled

    def cancel(self):
        self.cancelled = True

    def __repr__(self):
        state = "cancelled" if self.cancelled else f"due={self.due:.1f}"
        return f"ScheduledTask({self.name}, {state})"


class Scheduler:
    """Virtual-time task queue in milliseconds"""

    def __init__(self):
        self.now = 0.0
        self._tasks: List[ScheduledTask] = []

    def call_later(self, delay_ms: float, callback: Callable[[], None], name: str = "") -> ScheduledTask:
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {delay_ms}")
        task = ScheduledTask(callback, self.now + delay_ms, name=name)
        self._tasks.append(task)
        return task

    def call_every(self, interval_ms: float, callback: Callable[[], None], name: str = "") -> ScheduledTask:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be > 0, got {interval_ms}")
        task = ScheduledTask(callback, self.now + interval_ms, interval=interval_ms, name=name)
        self._tasks.append(task)
        return task

    def advance(self, elapsed_ms: float):
        """Move the clock forward and run every task that came due"""
        if elapsed_ms < 0:
            raise ValueError(f"elapsed_ms must be >= 0, got {elapsed_ms}")
        self.now += elapsed_ms

        due = sorted(
            (t for t in self._tasks if not t.cancelled and t.due <= self.now),
            key=lambda t: t.due,
        )
        for task in due:
            # An earlier callback in this batch may have cancelled it
            if task.cancelled:
                continue
            task.fired += 1
            if task.repeating:
                task.due += task.interval
                # No catch-up after a long stall: one firing per missed span
                if task.due <= self.now:
                    task.due = self.now + task.interval
            else:
                task.cancel()
            task.callback()

        self._tasks = [t for t in self._tasks if not t.cancelled]

    def cancel_all(self):
        for task in self._tasks:
            task.cancel()
        self._tasks = []

    @property
    def pending(self) -> List[ScheduledTask]:
        return [t for t in self._tasks if not t.cancelled]
