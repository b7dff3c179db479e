"""Deterministic scheduler for timer tests.

FakeScheduler implements the same call_later() interface as
AsyncioScheduler but never touches a real clock: tests move virtual time
forward with advance() and every callback due by then runs in order.

Example:
    >>> scheduler = FakeScheduler()
    >>> timer = TimerState("t1", "Rest dough", 5, scheduler)
    >>> timer.start()
    >>> scheduler.advance(5)
    >>> timer.status
    <TimerStatus.COMPLETED: 'completed'>
"""

from typing import Callable, List


class FakeHandle:
    """Handle returned by FakeScheduler.call_later()."""

    def __init__(self, when: float, seq: int, callback: Callable[[], None]):
        self.when = when
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Virtual clock; callbacks run only from advance()."""

    def __init__(self):
        self.now = 0.0
        self.scheduled: List[FakeHandle] = []
        self._seq = 0

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeHandle:
        self._seq += 1
        handle = FakeHandle(self.now + delay, self._seq, callback)
        self.scheduled.append(handle)
        return handle

    @property
    def pending(self) -> List[FakeHandle]:
        """Callbacks still waiting to run."""
        return [h for h in self.scheduled if not h.cancelled]

    def advance(self, seconds: float) -> None:
        """Move time forward, running every due callback in time order.

        Callbacks scheduled while advancing run too if they fall due
        before the new time.
        """
        target = self.now + seconds
        while True:
            due = [h for h in self.pending if h.when <= target]
            if not due:
                break
            handle = min(due, key=lambda h: (h.when, h.seq))
            self.scheduled.remove(handle)
            self.now = handle.when
            handle.callback()
        self.now = target
