"""Countdown timer state machine.

States: IDLE -> RUNNING <-> PAUSED, RUNNING -> COMPLETED, COMPLETED -> RUNNING
(a fresh start) and any state -> IDLE through reset().

Every state change cancels the pending tick first and only then mutates the
timer, so a tick scheduled before pause/reset/delete never fires.
"""

import logging
from enum import Enum
from typing import Callable, Optional

from .errors import InvalidDurationError, InvalidLabelError
from .scheduler import CancelHandle, Scheduler

logger = logging.getLogger(__name__)

TICK_SECONDS = 1


class TimerStatus(Enum):
    """Lifecycle states of a countdown timer."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


def validate_label(label: object) -> str:
    """Return the stripped label.

    Raises:
        InvalidLabelError: If the label is not a non-empty string
    """
    if not isinstance(label, str) or not label.strip():
        raise InvalidLabelError(label)
    return label.strip()


def validate_duration(duration: object) -> int:
    """Return the duration as int seconds.

    Raises:
        InvalidDurationError: If duration is not a positive integer
    """
    if isinstance(duration, bool) or not isinstance(duration, int) or duration <= 0:
        raise InvalidDurationError(duration)
    return duration


def format_time(seconds: int) -> str:
    """Format seconds as MM:SS; minutes grow past two digits when needed.

    Example:
        >>> format_time(65)
        '01:05'
        >>> format_time(7500)
        '125:00'
    """
    mins, secs = divmod(max(0, int(seconds)), 60)
    return f"{mins:02d}:{secs:02d}"


class TimerState:
    """A single countdown timer.

    Attributes:
        timer_id: Store identifier or local placeholder
        label: Non-empty display label
        remaining: Seconds left, 0 <= remaining <= duration
        status: Current TimerStatus

    Example:
        >>> timer = TimerState("t1", "Rest dough", 5, scheduler, on_complete=beep)
        >>> timer.start()       # one tick per second until COMPLETED
        >>> timer.pause()
        >>> timer.reset()       # back to IDLE with remaining == duration
    """

    def __init__(
        self,
        timer_id: str,
        label: str,
        duration: int,
        scheduler: Scheduler,
        on_complete: Optional[Callable[["TimerState"], None]] = None,
    ):
        """Create an idle timer.

        Args:
            timer_id: Store identifier or local placeholder
            label: Display label
            duration: Countdown length in seconds
            scheduler: Clock used to schedule ticks
            on_complete: Notifier fired once each time the timer reaches zero

        Raises:
            InvalidLabelError: If label is empty
            InvalidDurationError: If duration is not a positive integer
        """
        self.timer_id = timer_id
        self.label = validate_label(label)
        self._duration = validate_duration(duration)
        self.remaining = self._duration
        self.status = TimerStatus.IDLE
        self._scheduler = scheduler
        self._on_complete = on_complete
        self._handle: Optional[CancelHandle] = None
        self._deleted = False
        self._resume_on_reinstate = False

    @property
    def duration(self) -> int:
        return self._duration

    @property
    def is_running(self) -> bool:
        return self.status is TimerStatus.RUNNING

    @property
    def is_complete(self) -> bool:
        return self.status is TimerStatus.COMPLETED

    @property
    def is_deleted(self) -> bool:
        return self._deleted

    @property
    def has_pending_tick(self) -> bool:
        return self._handle is not None

    @property
    def progress(self) -> float:
        """Fraction of the duration already elapsed (0.0 to 1.0)."""
        return (self._duration - self.remaining) / self._duration

    def display(self) -> str:
        return format_time(self.remaining)

    def _cancel_tick(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule_tick(self) -> None:
        self._handle = self._scheduler.call_later(TICK_SECONDS, self._tick)

    def _tick(self) -> None:
        self._handle = None
        self.remaining -= 1

        if self.remaining <= 0:
            self.remaining = 0
            self.status = TimerStatus.COMPLETED
            logger.info(f"Timer {self.timer_id} ({self.label}) finished")
            self._notify_complete()
            return

        self._schedule_tick()

    def _notify_complete(self) -> None:
        if self._on_complete is None:
            return
        try:
            self._on_complete(self)
        except Exception:
            logger.exception(f"Completion notifier failed for timer {self.timer_id}")

    def start(self) -> None:
        """Start or resume counting down; a no-op while RUNNING.

        Starting a COMPLETED timer restores the full duration first.
        """
        if self._deleted:
            logger.warning(f"Ignoring start of deleted timer {self.timer_id}")
            return
        if self.status is TimerStatus.RUNNING:
            return

        if self.status is TimerStatus.COMPLETED:
            self.remaining = self._duration

        self.status = TimerStatus.RUNNING
        self._schedule_tick()
        logger.debug(f"Timer {self.timer_id} started at {self.display()}")

    def pause(self) -> None:
        """Stop counting down, keeping the remaining time; only while RUNNING."""
        if self.status is not TimerStatus.RUNNING:
            return

        self._cancel_tick()
        self.status = TimerStatus.PAUSED
        logger.debug(f"Timer {self.timer_id} paused at {self.display()}")

    def toggle(self) -> None:
        """Start if not running, pause if running."""
        if self.is_running:
            self.pause()
        else:
            self.start()

    def reset(self) -> None:
        """Stop counting and restore the full duration; legal from any state."""
        self._cancel_tick()
        self.remaining = self._duration
        self.status = TimerStatus.IDLE
        logger.debug(f"Timer {self.timer_id} reset")

    def delete(self) -> None:
        """Stop ticking for good before the timer leaves its collection.

        A running timer is held PAUSED while deleted; reinstate() resumes it.
        """
        self._cancel_tick()
        self._resume_on_reinstate = self.status is TimerStatus.RUNNING
        if self._resume_on_reinstate:
            self.status = TimerStatus.PAUSED
        self._deleted = True

    def reinstate(self) -> None:
        """Undo delete() after a failed remote delete.

        A timer that was running when deleted starts counting again from
        the remaining time it had.
        """
        self._deleted = False
        if self._resume_on_reinstate:
            self._resume_on_reinstate = False
            self.start()

    def __repr__(self) -> str:
        return (
            f"TimerState(id={self.timer_id!r}, label={self.label!r}, "
            f"remaining={self.remaining}/{self._duration}, status={self.status.value})"
        )
