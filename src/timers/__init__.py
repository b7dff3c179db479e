"""Multi-timer concurrent countdown engine.

Key classes:
    TimerState: One countdown timer's state machine
    TimerCollection: The independent timers of a page
    AsyncioScheduler: Event-loop clock driving the ticks
"""

from .errors import TimerError, InvalidDurationError, InvalidLabelError, TimerNotFoundError
from .scheduler import AsyncioScheduler, CancelHandle, Scheduler
from .timer_state import (
    TICK_SECONDS,
    TimerState,
    TimerStatus,
    format_time,
    validate_duration,
    validate_label,
)
from .collection import DEFAULT_DURATION, TimerCollection, validate_timer_input

__all__ = [
    "TimerState",
    "TimerStatus",
    "TimerCollection",
    "AsyncioScheduler",
    "Scheduler",
    "CancelHandle",
    "TICK_SECONDS",
    "DEFAULT_DURATION",
    "format_time",
    "validate_duration",
    "validate_label",
    "validate_timer_input",
    "TimerError",
    "InvalidDurationError",
    "InvalidLabelError",
    "TimerNotFoundError",
]
