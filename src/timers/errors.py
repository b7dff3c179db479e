"""Typed exceptions for countdown timer errors."""

from src.store_client.errors import RecipeTimersError, ValidationError


class TimerError(RecipeTimersError):
    """Base exception for all timer errors."""
    pass


class InvalidDurationError(ValidationError, TimerError):
    """Raised when a duration is not a positive whole number of seconds."""

    def __init__(self, duration: object):
        super().__init__(
            f"Please enter a valid duration: expected a positive number of seconds, got {duration!r}"
        )
        self.duration = duration


class InvalidLabelError(ValidationError, TimerError):
    """Raised when a timer label is empty."""

    def __init__(self, label: object):
        super().__init__("Timer name is required")
        self.label = label


class TimerNotFoundError(TimerError):
    """Raised when a timer id is not in the collection."""

    def __init__(self, timer_id: str):
        super().__init__(f"Timer {timer_id} not found")
        self.timer_id = timer_id
