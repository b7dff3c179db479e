"""Timers belonging to one recipe page.

Each timer owns its scheduling; the collection never ticks anything itself,
so timers run independently and never wait on one another.
"""

import itertools
import logging
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from src.models import TimerRecord
from src.store_client.errors import ValidationError
from .errors import TimerNotFoundError
from .scheduler import Scheduler
from .timer_state import TimerState, TimerStatus, validate_duration, validate_label

logger = logging.getLogger(__name__)

DEFAULT_DURATION = 60
LOCAL_ID_PREFIX = "local-timer-"


def validate_timer_input(label: object, duration: object) -> Tuple[str, int]:
    """Validate a new timer the way the page store does.

    Returns:
        (label, duration) with the label stripped

    Raises:
        InvalidLabelError: If the label is empty
        InvalidDurationError: If duration is not a positive integer
    """
    return validate_label(label), validate_duration(duration)


class TimerCollection:
    """Ordered timers of a page.

    Example:
        >>> timers = TimerCollection(AsyncioScheduler(), on_complete=beep)
        >>> boil = timers.add("Boil pasta", 540)
        >>> boil.start()
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_complete: Optional[Callable[[TimerState], None]] = None,
        default_duration: int = DEFAULT_DURATION,
    ):
        self._scheduler = scheduler
        self._on_complete = on_complete
        self.default_duration = validate_duration(default_duration)
        self._timers: List[TimerState] = []
        self._local_ids = itertools.count(1)

    def __iter__(self) -> Iterator[TimerState]:
        return iter(list(self._timers))

    def __len__(self) -> int:
        return len(self._timers)

    def __contains__(self, timer_id: object) -> bool:
        return any(t.timer_id == timer_id for t in self._timers)

    def find(self, timer_id: str) -> TimerState:
        """Return the timer with ``timer_id``.

        Raises:
            TimerNotFoundError: If no timer has that id
        """
        for timer in self._timers:
            if timer.timer_id == timer_id:
                return timer
        raise TimerNotFoundError(timer_id)

    def running(self) -> List[TimerState]:
        return [t for t in self._timers if t.status is TimerStatus.RUNNING]

    def _new_timer(self, timer_id: str, label: str, duration: int) -> TimerState:
        return TimerState(
            timer_id, label, duration, self._scheduler, on_complete=self._on_complete
        )

    def add(
        self,
        label: str,
        duration: Optional[int] = None,
        timer_id: Optional[str] = None,
    ) -> TimerState:
        """Validate and append an idle timer.

        Args:
            label: Display label
            duration: Seconds; the collection default when omitted
            timer_id: Store identifier; a local placeholder when omitted

        Raises:
            InvalidLabelError: If the label is empty
            InvalidDurationError: If duration is not a positive integer
            ValueError: If timer_id is already taken
        """
        if duration is None:
            duration = self.default_duration
        label, duration = validate_timer_input(label, duration)

        if timer_id is None:
            timer_id = f"{LOCAL_ID_PREFIX}{next(self._local_ids)}"
        if timer_id in self:
            raise ValueError(f"Timer id {timer_id} already exists")

        timer = self._new_timer(timer_id, label, duration)
        self._timers.append(timer)
        logger.debug(f"Added timer {timer_id} ({label}, {duration}s)")
        return timer

    def remove(self, timer_id: str) -> Tuple[int, TimerState]:
        """Stop a timer and take it out of the collection.

        The pending tick is cancelled before removal, so no callback for this
        timer fires afterwards.

        Returns:
            (position, timer) so the caller can restore() it

        Raises:
            TimerNotFoundError: If no timer has that id
        """
        timer = self.find(timer_id)
        timer.delete()
        position = self._timers.index(timer)
        del self._timers[position]
        return position, timer

    def restore(self, position: int, timer: TimerState) -> None:
        """Put a removed timer back where it was, running again if it was."""
        timer.reinstate()
        self._timers.insert(min(position, len(self._timers)), timer)

    def sync(self, records: Iterable[TimerRecord]) -> None:
        """Rebuild the collection from store records.

        Timers the store still has keep their state (running ones keep
        running); new records start idle; timers the store no longer has
        are stopped. Local placeholder timers are kept at the end.
        """
        existing = {t.timer_id: t for t in self._timers}
        rebuilt: List[TimerState] = []

        for record in records:
            timer = existing.pop(record.timer_id, None)
            if timer is None:
                try:
                    timer = self._new_timer(record.timer_id, record.label, record.duration)
                except ValidationError as e:
                    logger.warning(f"Skipping timer {record.timer_id}: {e}")
                    continue
            rebuilt.append(timer)

        for timer_id, timer in existing.items():
            if timer_id.startswith(LOCAL_ID_PREFIX):
                rebuilt.append(timer)
            else:
                timer.delete()
                logger.debug(f"Timer {timer_id} no longer in store, stopped")

        self._timers = rebuilt

    def cancel_all(self) -> None:
        """Stop every timer and empty the collection."""
        for timer in self._timers:
            timer.delete()
        self._timers = []
