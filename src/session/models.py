"""Data models for page session operations."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class SessionState(Enum):
    """Lifecycle of an open page.

    - LOADING: Fetch in progress (or not started)
    - READY: Page loaded, timers and converters usable
    - NOT_FOUND: The store does not have the page
    - ERROR: The last load failed; load() may be retried
    - CLOSED: Timers cancelled, session no longer usable
    """

    LOADING = "loading"
    READY = "ready"
    NOT_FOUND = "not_found"
    ERROR = "error"
    CLOSED = "closed"


@dataclass
class OperationResult:
    """Result of a remote mutation made through a PageSession.

    Attributes:
        success: Whether the store accepted the change
        operation: Name of the operation (e.g., "add_timer")
        entity_id: Identifier of the timer/converter concerned
        refreshed: Whether the page was reloaded afterwards
        error: User-facing error message if success is False
        cause: Exception behind a failed result, for callers that map it
    """

    success: bool
    operation: str
    entity_id: Optional[str] = None
    refreshed: bool = False
    error: Optional[str] = None
    cause: Optional[Exception] = field(default=None, repr=False, compare=False)
