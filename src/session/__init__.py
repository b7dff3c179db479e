"""Page session: one open recipe page and its sync with the page store."""

from .errors import SessionError, LoadFailedError, OperationInProgressError, SessionClosedError
from .models import OperationResult, SessionState
from .page_session import PageSession

__all__ = [
    "PageSession",
    "SessionState",
    "OperationResult",
    "SessionError",
    "LoadFailedError",
    "OperationInProgressError",
    "SessionClosedError",
]
