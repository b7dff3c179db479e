"""Typed exceptions for page session errors."""

from src.store_client.errors import RecipeTimersError


class SessionError(RecipeTimersError):
    """Base exception for all page session errors."""
    pass


class LoadFailedError(SessionError):
    """Raised when a page cannot be loaded because the store failed.

    The session stays usable; calling load() again retries.
    """

    def __init__(self, page_id: str, reason: str):
        super().__init__(f"Error loading page {page_id}: {reason}")
        self.page_id = page_id
        self.reason = reason


class OperationInProgressError(SessionError):
    """Raised when the same entity already has a remote call in flight."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(
            f"An operation on {entity} {entity_id} is already in progress"
        )
        self.entity = entity
        self.entity_id = entity_id


class SessionClosedError(SessionError):
    """Raised when a closed session is used again."""

    def __init__(self, page_id: str):
        super().__init__(f"Session for page {page_id} is closed")
        self.page_id = page_id
