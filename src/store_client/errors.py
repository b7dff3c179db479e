"""Typed exception hierarchy for recipe-timers errors.

This module defines the base exceptions shared by every package and the
errors raised by the page store client. All exceptions inherit from
RecipeTimersError for easy catching and include descriptive messages with
context to help with debugging.
"""

from typing import Optional


class RecipeTimersError(Exception):
    """Base exception for all recipe-timers errors.

    Use this to catch any application-level error.
    """
    pass


class ValidationError(RecipeTimersError):
    """Raised when a label, duration or category is rejected.

    Validation errors are recovered locally and never mutate state.
    """
    pass


class StoreError(RecipeTimersError):
    """Base exception for all page store errors."""
    pass


class InvalidCredentialsError(StoreError):
    """Raised when no bearer token is available for the page store."""

    def __init__(self, endpoint: str):
        super().__init__(
            f"No API token configured for {endpoint} (run 'recipe-timers login')"
        )
        self.endpoint = endpoint


class NotFoundError(StoreError):
    """Raised when the store does not know the requested entity."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity.capitalize()} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class PageNotFoundError(NotFoundError):
    """Raised when a requested page does not exist."""

    def __init__(self, page_id: str):
        super().__init__("page", page_id)
        self.page_id = page_id


class StoreValidationError(ValidationError, StoreError):
    """Raised when the store rejects a request payload (HTTP 400/422)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TransportError(StoreError):
    """Raised when the store cannot be reached or fails a request."""

    def __init__(self, message: str = "Page store request failed"):
        super().__init__(message)


class UnauthorizedError(TransportError):
    """Raised when the store rejects the bearer token (HTTP 401/403)."""

    def __init__(self, endpoint: str):
        super().__init__(f"Not authorized by page store at {endpoint}")
        self.endpoint = endpoint


class StoreUnreachableError(TransportError):
    """Raised when the page store is not available or times out."""

    def __init__(self, endpoint: str):
        super().__init__(f"Page store is not available at {endpoint}")
        self.endpoint = endpoint
