"""Client library for the recipe page store.

This package provides Python abstractions over the store's REST API,
enabling clean and type-safe access to pages, timers and unit converters.
"""

from .errors import (
    RecipeTimersError,
    ValidationError,
    StoreError,
    InvalidCredentialsError,
    NotFoundError,
    PageNotFoundError,
    StoreValidationError,
    TransportError,
    UnauthorizedError,
    StoreUnreachableError,
)

__all__ = [
    "RecipeTimersError",
    "ValidationError",
    "StoreError",
    "InvalidCredentialsError",
    "NotFoundError",
    "PageNotFoundError",
    "StoreValidationError",
    "TransportError",
    "UnauthorizedError",
    "StoreUnreachableError",
]
