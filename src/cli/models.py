"""Data models for CLI operations.

All models use dataclasses, following the patterns in src/models.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from src.conversions import DEFAULT_CATEGORY
from src.store_client.auth import DEFAULT_STORE_URL
from src.timers import DEFAULT_DURATION


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Operation completed successfully
    - GENERAL_ERROR (1): General error (config issues, validation failures)
    - NOT_FOUND (2): Page, timer or converter does not exist
    - AUTH_ERROR (3): No token, or the store rejected it
    - NETWORK_ERROR (4): Page store unreachable or failing

    Example:
        >>> raise typer.Exit(ExitCode.NOT_FOUND)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    NOT_FOUND = 2
    AUTH_ERROR = 3
    NETWORK_ERROR = 4


@dataclass
class Settings:
    """User settings read from recipe-timers.yaml.

    Attributes:
        store_url: Page store base URL (RECIPE_TIMERS_URL still wins)
        request_timeout: Seconds before a store request is abandoned
        default_timer_duration: Seconds given to timers added without --duration
        default_converter_category: Category of new unsaved converters

    Example:
        >>> settings = Settings(request_timeout=10)
        >>> settings = Settings()  # all defaults
    """
    store_url: str = DEFAULT_STORE_URL
    request_timeout: float = 30
    default_timer_duration: int = DEFAULT_DURATION
    default_converter_category: str = DEFAULT_CATEGORY


@dataclass
class SavedSession:
    """Login session kept in ~/.recipe-timers/session.yaml.

    Attributes:
        token: Bearer token returned by the store's login endpoint
        email: Address the token was issued for
    """
    token: Optional[str] = None
    email: Optional[str] = None
