"""Authentication module for loading page store credentials.

This module handles loading the store URL and bearer token from environment
variables using python-dotenv. A token saved by ``recipe-timers login`` can
be supplied as a fallback; the environment always wins.
"""

import os
from typing import Callable, NamedTuple, Optional

from dotenv import load_dotenv

from .errors import InvalidCredentialsError

DEFAULT_STORE_URL = "http://localhost:5690/api/users"


class Credentials(NamedTuple):
    """Page store credentials."""
    url: str
    token: str


class Authenticator:
    """Loads and validates page store credentials.

    Credentials are loaded from a .env file using python-dotenv and are never
    logged.

    Environment variables:
        RECIPE_TIMERS_URL: Store base URL (default: http://localhost:5690/api/users)
        RECIPE_TIMERS_TOKEN: Bearer token issued by the store's login endpoint

    Example:
        >>> auth = Authenticator()
        >>> creds = auth.get_credentials()
        >>> print(f"Connecting to {creds.url}")
    """

    def __init__(
        self,
        url: Optional[str] = None,
        token_fallback: Optional[Callable[[], Optional[str]]] = None,
    ):
        """Initialize the authenticator by loading environment variables from .env file.

        Args:
            url: Store URL overriding RECIPE_TIMERS_URL (e.g. from the settings file)
            token_fallback: Callable returning a saved token when the
                environment has none
        """
        load_dotenv()
        self._url = url
        self._token_fallback = token_fallback

    def get_url(self) -> str:
        """Return the store base URL without a trailing slash."""
        url = os.getenv('RECIPE_TIMERS_URL') or self._url or DEFAULT_STORE_URL
        return url.rstrip('/')

    def get_credentials(self) -> Credentials:
        """Get the store URL and bearer token.

        Returns:
            Credentials: A named tuple containing url and token

        Raises:
            InvalidCredentialsError: If no token is available
        """
        url = self.get_url()
        token = os.getenv('RECIPE_TIMERS_TOKEN')
        if not token and self._token_fallback is not None:
            token = self._token_fallback()

        if not token:
            raise InvalidCredentialsError(endpoint=url)

        return Credentials(url=url, token=token)
