"""HTTP client for the recipe page store.

This module wraps the store's REST endpoints with a requests session and
provides error translation from HTTP exceptions to our typed exception
hierarchy. Failed calls are reported, never retried automatically.
"""

import logging
import re
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

import requests
from requests.exceptions import ConnectionError, RequestException, Timeout

from src.models import ConverterRecord, PageRecord, TimerRecord
from .auth import Authenticator
from .errors import (
    NotFoundError,
    PageNotFoundError,
    StoreUnreachableError,
    StoreValidationError,
    TransportError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

_ID_PATTERN = re.compile(r'^[A-Za-z0-9_-]+$')

RecordT = TypeVar('RecordT')


class StoreAPI:
    """Client for the page/timer/converter store with error translation.

    This class provides a thin wrapper over the store's HTTP API that:
    1. Attaches the bearer token from the Authenticator
    2. Translates HTTP errors to typed exceptions
    3. Parses responses into PageRecord/TimerRecord/ConverterRecord

    Example:
        >>> api = StoreAPI(Authenticator())
        >>> page = api.get_page("65a1f0c2e4b0a1b2c3d4e5f6")
    """

    def __init__(self, authenticator: Authenticator, timeout: float = 30):
        """Initialize the client.

        Args:
            authenticator: Authenticator instance for loading credentials
            timeout: Per-request timeout in seconds
        """
        self._authenticator = authenticator
        self._timeout = timeout
        self._session: Optional[requests.Session] = None

    def _get_session(self) -> requests.Session:
        """Get or lazily create the HTTP session."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({'Accept': 'application/json'})
        return self._session

    def _validate_id(self, value: str, name: str) -> str:
        """Validate an identifier before it is placed in a URL path.

        Raises:
            ValueError: If the identifier is empty or contains path characters
        """
        if not value or not str(value).strip():
            raise ValueError(f"{name} cannot be empty")
        value = str(value).strip()
        if not _ID_PATTERN.match(value):
            raise ValueError(
                f"Invalid {name} format: '{value}'. "
                f"Identifiers may contain only letters, digits, '-' and '_'."
            )
        return value

    def _sanitize_credentials(self, text: str) -> str:
        """Mask bearer tokens and passwords in error text before logging.

        Example:
            >>> api._sanitize_credentials("Authorization: Bearer abc.def")
            'Authorization: ***REDACTED***'
        """
        if not text:
            return text

        sanitized = re.sub(
            r'Authorization:\s*[^\n\r]+',
            'Authorization: ***REDACTED***',
            text,
            flags=re.IGNORECASE
        )
        sanitized = re.sub(
            r'Bearer\s+[^\s\n\r]+',
            'Bearer ***REDACTED***',
            sanitized,
            flags=re.IGNORECASE
        )
        sanitized = re.sub(
            r'(password|token)["\']?\s*[:=]\s*["\']?([^"\'\s&,}]+)',
            r'\1=***REDACTED***',
            sanitized,
            flags=re.IGNORECASE
        )
        return sanitized

    @staticmethod
    def _server_message(response: Any) -> Optional[str]:
        """Extract the store's ``message`` field from an error response."""
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict) and body.get('message'):
            return str(body['message'])
        return None

    def _translate_error(
        self,
        exception: Exception,
        operation: str,
        not_found: Optional[Tuple[str, str]] = None,
    ) -> Exception:
        """Translate HTTP exceptions to typed store exceptions.

        Args:
            exception: The original exception from requests
            operation: Description of the operation that failed (for logging)
            not_found: (entity, id) reported when the store answers 404

        Returns:
            Exception: Translated exception (one of our typed exceptions)
        """
        endpoint = self._authenticator.get_url()

        if isinstance(exception, (Timeout, ConnectionError)):
            return StoreUnreachableError(endpoint=endpoint)

        response = getattr(exception, 'response', None)
        status_code = getattr(response, 'status_code', None)

        if status_code in (401, 403):
            return UnauthorizedError(endpoint=endpoint)

        if status_code == 404:
            entity, entity_id = not_found or ('resource', 'unknown')
            if entity == 'page':
                return PageNotFoundError(entity_id)
            return NotFoundError(entity, entity_id)

        if status_code in (400, 422):
            message = self._server_message(response) or f"Store rejected {operation}"
            return StoreValidationError(message, status_code=status_code)

        safe_error_msg = self._sanitize_credentials(str(exception))
        logger.error(f"Store operation failed: {operation} - {safe_error_msg}")
        if status_code is not None:
            return TransportError(
                f"Page store failure during {operation} (HTTP {status_code})"
            )
        return TransportError(f"Page store failure during {operation}")

    def _request(
        self,
        method: str,
        path: str,
        operation: str,
        payload: Optional[Dict[str, Any]] = None,
        authenticated: bool = True,
        not_found: Optional[Tuple[str, str]] = None,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        Raises:
            InvalidCredentialsError: If no token is configured
            UnauthorizedError: If the store rejects the token
            NotFoundError: If the entity does not exist
            StoreValidationError: If the store rejects the payload
            StoreUnreachableError: If the store cannot be reached
            TransportError: For any other failure
        """
        headers = {}
        if authenticated:
            creds = self._authenticator.get_credentials()
            headers['Authorization'] = f"Bearer {creds.token}"
        url = f"{self._authenticator.get_url()}/{path}"

        logger.debug(f"{method} {url}")
        try:
            response = self._get_session().request(
                method,
                url,
                json=payload,
                headers=headers,
                timeout=self._timeout,
            )
            response.raise_for_status()
        except RequestException as e:
            raise self._translate_error(e, operation, not_found) from e

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"Page store returned invalid JSON during {operation}"
            ) from e

    @staticmethod
    def _parse(
        builder: Callable[[Dict[str, Any]], RecordT], data: Any, operation: str
    ) -> RecordT:
        """Build a record from store JSON.

        Raises:
            TransportError: If the payload does not have the expected shape
        """
        try:
            return builder(data)
        except (ValueError, TypeError, AttributeError) as e:
            raise TransportError(
                f"Page store returned a malformed record during {operation}: {e}"
            ) from e

    @staticmethod
    def _pick_created(data: Any, singular: str, plural: str) -> Dict[str, Any]:
        """Find the newly created entity in a create response.

        The store answers either with the entity itself, with it nested under
        ``singular``, or with the owning list where it was appended last.
        """
        if not isinstance(data, dict):
            return {}
        if isinstance(data.get(singular), dict):
            return data[singular]
        items = data.get(plural)
        if isinstance(items, list) and items:
            return items[-1]
        return data

    def list_pages(self) -> List[PageRecord]:
        """Fetch every page owned by the authenticated user.

        Returns:
            List of PageRecord (converters are not included by the dashboard)
        """
        data = self._request('GET', 'dashboard', 'list_pages()')
        pages = data.get('pages') if isinstance(data, dict) else None
        if not isinstance(pages, list):
            logger.warning("Dashboard response has no pages list, treating as empty")
            return []
        return [
            self._parse(PageRecord.from_api, p, 'list_pages()')
            for p in pages if isinstance(p, dict)
        ]

    def get_page(self, page_id: str) -> Optional[PageRecord]:
        """Fetch a page with its timers and saved converters.

        Args:
            page_id: The page identifier

        Returns:
            PageRecord, or None if the dashboard does not list the page or
            page_id is not a well-formed identifier
        """
        try:
            page_id = self._validate_id(page_id, 'page_id')
        except ValueError as e:
            logger.warning(f"Not looking up page: {e}")
            return None

        found = next((p for p in self.list_pages() if p.page_id == page_id), None)
        if found is None:
            return None

        data = self._request(
            'GET',
            f'pages/{page_id}/unitConverters',
            f'get_converters({page_id})',
            not_found=('page', page_id),
        )
        converters = data.get('unitConverters') if isinstance(data, dict) else None
        found.converters = [
            self._parse(ConverterRecord.from_api, c, f'get_converters({page_id})')
            for c in converters or [] if isinstance(c, dict)
        ]
        return found

    def create_page(self, label: str) -> PageRecord:
        """Create a new, empty recipe page."""
        data = self._request(
            'POST', 'addPage', f'create_page({label})', payload={'label': label}
        )
        created = self._pick_created(data, 'page', 'pages')
        record = self._parse(PageRecord.from_api, created, f'create_page({label})')
        if not record.label:
            record.label = label
        return record

    def delete_page(self, page_id: str) -> None:
        """Delete a page and everything on it."""
        page_id = self._validate_id(page_id, 'page_id')
        self._request(
            'DELETE',
            f'deletePage/{page_id}',
            f'delete_page({page_id})',
            not_found=('page', page_id),
        )

    def create_timer(self, page_id: str, label: str, duration: int) -> TimerRecord:
        """Add a timer to a page.

        Raises:
            StoreValidationError: If the store rejects the label or duration
        """
        page_id = self._validate_id(page_id, 'page_id')
        data = self._request(
            'POST',
            'addTimer',
            f'create_timer({page_id})',
            payload={'label': label, 'duration': duration, 'pageId': page_id},
            not_found=('page', page_id),
        )
        return self._parse(
            TimerRecord.from_api,
            self._pick_created(data, 'timer', 'timers'),
            f'create_timer({page_id})',
        )

    def delete_timer(self, timer_id: str) -> None:
        """Delete a timer by identifier."""
        timer_id = self._validate_id(timer_id, 'timer_id')
        self._request(
            'DELETE',
            f'deleteTimer/{timer_id}',
            f'delete_timer({timer_id})',
            not_found=('timer', timer_id),
        )

    def create_converter(
        self,
        page_id: str,
        category: str,
        from_unit: str,
        to_unit: str,
        conversion_factor: float,
    ) -> ConverterRecord:
        """Save a unit converter on a page."""
        page_id = self._validate_id(page_id, 'page_id')
        data = self._request(
            'POST',
            f'pages/{page_id}/unitConverters',
            f'create_converter({page_id})',
            payload={
                'pageId': page_id,
                'category': category,
                'fromUnit': from_unit,
                'toUnit': to_unit,
                'conversionFactor': conversion_factor,
            },
            not_found=('page', page_id),
        )
        return self._parse(
            ConverterRecord.from_api,
            self._pick_created(data, 'unitConverter', 'unitConverters'),
            f'create_converter({page_id})',
        )

    def delete_converter(self, page_id: str, converter_id: str) -> None:
        """Delete a saved unit converter from a page."""
        page_id = self._validate_id(page_id, 'page_id')
        converter_id = self._validate_id(converter_id, 'converter_id')
        self._request(
            'DELETE',
            f'pages/{page_id}/unitConverters/{converter_id}',
            f'delete_converter({page_id}, {converter_id})',
            not_found=('converter', converter_id),
        )

    def login(self, email: str, password: str) -> str:
        """Exchange user credentials for a bearer token.

        Returns:
            The token issued by the store

        Raises:
            UnauthorizedError: If the store rejects the credentials
            TransportError: If the response carries no token
        """
        data = self._request(
            'POST',
            'login',
            'login()',
            payload={'email': email, 'password': password},
            authenticated=False,
        )
        token = data.get('token') if isinstance(data, dict) else None
        if not token:
            raise TransportError("Page store login response did not include a token")
        return str(token)
