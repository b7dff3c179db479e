"""Page session orchestrating one open recipe page.

This module provides the PageSession class that loads a page from the
store, owns its timers and converters, and keeps them in step with the
store by reloading the whole page after every successful remote change.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, Set, Tuple

from src.conversions import (
    DEFAULT_CATEGORY,
    DEFAULT_REGISTRY,
    ConversionRegistry,
    ConverterCollection,
    ConverterInstance,
    SaveRejectedError,
)
from src.models import PageRecord
from src.store_client.api_wrapper import StoreAPI
from src.store_client.errors import NotFoundError, PageNotFoundError, StoreError
from src.timers import DEFAULT_DURATION, Scheduler, TimerCollection, TimerState
from src.timers.collection import LOCAL_ID_PREFIX, validate_timer_input
from .errors import LoadFailedError, OperationInProgressError, SessionClosedError
from .models import OperationResult, SessionState

logger = logging.getLogger(__name__)


class PageSession:
    """One open recipe page: its timers, its converters and their sync.

    Local validation and policy violations raise before any remote call.
    Remote failures are caught here and returned as a failed
    OperationResult with local state left as it was.

    Usage:
        session = PageSession(page_id, store, AsyncioScheduler(), on_complete=beep)
        session.load()

        session.add_timer("Proof dough", 45 * 60)
        session.timers.find(timer_id).start()

        converter = session.add_converter("grams")
        converter.set_field1("8")
        session.save_converter(converter.converter_id)

        session.close()   # cancels every pending tick
    """

    def __init__(
        self,
        page_id: str,
        store: StoreAPI,
        scheduler: Scheduler,
        on_complete: Optional[Callable[[TimerState], None]] = None,
        default_duration: int = DEFAULT_DURATION,
        default_category: str = DEFAULT_CATEGORY,
        registry: ConversionRegistry = DEFAULT_REGISTRY,
    ):
        """Create a session; nothing is fetched until load().

        Args:
            page_id: Identifier of the page to open
            store: Page store client
            scheduler: Clock driving the timers
            on_complete: Notifier fired when any timer reaches zero
            default_duration: Duration for timers added without one
            default_category: Category for new local converters
            registry: Conversion categories available to converters

        Raises:
            ValueError: If page_id is empty
        """
        if not page_id or not str(page_id).strip():
            raise ValueError("No page ID provided")

        self.page_id = str(page_id).strip()
        self.state = SessionState.LOADING
        self.page: Optional[PageRecord] = None
        self.error: Optional[str] = None
        self.timers = TimerCollection(
            scheduler, on_complete=on_complete, default_duration=default_duration
        )
        self.converters = ConverterCollection(
            default_category=default_category, registry=registry
        )
        self._store = store
        self._in_flight: Set[Tuple[str, str]] = set()

    def __enter__(self) -> "PageSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def label(self) -> str:
        return self.page.label if self.page else ""

    def _require_open(self) -> None:
        if self.state is SessionState.CLOSED:
            raise SessionClosedError(self.page_id)

    @contextmanager
    def _in_flight_guard(self, entity: str, entity_id: str) -> Iterator[None]:
        """Reject a second remote call on the same entity while one runs."""
        key = (entity, entity_id)
        if key in self._in_flight:
            raise OperationInProgressError(entity, entity_id)
        self._in_flight.add(key)
        try:
            yield
        finally:
            self._in_flight.discard(key)

    def load(self) -> PageRecord:
        """Fetch the page and sync timers and converters from it.

        Returns:
            The loaded PageRecord

        Raises:
            PageNotFoundError: If the store has no such page (state NOT_FOUND)
            LoadFailedError: If the store call fails (state ERROR)
            SessionClosedError: If the session was closed
        """
        self._require_open()
        self.state = SessionState.LOADING
        logger.debug(f"Loading page {self.page_id}")

        try:
            page = self._store.get_page(self.page_id)
        except PageNotFoundError:
            page = None
        except StoreError as e:
            self.state = SessionState.ERROR
            self.error = "Error loading page data. Please try again."
            logger.error(f"Loading page {self.page_id} failed: {e}")
            raise LoadFailedError(self.page_id, str(e)) from e

        if page is None:
            self.state = SessionState.NOT_FOUND
            self.error = "Page not found"
            logger.warning(f"Page {self.page_id} not found")
            raise PageNotFoundError(self.page_id)

        self.page = page
        self.timers.sync(page.timers)
        self.converters.sync(page.converters)
        self.state = SessionState.READY
        self.error = None
        logger.info(
            f"Loaded page {self.page_id} ({page.label}): "
            f"{len(page.timers)} timer(s), {len(page.converters)} converter(s)"
        )
        return page

    def reload(self) -> PageRecord:
        """Alias of load() used after remote changes."""
        return self.load()

    def _resync(self) -> bool:
        """Reload after a remote change; report instead of raising."""
        try:
            self.reload()
        except (PageNotFoundError, LoadFailedError) as e:
            logger.warning(f"Refreshing page {self.page_id} failed: {e}")
            return False
        return True

    def _failed(self, operation: str, entity_id: Optional[str], error: Exception,
                refreshed: bool = False) -> OperationResult:
        self.error = str(error)
        logger.warning(f"{operation} failed for {entity_id or self.page_id}: {error}")
        return OperationResult(
            success=False,
            operation=operation,
            entity_id=entity_id,
            refreshed=refreshed,
            error=str(error),
            cause=error,
        )

    def add_timer(self, label: str, duration: Optional[int] = None) -> OperationResult:
        """Create a timer in the store, then reload the page.

        Raises:
            InvalidLabelError: If the label is empty (no remote call made)
            InvalidDurationError: If duration is not a positive integer
        """
        self._require_open()
        if duration is None:
            duration = self.timers.default_duration
        label, duration = validate_timer_input(label, duration)

        try:
            record = self._store.create_timer(self.page_id, label, duration)
        except NotFoundError as e:
            return self._failed("add_timer", None, e, refreshed=self._resync())
        except StoreError as e:
            return self._failed("add_timer", None, e)

        logger.info(f"Added timer {record.timer_id} ({label}) to page {self.page_id}")
        return OperationResult(
            success=True,
            operation="add_timer",
            entity_id=record.timer_id,
            refreshed=self._resync(),
        )

    def delete_timer(self, timer_id: str) -> OperationResult:
        """Stop a timer, delete it from the store, then reload the page.

        The timer stops ticking before the remote call. If the store call
        fails the timer is put back and resumes if it was running.

        Raises:
            TimerNotFoundError: If the page has no such timer
            OperationInProgressError: If this timer is already being deleted
        """
        self._require_open()
        with self._in_flight_guard("timer", timer_id):
            position, timer = self.timers.remove(timer_id)

            if timer_id.startswith(LOCAL_ID_PREFIX):
                return OperationResult(success=True, operation="delete_timer",
                                       entity_id=timer_id)

            try:
                self._store.delete_timer(timer_id)
            except NotFoundError as e:
                return self._failed("delete_timer", timer_id, e, refreshed=self._resync())
            except StoreError as e:
                self.timers.restore(position, timer)
                return self._failed("delete_timer", timer_id, e)

            logger.info(f"Deleted timer {timer_id} from page {self.page_id}")
            return OperationResult(
                success=True,
                operation="delete_timer",
                entity_id=timer_id,
                refreshed=self._resync(),
            )

    def add_converter(self, category: Optional[str] = None) -> ConverterInstance:
        """Append a local (unsaved) converter; no remote call."""
        self._require_open()
        return self.converters.add(category)

    def remove_converter(self, converter_id: str) -> ConverterInstance:
        """Remove a converter locally only.

        Raises:
            LastConverterProtectedError: If it is the only converter left
        """
        self._require_open()
        return self.converters.remove(converter_id)

    def save_converter(self, converter_id: str) -> OperationResult:
        """Save a local converter to the store, then reload the page.

        Raises:
            ConverterNotFoundError: If the page has no such converter
            ImmutableOnceSavedError: If it is already saved (no remote call)
            OperationInProgressError: If this converter is already being saved
        """
        self._require_open()
        with self._in_flight_guard("converter", converter_id):
            converter = self.converters.find(converter_id)
            try:
                record = converter.save(self._store, self.page_id)
            except SaveRejectedError as e:
                refreshed = False
                if isinstance(e.__cause__, NotFoundError):
                    refreshed = self._resync()
                return self._failed("save_converter", converter_id, e, refreshed=refreshed)

            return OperationResult(
                success=True,
                operation="save_converter",
                entity_id=record.converter_id,
                refreshed=self._resync(),
            )

    def delete_converter(self, converter_id: str) -> OperationResult:
        """Delete a converter; saved ones are deleted in the store first.

        Raises:
            ConverterNotFoundError: If the page has no such converter
            LastConverterProtectedError: If it is the only converter left
                (checked before any remote call)
            OperationInProgressError: If this converter is already being deleted
        """
        self._require_open()
        with self._in_flight_guard("converter", converter_id):
            was_saved = self.converters.find(converter_id).persisted
            try:
                self.converters.delete(converter_id, self._store, self.page_id)
            except NotFoundError as e:
                return self._failed("delete_converter", converter_id, e,
                                    refreshed=self._resync())
            except StoreError as e:
                return self._failed("delete_converter", converter_id, e)

            return OperationResult(
                success=True,
                operation="delete_converter",
                entity_id=converter_id,
                refreshed=self._resync() if was_saved else False,
            )

    def close(self) -> None:
        """Cancel every pending timer callback and close the session.

        Called when navigating away from the page or when the user's
        session ends.
        """
        if self.state is SessionState.CLOSED:
            return
        self.timers.cancel_all()
        self.state = SessionState.CLOSED
        logger.debug(f"Closed session for page {self.page_id}")
