"""Ordered set of unit converters shown on one recipe page."""

import itertools
import logging
from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional

from src.models import ConverterRecord
from .converter import ConverterInstance
from .errors import ConverterNotFoundError, LastConverterProtectedError
from .registry import DEFAULT_REGISTRY, ConversionRegistry

if TYPE_CHECKING:
    from src.store_client.api_wrapper import StoreAPI

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Fahrenheit"


class ConverterCollection:
    """Converters of a page in display order; never empty.

    Unsaved converters live only here. Saved ones mirror the page store and
    are rebuilt from it with ``sync()`` after every remote change.

    Example:
        >>> converters = ConverterCollection()
        >>> [c.converter_id for c in converters]
        ['local-1']
    """

    def __init__(
        self,
        records: Optional[Iterable[ConverterRecord]] = None,
        default_category: str = DEFAULT_CATEGORY,
        registry: ConversionRegistry = DEFAULT_REGISTRY,
    ):
        """Initialize the collection.

        Args:
            records: Saved converters to start with
            default_category: Category given to new local converters
            registry: Registry used to resolve categories

        Raises:
            UnknownCategoryError: If default_category is not registered
        """
        registry.lookup(default_category)
        self._registry = registry
        self._default_category = default_category
        self._local_ids = itertools.count(1)
        self._converters: List[ConverterInstance] = []
        self._seeded: Optional[ConverterInstance] = None
        self.sync(records or [])

    def __iter__(self) -> Iterator[ConverterInstance]:
        return iter(list(self._converters))

    def __len__(self) -> int:
        return len(self._converters)

    def _next_local_id(self) -> str:
        taken = {c.converter_id for c in self._converters}
        while True:
            candidate = f"local-{next(self._local_ids)}"
            if candidate not in taken:
                return candidate

    def add(self, category: Optional[str] = None) -> ConverterInstance:
        """Append a new unsaved converter.

        Raises:
            UnknownCategoryError: If category is not registered
        """
        resolved = self._registry.lookup(category or self._default_category)
        converter = ConverterInstance(
            self._next_local_id(), resolved, registry=self._registry
        )
        self._converters.append(converter)
        logger.debug(f"Added local converter {converter.converter_id} ({resolved.key})")
        return converter

    def find(self, converter_id: str) -> ConverterInstance:
        """Return the converter with ``converter_id``.

        Raises:
            ConverterNotFoundError: If no converter has that id
        """
        for converter in self._converters:
            if converter.converter_id == converter_id:
                return converter
        raise ConverterNotFoundError(converter_id)

    def remove(self, converter_id: str) -> ConverterInstance:
        """Remove a converter locally, keeping at least one.

        Raises:
            ConverterNotFoundError: If no converter has that id
            LastConverterProtectedError: If it is the only converter left
        """
        converter = self.find(converter_id)
        if len(self._converters) <= 1:
            raise LastConverterProtectedError(converter_id)
        self._converters.remove(converter)
        return converter

    def save(self, converter_id: str, store: "StoreAPI", page_id: str) -> ConverterRecord:
        """Save one local converter to the page store.

        Raises:
            ConverterNotFoundError: If no converter has that id
            ImmutableOnceSavedError: If it is already saved
            SaveRejectedError: If the store call fails
        """
        return self.find(converter_id).save(store, page_id)

    def delete(
        self,
        converter_id: str,
        store: Optional["StoreAPI"] = None,
        page_id: Optional[str] = None,
    ) -> ConverterInstance:
        """Delete a converter, remotely first when it is saved.

        The last-converter check runs before any remote call. A failed
        remote delete leaves the collection untouched and propagates.

        Raises:
            ConverterNotFoundError: If no converter has that id
            LastConverterProtectedError: If it is the only converter left
            StoreError: If the remote delete fails
        """
        converter = self.find(converter_id)
        if len(self._converters) <= 1:
            raise LastConverterProtectedError(converter_id)

        if converter.persisted:
            if store is None or page_id is None:
                raise ValueError("Deleting a saved converter requires a store and page_id")
            store.delete_converter(page_id, converter_id)
            logger.info(f"Deleted converter {converter_id} from page {page_id}")

        self._converters.remove(converter)
        return converter

    def sync(self, records: Iterable[ConverterRecord]) -> None:
        """Rebuild saved converters from store records.

        Converters already shown keep their typed values when the store
        still has them; unsaved converters are kept after the saved ones.
        An empty result is seeded with one default local converter, which
        is dropped again as soon as the store returns saved converters.
        """
        existing = {c.converter_id: c for c in self._converters if c.persisted}
        rebuilt: List[ConverterInstance] = []

        for record in records:
            converter = existing.get(record.converter_id)
            if converter is None:
                try:
                    converter = ConverterInstance.from_record(record, self._registry)
                except ValueError as e:
                    logger.warning(f"Skipping converter {record.converter_id}: {e}")
                    continue
            rebuilt.append(converter)

        drop_seed = bool(rebuilt) and self._seeded is not None
        for converter in self._converters:
            if not converter.is_local:
                continue
            if drop_seed and converter is self._seeded:
                logger.debug(f"Dropping default converter {converter.converter_id}")
                continue
            rebuilt.append(converter)
        if drop_seed:
            self._seeded = None
        self._converters = rebuilt

        if not self._converters:
            self._seeded = self.add()
