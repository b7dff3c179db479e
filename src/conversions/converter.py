"""Bidirectional unit converter bound to a conversion category.

A converter shows two text fields. Whichever field the user edited last is
authoritative and is kept exactly as typed; the other field is derived from
it and rounded to two decimals.
"""

import logging
import math
from enum import Enum
from typing import TYPE_CHECKING, Optional

from src.models import ConverterRecord
from src.store_client.errors import StoreError
from .errors import ImmutableOnceSavedError, SaveRejectedError
from .registry import DEFAULT_REGISTRY, Category, ConversionRegistry

if TYPE_CHECKING:
    from src.store_client.api_wrapper import StoreAPI

logger = logging.getLogger(__name__)

DISPLAY_PRECISION = 2


class ConverterState(Enum):
    """Which field currently drives the other."""

    EMPTY = "empty"
    FORWARD = "forward"
    REVERSE = "reverse"


def parse_number(text: Optional[str]) -> Optional[float]:
    """Parse a field value, returning None for blank or non-numeric text.

    Digit-grouping underscores are refused even though float() takes them.
    """
    if text is None or not text.strip() or "_" in text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def derive_display(category: Category, text: Optional[str], reverse: bool = False) -> str:
    """Compute the derived field for ``text`` under ``category``.

    Args:
        category: Category whose formulas apply
        text: Contents of the driving field
        reverse: True when the driving field is field 2

    Returns:
        The other field rounded to two decimals, or "" if text is not a number
    """
    value = parse_number(text)
    if value is None:
        return ""
    formula = category.reverse if reverse else category.forward
    return f"{formula(value):.{DISPLAY_PRECISION}f}"


class ConverterInstance:
    """One converter card: a category plus two linked display fields.

    Attributes:
        converter_id: "local-N" until saved, then the store's identifier
        category: Active conversion category
        field1: Text of the unit1 field
        field2: Text of the unit2 field
        state: Which field is authoritative
        persisted: True once saved to the page store
        custom_label: "<fromUnit> to <toUnit>", fixed when saved

    Example:
        >>> converter = ConverterInstance("local-1", DEFAULT_REGISTRY.lookup("Fahrenheit"))
        >>> converter.set_field1("0")
        >>> converter.field2
        '32.00'
    """

    def __init__(
        self,
        converter_id: str,
        category: Category,
        persisted: bool = False,
        custom_label: Optional[str] = None,
        registry: ConversionRegistry = DEFAULT_REGISTRY,
    ):
        self.converter_id = converter_id
        self.category = category
        self.persisted = persisted
        self.custom_label = custom_label
        self.field1 = ""
        self.field2 = ""
        self.state = ConverterState.EMPTY
        self._registry = registry

    @classmethod
    def from_record(
        cls,
        record: ConverterRecord,
        registry: ConversionRegistry = DEFAULT_REGISTRY,
    ) -> "ConverterInstance":
        """Build a persisted converter from a store record.

        Known categories keep their registry formulas; unknown ones convert
        linearly with the stored factor.
        """
        if record.category in registry:
            category = registry.lookup(record.category)
        else:
            category = Category.linear(
                record.category,
                record.from_unit,
                record.to_unit,
                record.conversion_factor,
            )
        from_unit = record.from_unit or category.unit1
        to_unit = record.to_unit or category.unit2
        return cls(
            record.converter_id,
            category,
            persisted=True,
            custom_label=f"{from_unit} to {to_unit}",
            registry=registry,
        )

    @property
    def is_local(self) -> bool:
        return not self.persisted

    @property
    def from_unit(self) -> str:
        return self.category.unit1

    @property
    def to_unit(self) -> str:
        return self.category.unit2

    @property
    def conversion_factor(self) -> float:
        return self.category.factor

    @property
    def display_label(self) -> str:
        """Label shown for the converter card."""
        return self.custom_label or self.category.label

    def set_field1(self, text: str) -> None:
        """Set field 1 as typed and derive field 2 from it."""
        self.field1 = text
        if parse_number(text) is None:
            self.field2 = ""
            self.state = ConverterState.EMPTY
            return
        self.field2 = derive_display(self.category, text)
        self.state = ConverterState.FORWARD

    def set_field2(self, text: str) -> None:
        """Set field 2 as typed and derive field 1 from it."""
        self.field2 = text
        if parse_number(text) is None:
            self.field1 = ""
            self.state = ConverterState.EMPTY
            return
        self.field1 = derive_display(self.category, text, reverse=True)
        self.state = ConverterState.REVERSE

    def set_category(self, key: str) -> None:
        """Switch an unsaved converter to another category.

        Field 1 is kept as is; if it holds a number, field 2 is re-derived
        under the new category.

        Raises:
            ImmutableOnceSavedError: If the converter has been saved
            UnknownCategoryError: If the key is not registered
        """
        if self.persisted:
            raise ImmutableOnceSavedError(self.converter_id)

        self.category = self._registry.lookup(key)
        logger.debug(f"Converter {self.converter_id} category -> {key}")
        if parse_number(self.field1) is not None:
            self.set_field1(self.field1)

    def save(self, store: "StoreAPI", page_id: str) -> ConverterRecord:
        """Persist the converter's category, unit pair and factor.

        On success the converter takes the store's identifier and its
        category is locked. On failure nothing changes.

        Raises:
            ImmutableOnceSavedError: If the converter is already saved
            SaveRejectedError: If the store call fails
        """
        if self.persisted:
            raise ImmutableOnceSavedError(self.converter_id)

        try:
            record = store.create_converter(
                page_id,
                self.category.key,
                self.from_unit,
                self.to_unit,
                self.conversion_factor,
            )
        except StoreError as e:
            logger.warning(f"Saving converter {self.converter_id} failed: {e}")
            raise SaveRejectedError(self.converter_id, str(e)) from e

        logger.info(f"Saved converter {self.converter_id} as {record.converter_id}")
        self.converter_id = record.converter_id
        self.persisted = True
        self.custom_label = (
            f"{record.from_unit or self.from_unit} to {record.to_unit or self.to_unit}"
        )
        return record

    def __repr__(self) -> str:
        return (
            f"ConverterInstance(id={self.converter_id!r}, category={self.category.key!r}, "
            f"state={self.state.value}, persisted={self.persisted})"
        )
