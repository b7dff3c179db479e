"""Bidirectional unit conversion engine.

Key classes:
    ConversionRegistry: Immutable table of conversion categories
    ConverterInstance: One converter with two linked fields
    ConverterCollection: The converters of a page, never empty
"""

from .errors import (
    ConversionError,
    UnknownCategoryError,
    ImmutableOnceSavedError,
    LastConverterProtectedError,
    ConverterNotFoundError,
    SaveRejectedError,
)
from .registry import (
    BUILTIN_CATEGORIES,
    DEFAULT_REGISTRY,
    Category,
    ConversionRegistry,
    lookup,
)
from .converter import ConverterInstance, ConverterState, derive_display, parse_number
from .collection import DEFAULT_CATEGORY, ConverterCollection

__all__ = [
    "ConversionRegistry",
    "Category",
    "BUILTIN_CATEGORIES",
    "DEFAULT_REGISTRY",
    "lookup",
    "ConverterInstance",
    "ConverterState",
    "derive_display",
    "parse_number",
    "ConverterCollection",
    "DEFAULT_CATEGORY",
    "ConversionError",
    "UnknownCategoryError",
    "ImmutableOnceSavedError",
    "LastConverterProtectedError",
    "ConverterNotFoundError",
    "SaveRejectedError",
]
