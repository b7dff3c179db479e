"""Registry of the built-in unit conversion categories.

Each category pairs a forward formula (unit1 -> unit2) with its exact
algebraic inverse (unit2 -> unit1), so ``reverse(forward(x)) == x`` up to
double-precision rounding. The registry is read-only once constructed.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterable, Iterator, List, Optional

from .errors import UnknownCategoryError


@dataclass(frozen=True)
class Category:
    """A named conversion rule pair.

    Attributes:
        key: Registry key (e.g., "Fahrenheit")
        label: Human-readable description (e.g., "Celsius to Fahrenheit")
        unit1: Unit of the first field
        unit2: Unit of the second field
        factor: Linear scaling factor submitted when a converter is saved
        forward: Converts a unit1 value to unit2
        reverse: Converts a unit2 value to unit1
    """
    key: str
    label: str
    unit1: str
    unit2: str
    factor: float
    forward: Callable[[float], float] = field(compare=False, repr=False)
    reverse: Callable[[float], float] = field(compare=False, repr=False)

    @classmethod
    def linear(
        cls,
        key: str,
        unit1: str,
        unit2: str,
        factor: float,
        label: Optional[str] = None,
    ) -> "Category":
        """Build a category where value2 = value1 x factor.

        Raises:
            ValueError: If factor is not a positive number
        """
        if not factor or factor <= 0:
            raise ValueError(f"Conversion factor must be positive, got {factor}")
        return cls(
            key=key,
            label=label or f"{unit1} to {unit2}",
            unit1=unit1,
            unit2=unit2,
            factor=factor,
            forward=lambda value: value * factor,
            reverse=lambda value: value / factor,
        )


BUILTIN_CATEGORIES = (
    Category.linear("mL", "Cups", "mL", 236.588, label="Cups to Milliliters"),
    Category(
        key="Fahrenheit",
        label="Celsius to Fahrenheit",
        unit1="Celsius",
        unit2="Fahrenheit",
        factor=1.8,
        forward=lambda c: (c * 9) / 5 + 32,
        reverse=lambda f: ((f - 32) * 5) / 9,
    ),
    Category.linear("grams", "oz", "g", 28.35, label="Ounces to Grams"),
    Category.linear("pounds", "kg", "lb", 2.20462, label="Kilograms to Pounds"),
    Category.linear("tbsp", "tbsp", "mL", 14.787, label="Tablespoons to Milliliters"),
    Category.linear("tsp", "tsp", "mL", 4.929, label="Teaspoons to Milliliters"),
)


class ConversionRegistry:
    """Immutable lookup table of conversion categories.

    Example:
        >>> registry = ConversionRegistry(BUILTIN_CATEGORIES)
        >>> registry.lookup("Fahrenheit").forward(100)
        212.0
    """

    def __init__(self, categories: Iterable[Category]):
        table = {}
        for category in categories:
            if category.key in table:
                raise ValueError(f"Duplicate conversion category '{category.key}'")
            table[category.key] = category
        self._categories = MappingProxyType(table)

    def lookup(self, key: str) -> Category:
        """Return the category for ``key``.

        Raises:
            UnknownCategoryError: If the key is not registered
        """
        try:
            return self._categories[key]
        except KeyError:
            raise UnknownCategoryError(key) from None

    def categories(self) -> List[str]:
        """Return category keys in definition order."""
        return list(self._categories)

    def __contains__(self, key: object) -> bool:
        return key in self._categories

    def __iter__(self) -> Iterator[Category]:
        return iter(self._categories.values())

    def __len__(self) -> int:
        return len(self._categories)


DEFAULT_REGISTRY = ConversionRegistry(BUILTIN_CATEGORIES)


def lookup(key: str) -> Category:
    """Look up a built-in category by key."""
    return DEFAULT_REGISTRY.lookup(key)
