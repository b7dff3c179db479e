"""Unit converter record data model."""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class ConverterRecord:
    """Unit converter as stored in the page store.

    Attributes:
        converter_id: Server-assigned identifier
        category: Conversion category key (e.g., "Fahrenheit")
        from_unit: Label of the first unit
        to_unit: Label of the second unit
        conversion_factor: Factor fixed at save time
    """
    converter_id: str
    category: str
    from_unit: str
    to_unit: str
    conversion_factor: float

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ConverterRecord":
        return cls(
            converter_id=str(data.get("_id", data.get("id", ""))),
            category=str(data.get("category", "")),
            from_unit=str(data.get("fromUnit", "")),
            to_unit=str(data.get("toUnit", "")),
            conversion_factor=float(data.get("conversionFactor", 0.0) or 0.0),
        )
