"""Recipe page data model."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from src.models.converter import ConverterRecord
from src.models.timer import TimerRecord


@dataclass
class PageRecord:
    """Recipe page fetched from the page store.

    Represents a page with everything a PageSession needs to open it.

    Attributes:
        page_id: Unique identifier for the page
        label: Page label shown on the dashboard
        timers: Timers in display order
        converters: Saved unit converters in display order
    """
    page_id: str
    label: str
    timers: List[TimerRecord] = field(default_factory=list)
    converters: List[ConverterRecord] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PageRecord":
        """Build a PageRecord from a dashboard page object.

        Args:
            data: Page dictionary as returned by the store (``_id``,
                ``label``, ``timers`` and optionally ``unitConverters``)

        Returns:
            PageRecord with parsed timers and converters
        """
        return cls(
            page_id=str(data.get("_id", data.get("id", ""))),
            label=str(data.get("label", "")),
            timers=[TimerRecord.from_api(t) for t in data.get("timers") or []],
            converters=[
                ConverterRecord.from_api(c)
                for c in data.get("unitConverters") or []
            ],
        )
