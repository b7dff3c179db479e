"""Timer record data model."""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class TimerRecord:
    """Timer as stored in the page store.

    Attributes:
        timer_id: Server-assigned identifier
        label: Display label (non-empty)
        duration: Countdown length in whole seconds
    """
    timer_id: str
    label: str
    duration: int

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "TimerRecord":
        return cls(
            timer_id=str(data.get("_id", data.get("id", ""))),
            label=str(data.get("label", "")),
            duration=int(data.get("duration", 0) or 0),
        )
