"""
Engine configuration from environment variables.

Environment Variables:
    PAGEHISTORY_UNKNOWN_TEXT: Text shown for lines whose content was never
        recovered - default: "<content unknown>"
    PAGEHISTORY_PROVISIONAL_TICK: How far before the deleting commit a
        restored line's provisional timestamps are placed - default: 1
"""

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_UNKNOWN_TEXT = "<content unknown>"
DEFAULT_PROVISIONAL_TICK = 1


def _env_int(key: str) -> Optional[int]:
    val = os.getenv(key)
    if not val:
        return None
    try:
        parsed = int(val)
    except ValueError:
        return None
    return parsed if parsed > 0 else None


@dataclass(frozen=True)
class ReplayConfig:
    """
    Reconstruction settings.

    Fields:
        unknown_text: Display text for unresolved placeholders
        provisional_tick: Offset subtracted from the deleting commit's
            timestamp to date a freshly restored line
    """
    unknown_text: str = DEFAULT_UNKNOWN_TEXT
    provisional_tick: int = DEFAULT_PROVISIONAL_TICK

    def __post_init__(self) -> None:
        if self.provisional_tick < 1:
            raise ValueError("provisional_tick must be a positive integer")

    @staticmethod
    def from_env() -> "ReplayConfig":
        return ReplayConfig(
            unknown_text=os.getenv("PAGEHISTORY_UNKNOWN_TEXT") or DEFAULT_UNKNOWN_TEXT,
            provisional_tick=_env_int("PAGEHISTORY_PROVISIONAL_TICK") or DEFAULT_PROVISIONAL_TICK,
        )
