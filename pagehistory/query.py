"""
Query helpers over reconstructed snapshots.

These back a discrete time selector: positions 0..len(range)-1 map to the
ascending snapshot timestamps.
"""

import bisect
from typing import Dict, List, Optional, Sequence

from .config import DEFAULT_UNKNOWN_TEXT
from .core.events import Line

Snapshots = Dict[int, List[Line]]


def timestamps_range(snapshots: Snapshots) -> List[int]:
    return sorted(snapshots)


def snapshot_text(snapshots: Snapshots, ts: int, unknown: str = DEFAULT_UNKNOWN_TEXT) -> List[str]:
    """Line texts at `ts`; empty list when no snapshot exists for `ts`."""
    return [line.display_text(unknown) for line in snapshots.get(ts, [])]


def snapshot_at_index(snapshots: Snapshots, index: int) -> Optional[int]:
    """
    Timestamp at a selector position.

    Negative positions count from the newest snapshot, like list indexing.
    Returns None when the position is out of range.
    """
    stamps = timestamps_range(snapshots)
    try:
        return stamps[index]
    except IndexError:
        return None


def nearest_timestamp(snapshots: Snapshots, ts: int) -> Optional[int]:
    """
    Latest snapshot timestamp at or before `ts`.

    None when `ts` predates every snapshot (or there are none).
    """
    stamps = timestamps_range(snapshots)
    pos = bisect.bisect_right(stamps, ts)
    return stamps[pos - 1] if pos else None


def line_at(snapshots: Snapshots, ts: int, line_id: str) -> Optional[Line]:
    for line in snapshots.get(ts, []):
        if line.id == line_id:
            return line
    return None


def count_placeholders(lines: Sequence[Line]) -> int:
    return sum(1 for line in lines if line.placeholder)
