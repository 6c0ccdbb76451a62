"""
Reverse replay of page commit logs.

Replay undoes commits newest to oldest, starting from the current page, and
records the page right after each commit.
"""

from .runner import Reconstruction, reconstruct, reconstruct_from_log
from .undo import (
    DUPLICATE_LINE,
    ORPHANED_ANCHOR,
    ORPHANED_REFERENCE,
    UNRESOLVED_PLACEHOLDER,
    Diagnostic,
    UndoRegistry,
    default_registry,
)
from .history import LineEvent, LineHistory, LineSnapshots, build_line_history

__all__ = [
    "Reconstruction",
    "reconstruct",
    "reconstruct_from_log",
    "Diagnostic",
    "UndoRegistry",
    "default_registry",
    "ORPHANED_REFERENCE",
    "ORPHANED_ANCHOR",
    "DUPLICATE_LINE",
    "UNRESOLVED_PLACEHOLDER",
    "LineEvent",
    "LineHistory",
    "LineSnapshots",
    "build_line_history",
]
