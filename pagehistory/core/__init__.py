"""
Core page history primitives.

This module provides the foundational records:
- Line: One line of a page (mutable only while it is a placeholder)
- Insert, Update, Delete: Line operations recorded by a commit
- Commit: Immutable batch of operations at one timestamp
- Canonical: Deterministic serialization of snapshots
"""

from .events import END, Commit, Delete, Insert, Line, Operation, Update, copy_lines
from .canonical import (
    canonicalize,
    canonical_json_bytes,
    canonical_json_str,
    line_to_dict,
    snapshot_digest,
    snapshot_to_list,
)
from .errors import (
    CommitLogError,
    DecodeError,
    InvalidOperationError,
    MalformedCommitError,
    MalformedLineError,
    PageHistoryError,
)

__all__ = [
    "END",
    "Commit",
    "Delete",
    "Insert",
    "Line",
    "Operation",
    "Update",
    "copy_lines",
    "canonicalize",
    "canonical_json_bytes",
    "canonical_json_str",
    "line_to_dict",
    "snapshot_digest",
    "snapshot_to_list",
    "PageHistoryError",
    "MalformedCommitError",
    "MalformedLineError",
    "InvalidOperationError",
    "DecodeError",
    "CommitLogError",
]
