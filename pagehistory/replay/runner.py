"""
Replay runner: reconstruct past page states from the current state.

The sweep walks commits newest to oldest. Before undoing a commit it records
the working sequence (a list of Line handles) as the state right after that
commit. Corrections discovered further back are applied to placeholder
objects in place, so snapshots recorded earlier in the sweep pick them up.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from ..config import DEFAULT_UNKNOWN_TEXT, ReplayConfig
from ..core.errors import MalformedCommitError
from ..core.events import Commit, Line
from ..log.store import CommitLog
from ..logging_config import get_logger
from .undo import (
    UNRESOLVED_PLACEHOLDER,
    Diagnostic,
    ReplayContext,
    UndoRegistry,
    WorkingSequence,
    default_registry,
)


@dataclass(frozen=True)
class Reconstruction:
    """
    Result of a reverse replay.

    Fields:
        snapshots: Commit timestamp -> lines right after that commit
        diagnostics: Orphaned references, duplicates and unresolved placeholders
        unknown_text: Display text for lines whose content was never recovered
    """
    snapshots: Dict[int, List[Line]]
    diagnostics: List[Diagnostic] = field(default_factory=list)
    unknown_text: str = DEFAULT_UNKNOWN_TEXT

    def __len__(self) -> int:
        return len(self.snapshots)

    def range(self) -> List[int]:
        """Snapshot timestamps, ascending."""
        return sorted(self.snapshots)

    def get_snapshot(self, ts: int) -> List[Line]:
        return list(self.snapshots.get(ts, []))

    def get_snapshot_text(self, ts: int) -> List[str]:
        """Display text of each line at `ts`; empty for an unknown timestamp."""
        return [line.display_text(self.unknown_text) for line in self.snapshots.get(ts, [])]

    def unresolved_line_ids(self) -> List[str]:
        return sorted({d.line_id for d in self.diagnostics if d.kind == UNRESOLVED_PLACEHOLDER})


def _newest_first(commits: Iterable[Commit]) -> List[Commit]:
    ordered = list(commits)
    for commit in ordered:
        if not isinstance(commit, Commit):
            raise MalformedCommitError(f"Expected Commit, got {type(commit).__name__}")
    # Stable: commits sharing a timestamp keep their given order
    return sorted(ordered, key=lambda c: c.ts, reverse=True)


def reconstruct(
    current_lines: Sequence[Line],
    commits: Iterable[Commit],
    config: Optional[ReplayConfig] = None,
    registry: Optional[UndoRegistry] = None,
    trace_id: Optional[str] = None,
) -> Reconstruction:
    """
    Rebuild the page as it was right after every commit.

    The Line objects in `current_lines` are taken over by the sweep and may
    end up shared by several snapshots; pass copy_lines(...) to keep the
    originals untouched.

    Args:
        current_lines: Page lines as they are now, in page order
        commits: Commit log (newest first; reordered by timestamp if not)
        config: Reconstruction settings (defaults to ReplayConfig())
        registry: Undo handlers (defaults to default_registry())
        trace_id: Correlation id for log records

    Returns:
        Reconstruction with one snapshot per distinct commit timestamp

    Raises:
        MalformedCommitError: If the log holds something that is not a Commit
        MalformedLineError: If current_lines repeats a line id
        InvalidOperationError: If an operation type has no undo handler
    """
    config = config or ReplayConfig()
    registry = registry or default_registry()
    log = get_logger(__name__, trace_id=trace_id)

    ordered = _newest_first(commits)
    ctx = ReplayContext(working=WorkingSequence(current_lines), config=config)
    snapshots: Dict[int, List[Line]] = {}

    for commit in ordered:
        # The newest of several commits sharing a timestamp defines the state
        if commit.ts not in snapshots:
            snapshots[commit.ts] = ctx.working.snapshot()
        registry.undo_commit(ctx, commit)

    for restoration in ctx.restorations.values():
        held = restoration.current
        if held.known:
            message = f"line {restoration.line_id} restored, creation time unknown"
        else:
            message = f"line {restoration.line_id} restored, content unknown"
        ctx.diagnostics.append(
            Diagnostic(
                kind=UNRESOLVED_PLACEHOLDER,
                ts=restoration.deleted_at,
                line_id=restoration.line_id,
                message=message,
            )
        )

    log.debug(
        "Reconstructed %d snapshots from %d commits (%d diagnostics)",
        len(snapshots),
        len(ordered),
        len(ctx.diagnostics),
    )
    for diagnostic in ctx.diagnostics:
        log.debug("%s at %d: %s", diagnostic.kind, diagnostic.ts, diagnostic.message)

    return Reconstruction(
        snapshots=snapshots,
        diagnostics=list(ctx.diagnostics),
        unknown_text=config.unknown_text,
    )


def reconstruct_from_log(
    log: CommitLog,
    current_lines: Sequence[Line],
    config: Optional[ReplayConfig] = None,
    trace_id: Optional[str] = None,
) -> Reconstruction:
    """Reconstruct using every commit a CommitLog yields."""
    return reconstruct(current_lines, log.read(), config=config, trace_id=trace_id)
