"""
Per-line history: every line that ever existed, in page order, with the
text it carried at each commit that touched it.

This is a forward pass over the log (oldest commit first). It does not need
the current page and never reconstructs whole snapshots.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from ..core.events import END, Commit, Delete, Insert, Update
from ..logging_config import get_logger
from .undo import ORPHANED_ANCHOR, ORPHANED_REFERENCE, Diagnostic

INSERT = "insert"
UPDATE = "update"
DELETE = "delete"


@dataclass(frozen=True)
class LineEvent:
    """What happened to a line at one timestamp (text is None for deletes)."""
    kind: str
    text: Optional[str]
    author: Optional[str]


@dataclass
class LineSnapshots:
    """All recorded events of one line, keyed by commit timestamp."""
    id: str
    snapshots: Dict[int, LineEvent] = field(default_factory=dict)

    def text_at(self, ts: int) -> Optional[str]:
        """
        Text the line showed at `ts`.

        None when the line did not exist yet or had been deleted.
        """
        text: Optional[str] = None
        for at in sorted(self.snapshots):
            if at > ts:
                break
            text = self.snapshots[at].text
        return text


@dataclass(frozen=True)
class LineHistory:
    """
    Result of build_line_history.

    Fields:
        history: Lines in page order
        range: Ascending timestamps that carry at least one line operation
        diagnostics: Missing anchors and references to unknown lines
    """
    history: List[LineSnapshots]
    range: List[int]
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def text_at(self, ts: int) -> List[str]:
        """Page text at `ts`, lines without text at that time left out."""
        texts = []
        for line in self.history:
            text = line.text_at(ts)
            if text is not None:
                texts.append(text)
        return texts


def build_line_history(commits: Iterable[Commit], trace_id: Optional[str] = None) -> LineHistory:
    """
    Build per-line histories from a commit log.

    Args:
        commits: Commit log in any order (processed oldest first)
        trace_id: Correlation id for log records

    Returns:
        LineHistory with every inserted line in page order
    """
    log = get_logger(__name__, trace_id=trace_id)
    ordered = sorted(commits, key=lambda c: c.ts)

    lines: List[LineSnapshots] = []
    by_id: Dict[str, LineSnapshots] = {}
    diagnostics: List[Diagnostic] = []
    stamps = set()

    for commit in ordered:
        for op in commit.operations:
            stamps.add(commit.ts)
            if isinstance(op, Insert):
                line = LineSnapshots(id=op.line_id)
                line.snapshots[commit.ts] = LineEvent(INSERT, op.text, commit.author)
                by_id[op.line_id] = line
                if op.anchor_id == END:
                    lines.append(line)
                    continue
                anchor = by_id.get(op.anchor_id)
                if anchor is None:
                    diagnostics.append(
                        Diagnostic(
                            kind=ORPHANED_ANCHOR,
                            ts=commit.ts,
                            line_id=op.line_id,
                            message=f"anchor {op.anchor_id} not found; line appended at end",
                        )
                    )
                    lines.append(line)
                    continue
                position = next(idx for idx, held in enumerate(lines) if held is anchor)
                lines.insert(position, line)
                continue

            line = by_id.get(op.line_id)
            if line is None:
                diagnostics.append(
                    Diagnostic(
                        kind=ORPHANED_REFERENCE,
                        ts=commit.ts,
                        line_id=op.line_id,
                        message=f"line {op.line_id} has no recorded insert; change ignored",
                    )
                )
                continue
            if isinstance(op, Update):
                line.snapshots[commit.ts] = LineEvent(UPDATE, op.text, commit.author)
            elif isinstance(op, Delete):
                line.snapshots[commit.ts] = LineEvent(DELETE, None, commit.author)

    for diagnostic in diagnostics:
        log.warning("%s at %d: %s", diagnostic.kind, diagnostic.ts, diagnostic.message)

    return LineHistory(history=lines, range=sorted(stamps), diagnostics=diagnostics)
