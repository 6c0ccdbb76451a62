"""
Undo handlers: inverse of each line operation.

Each handler turns the working sequence from "just after the operation" into
"just before the operation". Handlers follow one rule when touching Line
objects: placeholders are corrected in place (every snapshot already holding
them sees the correction), real lines are never mutated (a new object is
allocated instead).
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Type

from ..config import ReplayConfig
from ..core.errors import InvalidOperationError, MalformedLineError
from ..core.events import Commit, Delete, Insert, Line, Operation, Update


@dataclass(frozen=True)
class Diagnostic:
    """
    Non-fatal finding reported alongside a reconstruction.

    Fields:
        kind: orphaned_reference, duplicate_line, unresolved_placeholder
            or orphaned_anchor
        ts: Timestamp of the commit that triggered it
        line_id: Line concerned
        message: Human readable description
    """
    kind: str
    ts: int
    line_id: str
    message: str


ORPHANED_REFERENCE = "orphaned_reference"
DUPLICATE_LINE = "duplicate_line"
UNRESOLVED_PLACEHOLDER = "unresolved_placeholder"
ORPHANED_ANCHOR = "orphaned_anchor"


class WorkingSequence:
    """
    Ordered, id-indexed list of Line handles being reverse played.

    Lines are kept in a dict keyed by id: insertion order is page order, and
    replacing a line under the same id keeps its position.
    Snapshots copy the list of handles, never the Line objects.
    """

    def __init__(self, lines: Sequence[Line]) -> None:
        self._by_id: Dict[str, Line] = {}
        for line in lines:
            if line.id in self._by_id:
                raise MalformedLineError(f"Duplicate line id in current state: {line.id}")
            self.append(line)

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self) -> Iterator[Line]:
        return iter(self._by_id.values())

    def __contains__(self, line_id: object) -> bool:
        return line_id in self._by_id

    def find(self, line_id: str) -> Optional[Line]:
        return self._by_id.get(line_id)

    def append(self, line: Line) -> None:
        self._by_id[line.id] = line

    def remove(self, line: Line) -> None:
        if self._by_id.get(line.id) is line:
            del self._by_id[line.id]

    def replace(self, old: Line, new: Line) -> None:
        if old.id != new.id:
            raise ValueError(f"cannot replace line {old.id} with line {new.id}")
        if self._by_id.get(old.id) is old:
            self._by_id[new.id] = new

    def snapshot(self) -> List[Line]:
        return list(self._by_id.values())


@dataclass
class Restoration:
    """
    Placeholder objects standing for one deleted line, newest era first.

    The last entry is the one currently held by the working sequence. When
    the line's Insert is undone, every entry learns its creation time.
    """
    line_id: str
    deleted_at: int
    lines: List[Line] = field(default_factory=list)

    @property
    def current(self) -> Line:
        return self.lines[-1]


@dataclass
class ReplayContext:
    """Mutable state of one reverse sweep."""
    working: WorkingSequence
    config: ReplayConfig
    diagnostics: List[Diagnostic] = field(default_factory=list)
    restorations: Dict[str, Restoration] = field(default_factory=dict)

    def report(self, kind: str, commit: Commit, line_id: str, message: str) -> None:
        self.diagnostics.append(Diagnostic(kind=kind, ts=commit.ts, line_id=line_id, message=message))

    def provisional_ts(self, commit: Commit) -> int:
        return commit.ts - self.config.provisional_tick


# Handler signature: (context, commit, operation) -> None
Handler = Callable[[ReplayContext, Commit, Operation], None]


class UndoRegistry:
    """
    Registry of undo handlers keyed by operation type.

    Usage:
        registry = UndoRegistry()
        registry.register(Insert, undo_insert)
        registry.undo(ctx, commit, op)
    """

    def __init__(self) -> None:
        self._handlers: Dict[type, Handler] = {}

    def register(self, op_type: Type, handler: Handler) -> None:
        self._handlers[op_type] = handler

    def undo(self, ctx: ReplayContext, commit: Commit, op: Operation) -> None:
        """
        Undo one operation of a commit.

        Raises:
            InvalidOperationError: If no handler registered for the operation type
        """
        handler = self._handlers.get(type(op))
        if handler is None:
            raise InvalidOperationError(
                f"No undo handler for operation {type(op).__name__} in commit at {commit.ts}"
            )
        handler(ctx, commit, op)

    def undo_commit(self, ctx: ReplayContext, commit: Commit) -> None:
        """Undo a commit's operations right to left."""
        for op in reversed(commit.operations):
            self.undo(ctx, commit, op)


def undo_insert(ctx: ReplayContext, commit: Commit, op: Insert) -> None:
    line = ctx.working.find(op.line_id)
    if line is None:
        ctx.report(
            ORPHANED_REFERENCE,
            commit,
            op.line_id,
            f"inserted line {op.line_id} is not on the page; insert skipped",
        )
        return

    if line.placeholder:
        restoration = ctx.restorations.pop(op.line_id, None)
        chain = restoration.lines if restoration else [line]
        for held in chain:
            held.created = commit.ts
            held.placeholder = False
        # The oldest era runs from this insert to the next known change
        if line.text is None:
            line.text = op.text
        line.author = commit.author
        line.updated = commit.ts

    ctx.working.remove(line)


def undo_update(ctx: ReplayContext, commit: Commit, op: Update) -> None:
    line = ctx.working.find(op.line_id)
    if line is None:
        ctx.report(
            ORPHANED_REFERENCE,
            commit,
            op.line_id,
            f"updated line {op.line_id} is not on the page; update skipped",
        )
        return

    if not line.placeholder:
        ctx.working.replace(line, line.with_text(op.previous_text))
        return

    # The placeholder spans from this update to the delete that created it
    line.text = op.text
    line.author = commit.author
    line.updated = commit.ts

    earlier = Line(
        id=line.id,
        text=op.previous_text,
        author=None,
        created=line.created,
        updated=ctx.provisional_ts(commit),
        placeholder=True,
    )
    restoration = ctx.restorations.get(op.line_id)
    if restoration is not None:
        restoration.lines.append(earlier)
    ctx.working.replace(line, earlier)


def undo_delete(ctx: ReplayContext, commit: Commit, op: Delete) -> None:
    if op.line_id in ctx.working:
        ctx.report(
            DUPLICATE_LINE,
            commit,
            op.line_id,
            f"deleted line {op.line_id} is still on the page; no placeholder restored",
        )
        return

    ts = ctx.provisional_ts(commit)
    placeholder = Line(
        id=op.line_id,
        text=None,
        author=commit.author,
        created=ts,
        updated=ts,
        placeholder=True,
    )
    ctx.restorations[op.line_id] = Restoration(
        line_id=op.line_id, deleted_at=commit.ts, lines=[placeholder]
    )
    # Deletes carry no position; restored lines go to the end
    ctx.working.append(placeholder)


def default_registry() -> UndoRegistry:
    registry = UndoRegistry()
    registry.register(Insert, undo_insert)
    registry.register(Update, undo_update)
    registry.register(Delete, undo_delete)
    return registry
