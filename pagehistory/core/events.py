"""
Event model for page history reconstruction.

Commits and their operations are immutable records of forward edits.
Lines are the only mutable records: a line restored from a Delete starts
as a placeholder whose provisional fields are corrected in place once older
commits reveal its content.
"""

from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Tuple, Union

from .errors import MalformedCommitError, MalformedLineError

# Anchor value meaning "append at end of page"
END = "_end"


def _require_ts(value: object, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedCommitError(f"{what} must be an integer timestamp, got {value!r}")
    return value


@dataclass
class Line:
    """
    One line of a page.

    Fields:
        id: Stable line identifier
        text: Line content (None while unknown)
        author: User id of the last author
        created: Timestamp of the original insertion
        updated: Timestamp of the most recent content change
        placeholder: True while any field above is provisional

    A placeholder is the reverse of a Delete. Its text, author and
    timestamps are filled in as older commits are undone.
    """
    id: str
    text: Optional[str]
    author: Optional[str] = None
    created: int = 0
    updated: int = 0
    placeholder: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise MalformedLineError(f"Line.id must be a non-empty string, got {self.id!r}")

    @property
    def known(self) -> bool:
        """True when the line text has been recovered."""
        return self.text is not None

    def display_text(self, unknown: str) -> str:
        return self.text if self.text is not None else unknown

    def with_text(self, text: str) -> "Line":
        """
        Copy of this line carrying different text.

        Used when undoing an update on a real line: the newer object stays
        untouched so snapshots that already hold it keep their content.

        Only the text is rolled back. `author` and `updated` are copied from
        the newer line, so in older snapshots they can describe a later edit
        than the snapshot itself (even `updated` > snapshot ts). Treat them as
        "last known" values, not as the history of that era.
        """
        return replace(self, text=text)


@dataclass(frozen=True)
class Insert:
    """New line `line_id` inserted before `anchor_id` (or at END)."""
    line_id: str
    anchor_id: str
    text: str


@dataclass(frozen=True)
class Update:
    """Line `line_id` changed from `previous_text` to `text`."""
    line_id: str
    text: str
    previous_text: str


@dataclass(frozen=True)
class Delete:
    """Line `line_id` removed. The deleted content is not recorded."""
    line_id: str


Operation = Union[Insert, Update, Delete]


@dataclass(frozen=True)
class Commit:
    """
    Immutable commit record.

    Fields:
        ts: Commit timestamp (unix seconds)
        author: User id of the committer
        operations: Line operations, applied left to right
        id: Commit identifier (optional, informational)
        parent_id: Parent commit identifier (optional, informational)
    """
    ts: int
    author: Optional[str] = None
    operations: Tuple[Operation, ...] = field(default_factory=tuple)
    id: Optional[str] = None
    parent_id: Optional[str] = None

    def __post_init__(self) -> None:
        _require_ts(self.ts, "Commit.ts")
        if not isinstance(self.operations, tuple):
            object.__setattr__(self, "operations", tuple(self.operations))


def copy_lines(lines: Iterable[Line]) -> List[Line]:
    """
    Detached copies of lines.

    reconstruct() takes ownership of the Line objects it is given; pass the
    result of this function when the caller's objects must stay pristine.
    """
    return [replace(line) for line in lines]
