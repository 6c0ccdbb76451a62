"""
Decoding of page-service JSON records.

Wire shapes:
    line:   {"id", "text", "userId", "created", "updated"}
    commit: {"id", "parentId", "created", "userId", "changes": [...]}
    change: {"_insert": anchor, "lines": {"id", "text"}}
            {"_update": line_id, "lines": {"text", "origText"}}
            {"_delete": line_id, "lines": -1}

Changes that do not touch lines (title, links, descriptions, ...) are
dropped.
"""

from typing import Any, Dict, List, Optional

from ..core.errors import DecodeError, MalformedCommitError, MalformedLineError
from ..core.events import Commit, Delete, Insert, Line, Operation, Update


def _require_dict(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


def _lines_field(change: Dict[str, Any], key: str) -> Dict[str, Any]:
    lines = change.get("lines")
    if not isinstance(lines, dict):
        raise DecodeError(f"{key} change needs a 'lines' object: {change!r}")
    return lines


def decode_line(data: Any) -> Line:
    """
    Decode a page line.

    Raises:
        MalformedLineError: If id is missing or timestamps are not integers
    """
    data = _require_dict(data, "line")
    created = data.get("created", 0)
    updated = data.get("updated", created)
    for name, value in (("created", created), ("updated", updated)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise MalformedLineError(f"line {data.get('id')!r}: {name} must be an integer")
    return Line(
        id=data.get("id"),
        text=data.get("text", ""),
        author=data.get("userId"),
        created=created,
        updated=updated,
    )


def decode_lines(items: Any) -> List[Line]:
    if not isinstance(items, list):
        raise DecodeError(f"lines must be a JSON array, got {type(items).__name__}")
    return [decode_line(item) for item in items]


def decode_change(change: Any) -> Optional[Operation]:
    """
    Decode one change; None for changes that do not touch lines.
    """
    change = _require_dict(change, "change")
    if "_insert" in change:
        lines = _lines_field(change, "_insert")
        if "id" not in lines:
            raise DecodeError(f"_insert change without line id: {change!r}")
        return Insert(line_id=lines["id"], anchor_id=change["_insert"], text=lines.get("text", ""))
    if "_update" in change:
        lines = _lines_field(change, "_update")
        return Update(
            line_id=change["_update"],
            text=lines.get("text", ""),
            previous_text=lines.get("origText", ""),
        )
    if "_delete" in change:
        return Delete(line_id=change["_delete"])
    return None


def decode_commit(data: Any) -> Commit:
    """
    Decode a commit.

    Raises:
        MalformedCommitError: If the commit has no integer 'created' timestamp
        DecodeError: If a line change is structurally invalid
    """
    data = _require_dict(data, "commit")
    if "created" not in data:
        raise MalformedCommitError(f"commit {data.get('id')!r} has no 'created' timestamp")
    changes = data.get("changes", [])
    if not isinstance(changes, list):
        raise DecodeError(f"commit {data.get('id')!r}: 'changes' must be a JSON array")

    operations = []
    for change in changes:
        op = decode_change(change)
        if op is not None:
            operations.append(op)

    return Commit(
        ts=data["created"],
        author=data.get("userId"),
        operations=tuple(operations),
        id=data.get("id"),
        parent_id=data.get("parentId"),
    )


def decode_commits(items: Any) -> List[Commit]:
    if not isinstance(items, list):
        raise DecodeError(f"commits must be a JSON array, got {type(items).__name__}")
    return [decode_commit(item) for item in items]
