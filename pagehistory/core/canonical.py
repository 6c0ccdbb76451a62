"""
Canonical serialization of reconstructed snapshots.

Snapshot output (CLI JSON, digests) goes through these functions so that the
same history always renders to the same bytes.
"""

import hashlib
import json
from typing import Any, Dict, List, Sequence

from .events import Line


def canonicalize(obj: Any) -> Any:
    """
    Convert arbitrary nested dict/list to canonical form.

    Rules:
    - dict keys sorted alphabetically (stringified, so int timestamps sort as text)
    - tuples converted to lists
    - recursive normalization
    """
    if isinstance(obj, dict):
        return {str(k): canonicalize(obj[k]) for k in sorted(obj.keys(), key=str)}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(x) for x in obj]
    return obj


def canonical_json_bytes(obj: Any) -> bytes:
    """
    Deterministic JSON bytes for hashing.

    Guarantees:
    - sort_keys=True (secondary safety)
    - separators remove whitespace
    - ensure_ascii=False keeps UTF-8 stable
    """
    canon = canonicalize(obj)
    s = json.dumps(canon, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return s.encode("utf-8")


def canonical_json_str(obj: Any) -> str:
    """Deterministic JSON string (for display or storage)."""
    return canonical_json_bytes(obj).decode("utf-8")


def line_to_dict(line: Line) -> Dict[str, Any]:
    """Line in the page-service wire shape, plus the placeholder flag."""
    return {
        "id": line.id,
        "text": line.text,
        "userId": line.author,
        "created": line.created,
        "updated": line.updated,
        "placeholder": line.placeholder,
    }


def snapshot_to_list(lines: Sequence[Line]) -> List[Dict[str, Any]]:
    return [line_to_dict(line) for line in lines]


def snapshot_digest(lines: Sequence[Line]) -> str:
    """
    SHA-256 of a snapshot's canonical form.

    Two snapshots with the same lines in the same order share a digest.
    """
    return hashlib.sha256(canonical_json_bytes(snapshot_to_list(lines))).hexdigest()
