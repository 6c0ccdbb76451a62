"""
Tests for canonical serialization of snapshots.

Critical: The same snapshot must always render to the same bytes.
"""

from pagehistory.core.canonical import (
    canonical_json_bytes,
    canonical_json_str,
    canonicalize,
    line_to_dict,
    snapshot_digest,
)
from pagehistory.core.events import Line


def make_line(line_id, text):
    return Line(id=line_id, text=text, author="user1", created=1000, updated=1000)


def test_canonicalize_dict_key_order():
    """Dict key order must not affect canonical output."""
    d1 = {"z": 1, "a": 2, "m": 3}
    d2 = {"a": 2, "m": 3, "z": 1}

    assert canonicalize(d1) == canonicalize(d2)


def test_canonicalize_int_keys():
    """Timestamp keys become strings."""
    assert canonicalize({2000: [1], 1000: (2,)}) == {"1000": [2], "2000": [1]}


def test_canonical_json_str_determinism():
    """Same object must produce identical string."""
    obj = {"b": 2, "a": 1}

    assert canonical_json_str(obj) == canonical_json_str(obj)
    assert canonical_json_str(obj) == '{"a":1,"b":2}'
    assert isinstance(canonical_json_bytes(obj), bytes)


def test_canonical_handles_unicode():
    """Unicode strings must be handled consistently."""
    s = canonical_json_str({"key": "日本語"})

    assert "日本語" in s


def test_line_to_dict_wire_names():
    """Lines serialize with page-service field names."""
    assert line_to_dict(make_line("L1", "hi")) == {
        "id": "L1",
        "text": "hi",
        "userId": "user1",
        "created": 1000,
        "updated": 1000,
        "placeholder": False,
    }


def test_snapshot_digest():
    """Equal snapshots share a digest; order and content change it."""
    a = [make_line("L1", "x"), make_line("L2", "y")]
    b = [make_line("L1", "x"), make_line("L2", "y")]

    assert snapshot_digest(a) == snapshot_digest(b)
    assert len(snapshot_digest(a)) == 64
    assert snapshot_digest(a) != snapshot_digest(list(reversed(a)))
    assert snapshot_digest(a) != snapshot_digest([make_line("L1", "x"), make_line("L2", "z")])
