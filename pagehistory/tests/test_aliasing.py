"""
Tests for Line object sharing across snapshots.

Critical: Placeholders are shared and corrected in place, so corrections
found further back in time reach snapshots already recorded. Real lines are
never mutated, so older content never leaks into newer snapshots.
"""

from pagehistory.core.events import END, Commit, Delete, Insert, Line, Update, copy_lines
from pagehistory.replay import reconstruct
from pagehistory.replay.undo import WorkingSequence


def test_insert_update_delete_chain():
    """Every era of a deleted line shows the text and author of that era."""
    commits = [
        Commit(ts=3000, author="user3", operations=(Delete("L1"),)),
        Commit(ts=2000, author="user2", operations=(Update("L1", "B", "A"),)),
        Commit(ts=1000, author="user1", operations=(Insert("L1", END, "A"),)),
    ]

    result = reconstruct([], commits)

    assert result.snapshots[3000] == []

    after_update = result.snapshots[2000][0]
    assert after_update.text == "B"
    assert after_update.author == "user2"
    assert after_update.updated == 2000
    assert after_update.created == 1000
    assert after_update.placeholder is False

    after_insert = result.snapshots[1000][0]
    assert after_insert.text == "A"
    assert after_insert.author == "user1"
    assert after_insert.updated == 1000
    assert after_insert.created == 1000

    assert after_update is not after_insert
    assert result.diagnostics == []


def test_insert_delete_chain_shares_one_object():
    """Between insert and delete, every snapshot holds the same corrected object."""
    lines = [Line(id="X", text="x", author="user1", created=2000, updated=2000)]
    commits = [
        Commit(ts=3000, author="user2", operations=(Delete("L1"),)),
        Commit(ts=2000, author="user1", operations=(Insert("X", END, "x"),)),
        Commit(ts=1000, author="user1", operations=(Insert("L1", END, "orig"),)),
    ]

    result = reconstruct(lines, commits)

    restored_at_2000 = result.snapshots[2000][1]
    restored_at_1000 = result.snapshots[1000][0]
    assert restored_at_2000 is restored_at_1000
    assert restored_at_2000.text == "orig"
    assert restored_at_2000.author == "user1"
    assert restored_at_2000.created == 1000


def test_undone_update_allocates_new_line():
    """Reverting an update never changes the newer snapshot's object."""
    current = Line(id="L1", text="Updated text", author="user1", created=1000, updated=2000)
    commits = [
        Commit(ts=2000, author="user1", operations=(Update("L1", "Updated text", "Original text"),)),
        Commit(ts=1000, author="user1", operations=(Insert("L1", END, "Original text"),)),
    ]

    result = reconstruct([current], commits)

    newer = result.snapshots[2000][0]
    older = result.snapshots[1000][0]
    assert newer is current
    assert older is not newer
    assert newer.text == "Updated text"
    assert older.text == "Original text"
    assert current.text == "Updated text"


def test_placeholder_correction_reaches_newer_snapshots():
    """Content learned at the oldest commit shows up in every newer snapshot that holds the line."""
    lines = [Line(id="a", text="a3", author="user1", created=500, updated=4000)]
    commits = [
        Commit(ts=5000, author="user1", operations=(Delete("L1"),)),
        Commit(ts=4000, author="user1", operations=(Update("a", "a3", "a2"),)),
        Commit(ts=3000, author="user1", operations=(Update("a", "a2", "a1"),)),
        Commit(ts=1000, author="user9", operations=(Insert("L1", END, "restored"),)),
    ]

    result = reconstruct(lines, commits)

    for ts in (4000, 3000, 1000):
        restored = [line for line in result.snapshots[ts] if line.id == "L1"]
        assert len(restored) == 1
        assert restored[0].text == "restored"
        assert restored[0].author == "user9"
        assert restored[0].created == 1000

    assert result.get_snapshot_text(4000) == ["a3", "restored"]
    assert result.get_snapshot_text(3000) == ["a2", "restored"]
    assert result.get_snapshot_text(1000) == ["a1", "restored"]


def test_multiple_updates_on_placeholder():
    """Each update between insert and delete yields its own era."""
    commits = [
        Commit(ts=4000, author="user4", operations=(Delete("L1"),)),
        Commit(ts=3000, author="user3", operations=(Update("L1", "C", "B"),)),
        Commit(ts=2000, author="user2", operations=(Update("L1", "B", "A"),)),
        Commit(ts=1000, author="user1", operations=(Insert("L1", END, "A"),)),
    ]

    result = reconstruct([], commits)

    eras = [result.snapshots[ts][0] for ts in (3000, 2000, 1000)]
    assert [line.text for line in eras] == ["C", "B", "A"]
    assert [line.author for line in eras] == ["user3", "user2", "user1"]
    assert [line.updated for line in eras] == [3000, 2000, 1000]
    assert all(line.created == 1000 for line in eras)
    assert len({id(line) for line in eras}) == 3


def test_copy_lines_keeps_caller_objects():
    """copy_lines gives the sweep its own objects."""
    original = [Line(id="L1", text="hello", author="user1", created=1000, updated=1000)]
    commits = [Commit(ts=1000, author="user1", operations=(Insert("L1", END, "hello"),))]

    result = reconstruct(copy_lines(original), commits)

    held = result.snapshots[1000][0]
    assert held is not original[0]
    assert held == original[0]


def test_undone_update_keeps_last_known_author():
    """Rolling back a real line restores text only; author/updated stay last known."""
    current = [Line(id="L1", text="new", author="user2", created=1000, updated=2000)]
    commits = [
        Commit(ts=2000, author="user2", operations=(Update("L1", "new", "old"),)),
        Commit(ts=1000, author="user1", operations=(Insert("L0", END, "x"),)),
    ]

    result = reconstruct(current, commits)

    older = result.snapshots[1000][0]
    assert older.text == "old"
    assert older.author == "user2"
    assert older.updated == 2000
    assert older.created == 1000


def test_working_sequence_replace_keeps_position():
    """Replacing a handle keeps page order; removal only drops the held object."""
    a, b, c = Line(id="a", text="1"), Line(id="b", text="2"), Line(id="c", text="3")
    working = WorkingSequence([a, b, c])
    b2 = b.with_text("two")

    working.replace(b, b2)
    working.remove(b)

    assert working.snapshot() == [a, b2, c]
    assert working.snapshot()[1] is b2

    working.remove(a)
    working.append(a)

    assert [line.id for line in working] == ["b", "c", "a"]
    assert "a" in working and len(working) == 3
