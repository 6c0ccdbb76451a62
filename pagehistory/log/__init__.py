"""
Commit log access.

This module provides:
- CommitLog: Abstract interface for commit sources (newest first)
- InMemoryCommitLog: Commits already held in memory
- FileCommitLog: Commits saved as JSON or JSONL
- Codec: Page-service JSON to engine records
"""

from .store import CommitLog, InMemoryCommitLog
from .file_store import FileCommitLog, load_page_lines
from .codec import decode_change, decode_commit, decode_commits, decode_line, decode_lines

__all__ = [
    "CommitLog",
    "InMemoryCommitLog",
    "FileCommitLog",
    "load_page_lines",
    "decode_change",
    "decode_commit",
    "decode_commits",
    "decode_line",
    "decode_lines",
]
