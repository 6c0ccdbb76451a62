"""
CommitLog abstract interface.

Defines the contract for commit sources feeding the replayer.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Iterator, List, Optional

from ..core.events import Commit


class CommitLog(ABC):
    """
    Abstract commit source.

    All implementations must guarantee:
    - read() yields commits newest first
    - Commits sharing a timestamp keep their recorded order
    """

    @abstractmethod
    def read(self, until_ts: Optional[int] = None) -> Iterator[Commit]:
        """
        Read commits from the log.

        Args:
            until_ts: Stop after the oldest commit at or above this timestamp
                (None = whole log)

        Yields:
            Commits, newest first
        """
        ...


class InMemoryCommitLog(CommitLog):
    """Commit log held in memory (tests, already-fetched responses)."""

    def __init__(self, commits: Iterable[Commit] = ()) -> None:
        self._commits: List[Commit] = sorted(commits, key=lambda c: c.ts, reverse=True)

    def __len__(self) -> int:
        return len(self._commits)

    def append(self, commit: Commit) -> None:
        self._commits.append(commit)
        self._commits.sort(key=lambda c: c.ts, reverse=True)

    def read(self, until_ts: Optional[int] = None) -> Iterator[Commit]:
        for commit in self._commits:
            if until_ts is not None and commit.ts < until_ts:
                break
            yield commit
