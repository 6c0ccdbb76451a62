"""
File-based commit log.

Reads commits saved from the page service, either as the JSON response body
({"commits": [...]} or a bare array) or as JSONL, one commit per line.
"""

import json
import os
from typing import Any, Iterator, List, Optional

from ..core.errors import CommitLogError, DecodeError
from ..core.events import Commit, Line
from .codec import decode_commit, decode_commits, decode_lines
from .store import CommitLog


def _load_json(path: str) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except UnicodeDecodeError as e:
        raise DecodeError(f"{path}: not UTF-8 text ({e})") from e
    except json.JSONDecodeError as e:
        raise DecodeError(f"{path}: invalid JSON ({e})") from e
    except FileNotFoundError:
        raise
    except OSError as e:
        raise CommitLogError(f"cannot read {path}: {e}") from e


def load_page_lines(path: str) -> List[Line]:
    """
    Load the current lines of a page.

    Accepts the page response body ({"lines": [...], ...}) or a bare array.

    Raises:
        FileNotFoundError: If path does not exist
        DecodeError: If the file is not UTF-8 or not valid page JSON
        CommitLogError: If the file cannot be read
    """
    data = _load_json(path)
    if isinstance(data, dict):
        if "lines" not in data:
            raise DecodeError(f"{path}: page JSON has no 'lines' field")
        data = data["lines"]
    return decode_lines(data)


class FileCommitLog(CommitLog):
    """
    Read-only commit log backed by a JSON or JSONL file.

    The file is parsed once, on first read.
    """

    def __init__(self, path: str) -> None:
        """
        Initialize file commit log.

        Args:
            path: Path to a JSON or JSONL file
        """
        self.path = path
        self._commits: Optional[List[Commit]] = None

    def _parse_jsonl(self, raw: str) -> List[Commit]:
        commits = []
        for lineno, line in enumerate(raw.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                rec = json.loads(line)
            except json.JSONDecodeError as e:
                raise DecodeError(f"{self.path}:{lineno}: invalid JSON ({e})") from e
            commits.append(decode_commit(rec))
        return commits

    def _load(self) -> List[Commit]:
        if self._commits is not None:
            return self._commits
        if not os.path.exists(self.path):
            raise FileNotFoundError(self.path)
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = f.read()
        except UnicodeDecodeError as e:
            raise DecodeError(f"{self.path}: not UTF-8 text ({e})") from e
        except OSError as e:
            raise CommitLogError(f"cannot read {self.path}: {e}") from e

        if not raw.strip():
            commits: List[Commit] = []
        else:
            try:
                data = json.loads(raw)
            except json.JSONDecodeError:
                # Several top-level documents: JSONL
                commits = self._parse_jsonl(raw)
            else:
                if isinstance(data, dict):
                    data = data["commits"] if "commits" in data else [data]
                commits = decode_commits(data)

        self._commits = sorted(commits, key=lambda c: c.ts, reverse=True)
        return self._commits

    def read(self, until_ts: Optional[int] = None) -> Iterator[Commit]:
        for commit in self._load():
            if until_ts is not None and commit.ts < until_ts:
                break
            yield commit
