"""Version-control access layer used by the commit walker.

The walker only talks to a ``GitBackend``: ``GitPythonBackend`` for real
repositories and ``InMemoryBackend`` for tests.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional, Protocol, Tuple, Union


@dataclass(frozen=True)
class RawCommit:
    """A commit as read from the graph, before filtering and diffing."""

    hash: str
    author_name: str
    author_email: str
    timestamp: datetime
    message: str
    parent_hashes: Tuple[str, ...] = ()

    @property
    def is_merge(self) -> bool:
        return len(self.parent_hashes) > 1


@dataclass(frozen=True)
class DiffStats:
    """Diff between a commit and its first parent (or the empty tree)."""

    files_changed: Tuple[str, ...] = field(default_factory=tuple)
    insertions: int = 0
    deletions: int = 0


class RepositoryHandle(Protocol):
    """An opened repository."""

    path: Path

    def walk_commits(self) -> Iterator[RawCommit]:
        """Yield commits reachable from HEAD, newest first by commit time."""
        ...

    def diff(self, commit: RawCommit) -> DiffStats:
        """Diff a commit against its first parent, or the empty tree for a root commit."""
        ...

    def remote_url(self) -> Optional[str]:
        """URL of the ``origin`` remote, else the first configured remote."""
        ...

    def close(self) -> None:
        ...


class GitBackend(Protocol):
    """Opens repositories; raises RepositoryOpenError for invalid paths."""

    def open(self, path: Union[str, Path]) -> RepositoryHandle:
        ...
