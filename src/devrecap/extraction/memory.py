"""In-memory backend for exercising the walker without real repositories."""

from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from devrecap.errors import RepositoryOpenError
from devrecap.extraction.backend import DiffStats, RawCommit


class InMemoryRepository:
    """A repository made of pre-built commits and diff statistics."""

    def __init__(
        self,
        path: Path,
        commits: List[Tuple[RawCommit, DiffStats]],
        remote_url: Optional[str] = None,
    ) -> None:
        self.path = path
        self._commits = commits
        self._diffs = {raw.hash: stats for raw, stats in commits}
        self._remote_url = remote_url

    def walk_commits(self) -> Iterator[RawCommit]:
        ordered = sorted(self._commits, key=lambda item: item[0].timestamp, reverse=True)
        for raw, _ in ordered:
            yield raw

    def diff(self, commit: RawCommit) -> DiffStats:
        return self._diffs[commit.hash]

    def remote_url(self) -> Optional[str]:
        return self._remote_url

    def close(self) -> None:
        pass


class InMemoryBackend:
    """Backend serving repositories registered with ``add_repository``."""

    def __init__(self) -> None:
        self._repositories: Dict[Path, InMemoryRepository] = {}

    def add_repository(
        self,
        path: Union[str, Path],
        commits: Iterable[Tuple[RawCommit, DiffStats]],
        remote_url: Optional[str] = None,
    ) -> InMemoryRepository:
        """Register a repository.

        Args:
            path: Path the repository answers to
            commits: (commit, diff statistics) pairs, in any order
            remote_url: Optional remote URL

        Returns:
            The registered repository
        """
        path = Path(path)
        repository = InMemoryRepository(path, list(commits), remote_url)
        self._repositories[path] = repository
        return repository

    def open(self, path: Union[str, Path]) -> InMemoryRepository:
        path = Path(path)
        try:
            return self._repositories[path]
        except KeyError:
            raise RepositoryOpenError(path, "not registered") from None
