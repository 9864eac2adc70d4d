"""GitPython-backed repository access."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional, Union

import git
import structlog
from git import Commit, Repo

from devrecap.errors import DiffError, RepositoryOpenError, RepositoryReadError
from devrecap.extraction.backend import DiffStats, RawCommit

logger = structlog.get_logger(__name__)

GIT_MARKER = ".git"
UNKNOWN_AUTHOR_NAME = "Unknown"
UNKNOWN_AUTHOR_EMAIL = "unknown@example.com"


def open_repo(path: Union[str, Path]) -> Repo:
    """Open a Git working tree at exactly ``path``.

    Raises:
        RepositoryOpenError: If the path does not exist or is not a valid repository
    """
    path = Path(path)
    if not path.exists():
        raise RepositoryOpenError(path, "path does not exist")

    try:
        return Repo(path)
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
        raise RepositoryOpenError(path) from e


def is_git_repository(path: Union[str, Path]) -> bool:
    """Check if a directory has a .git marker that opens as a valid repository.

    Malformed markers count as "not a repository".
    """
    path = Path(path)
    if not (path / GIT_MARKER).exists():
        return False

    try:
        repo = open_repo(path)
    except RepositoryOpenError:
        return False
    except (OSError, ValueError) as e:
        logger.debug("repository_check_failed", path=str(path), error=str(e))
        return False

    repo.close()
    return True


def first_remote_url(repo: Repo) -> Optional[str]:
    """URL of ``origin``, else of the first configured remote, else None."""
    try:
        remotes = list(repo.remotes)
        if not remotes:
            return None

        remote = next((r for r in remotes if r.name == "origin"), remotes[0])
        return remote.url
    except Exception as e:
        logger.debug("remote_url_unavailable", path=str(repo.working_dir), error=str(e))
        return None


def parse_numstat(output: str) -> DiffStats:
    """Parse NUL-terminated ``--numstat -z`` output into diff statistics.

    Each entry holds the added count, the deleted count and the path, separated
    by tabs. Binary files show ``-`` for both counts.
    """
    files = []
    insertions = 0
    deletions = 0

    for entry in output.split("\0"):
        entry = entry.lstrip("\n")
        if not entry:
            continue

        parts = entry.split("\t", 2)
        if len(parts) != 3:
            logger.debug("numstat_entry_skipped", entry=entry)
            continue

        added, deleted, path = parts
        files.append(path)
        insertions += int(added) if added.isdigit() else 0
        deletions += int(deleted) if deleted.isdigit() else 0

    return DiffStats(files_changed=tuple(files), insertions=insertions, deletions=deletions)


class GitPythonRepository:
    """An opened repository backed by GitPython."""

    def __init__(self, path: Path, repo: Repo) -> None:
        """Initialize the repository handle.

        Args:
            path: Repository root
            repo: Opened GitPython repository
        """
        self.path = path
        self.repo = repo

    def walk_commits(self) -> Iterator[RawCommit]:
        """Yield commits reachable from HEAD, newest first.

        A repository without any commit yields nothing.
        """
        if not self.repo.head.is_valid():
            logger.debug("repository_has_no_head", path=str(self.path))
            return

        try:
            for commit in self.repo.iter_commits("HEAD", date_order=True):
                yield self._to_raw_commit(commit)
        except (git.exc.GitCommandError, ValueError) as e:
            raise RepositoryReadError(self.path, str(e)) from e

    def diff(self, commit: RawCommit) -> DiffStats:
        """Diff a commit against its first parent.

        Reads ``git diff --numstat -z``: merge commits are compared to their
        first parent only, a root commit is compared to the empty tree,
        binary files count zero lines. Renames are reported as a deletion
        plus an addition. NUL-separated output keeps paths unquoted.

        Raises:
            DiffError: If the diff cannot be computed (e.g., corrupted objects)
        """
        try:
            if commit.parent_hashes:
                output = self.repo.git.diff(
                    commit.parent_hashes[0], commit.hash, "--", numstat=True, no_renames=True, z=True
                )
            else:
                output = self.repo.git.diff_tree(
                    commit.hash, "--", r=True, root=True, numstat=True, no_renames=True,
                    no_commit_id=True, z=True,
                )
        except (git.exc.GitCommandError, ValueError) as e:
            raise DiffError(commit.hash, str(e)) from e

        return parse_numstat(output)

    def remote_url(self) -> Optional[str]:
        return first_remote_url(self.repo)

    def close(self) -> None:
        self.repo.close()

    def _to_raw_commit(self, commit: Commit) -> RawCommit:
        """Convert a GitPython Commit object."""
        message = commit.message
        if isinstance(message, bytes):
            message = message.decode("utf-8", errors="replace")

        return RawCommit(
            hash=commit.hexsha,
            author_name=commit.author.name or UNKNOWN_AUTHOR_NAME,
            author_email=commit.author.email or UNKNOWN_AUTHOR_EMAIL,
            timestamp=datetime.fromtimestamp(commit.committed_date, tz=timezone.utc),
            message=message,
            parent_hashes=tuple(parent.hexsha for parent in commit.parents),
        )


class GitPythonBackend:
    """Production backend opening repositories with GitPython."""

    def open(self, path: Union[str, Path]) -> GitPythonRepository:
        path = Path(path)
        return GitPythonRepository(path, open_repo(path))
