"""Commit graph walking with author and time window filtering."""

from pathlib import Path
from typing import List, Optional, Union

import structlog

from devrecap.extraction.backend import GitBackend, RawCommit, RepositoryHandle
from devrecap.extraction.git_backend import GitPythonBackend
from devrecap.hosting import extract_references
from devrecap.models import Author, CommitRecord, TimeWindow

logger = structlog.get_logger(__name__)


class CommitWalker:
    """Extracts filtered commits with diff statistics from a repository."""

    def __init__(
        self,
        time_window: TimeWindow,
        author_email: Optional[str] = None,
        backend: Optional[GitBackend] = None,
    ) -> None:
        """Initialize the CommitWalker.

        Args:
            time_window: Inclusive window commits must fall in
            author_email: Author filter, matched as a case-insensitive substring
                of the author email (None or empty matches everyone)
            backend: Repository access layer (defaults to GitPython)
        """
        self.time_window = time_window
        self.author_email = author_email or None
        self.backend = backend or GitPythonBackend()

    def walk(self, repo_path: Union[str, Path]) -> List[CommitRecord]:
        """Open a repository and collect its matching commits.

        Args:
            repo_path: Repository root

        Returns:
            Matching commits, oldest first

        Raises:
            RepositoryOpenError: If the path is not a valid repository
            DiffError: If diff statistics cannot be computed for a commit
        """
        handle = self.backend.open(repo_path)
        try:
            return self.collect(handle)
        finally:
            handle.close()

    def collect(self, handle: RepositoryHandle) -> List[CommitRecord]:
        """Collect matching commits from an already opened repository."""
        commits = []
        seen = 0

        for raw in handle.walk_commits():
            seen += 1
            if not self.matches(raw):
                continue

            commits.append(self._build_record(handle, raw))

        # The graph is walked newest first
        commits.reverse()

        logger.debug(
            "commits_collected",
            path=str(handle.path),
            walked=seen,
            matched=len(commits),
        )
        return commits

    def matches(self, raw: RawCommit) -> bool:
        """Check a commit against the time window and author filter."""
        if not self.time_window.contains(raw.timestamp):
            return False

        if self.author_email is not None:
            return self.author_email.lower() in raw.author_email.lower()

        return True

    def _build_record(self, handle: RepositoryHandle, raw: RawCommit) -> CommitRecord:
        diff = handle.diff(raw)
        return CommitRecord(
            hash=raw.hash,
            author=Author(name=raw.author_name, email=raw.author_email),
            timestamp=raw.timestamp,
            message=raw.message,
            files_changed=diff.files_changed,
            insertions=diff.insertions,
            deletions=diff.deletions,
            pr_numbers=tuple(extract_references(raw.message)),
        )
