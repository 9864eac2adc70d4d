"""Repository analysis: scan, walk, aggregate and assemble records."""

from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterable, List, Optional, Union

import structlog

from devrecap.errors import DevRecapError, NoCommitsFoundError
from devrecap.extraction import CommitWalker, GitBackend, GitPythonBackend
from devrecap.hosting import parse_github_url
from devrecap.models import AnalysisOutcome, RepositoryRecord, TimeWindow
from devrecap.scanning import RepositoryScanner, get_repo_name

logger = structlog.get_logger(__name__)


class RepositoryAnalyzer:
    """Builds one RepositoryRecord per repository.

    Each analysis opens its own repository handle, so repositories can be
    analyzed in parallel without shared state.
    """

    def __init__(self, backend: Optional[GitBackend] = None) -> None:
        """Initialize the analyzer.

        Args:
            backend: Repository access layer (defaults to GitPython)
        """
        self.backend = backend or GitPythonBackend()

    def analyze(
        self,
        repo_path: Union[str, Path],
        author_email: Optional[str],
        time_window: TimeWindow,
    ) -> RepositoryRecord:
        """Analyze a single repository.

        Args:
            repo_path: Repository root
            author_email: Author filter (case-insensitive substring), or None
            time_window: Inclusive time window

        Returns:
            RepositoryRecord with filtered commits and their statistics

        Raises:
            RepositoryOpenError: If the path is not a valid repository
            NoCommitsFoundError: If no commit matches the filters
            DiffError: If diff statistics cannot be computed
        """
        path = Path(repo_path)
        walker = CommitWalker(time_window, author_email, backend=self.backend)

        handle = self.backend.open(path)
        try:
            commits = walker.collect(handle)
            remote_url = handle.remote_url()
        finally:
            handle.close()

        if not commits:
            raise NoCommitsFoundError(path, author_email)

        record = RepositoryRecord(
            path=path,
            name=get_repo_name(path),
            remote_url=remote_url,
            hosting_info=parse_github_url(remote_url),
            commits=tuple(commits),
        )
        logger.info(
            "repository_analyzed",
            path=str(path),
            commits=record.stats.total_commits,
            insertions=record.stats.total_insertions,
            deletions=record.stats.total_deletions,
        )
        return record

    def analyze_many(
        self,
        repo_paths: Iterable[Union[str, Path]],
        author_email: Optional[str],
        time_window: TimeWindow,
        max_workers: int = 1,
    ) -> List[AnalysisOutcome]:
        """Analyze several repositories.

        A failing repository never stops the others: its error is returned
        as an outcome next to the successful records.

        Args:
            repo_paths: Repository roots
            author_email: Author filter, or None
            time_window: Inclusive time window
            max_workers: Number of repositories analyzed concurrently

        Returns:
            One AnalysisOutcome per path, sorted by path
        """
        paths = sorted({Path(p) for p in repo_paths})

        if max_workers <= 1 or len(paths) <= 1:
            outcomes = [self._outcome(path, author_email, time_window) for path in paths]
        else:
            outcomes = []
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                futures = [
                    executor.submit(self._outcome, path, author_email, time_window)
                    for path in paths
                ]
                for future in as_completed(futures):
                    outcomes.append(future.result())

        return sorted(outcomes, key=lambda outcome: outcome.path)

    def scan_and_analyze(
        self,
        root: Union[str, Path],
        author_email: Optional[str],
        time_window: TimeWindow,
        exclude_patterns: Iterable[str] = (),
        max_depth: Optional[int] = None,
        max_workers: int = 1,
    ) -> List[AnalysisOutcome]:
        """Discover repositories under ``root`` and analyze each of them."""
        repo_paths = RepositoryScanner(exclude_patterns, max_depth).scan(root)
        logger.info("repositories_discovered", root=str(root), count=len(repo_paths))
        return self.analyze_many(repo_paths, author_email, time_window, max_workers)

    def _outcome(
        self, path: Path, author_email: Optional[str], time_window: TimeWindow
    ) -> AnalysisOutcome:
        try:
            return AnalysisOutcome(path=path, record=self.analyze(path, author_email, time_window))
        except DevRecapError as e:
            logger.warning("repository_analysis_failed", path=str(path), error=str(e))
            return AnalysisOutcome(path=path, error=e)


def analyze(
    repo_path: Union[str, Path],
    author_email: Optional[str],
    time_window: TimeWindow,
    backend: Optional[GitBackend] = None,
) -> RepositoryRecord:
    """Analyze a single repository. See ``RepositoryAnalyzer.analyze``."""
    return RepositoryAnalyzer(backend).analyze(repo_path, author_email, time_window)
