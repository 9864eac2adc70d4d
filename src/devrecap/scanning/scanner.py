"""Discovery of Git repositories under a directory tree."""

import os
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple, Union

import structlog

from devrecap.errors import RepositoryOpenError
from devrecap.extraction.git_backend import first_remote_url, is_git_repository, open_repo

logger = structlog.get_logger(__name__)


class RepositoryScanner:
    """Finds repository roots, including repositories nested inside others.

    Directories whose name equals or contains an exclusion pattern are not
    entered, nor are hidden directories. Unreadable directories are skipped.
    """

    def __init__(
        self,
        exclude_patterns: Iterable[str] = (),
        max_depth: Optional[int] = None,
    ) -> None:
        """Initialize the scanner.

        Args:
            exclude_patterns: Directory name patterns to skip (exact or substring)
            max_depth: Maximum directory depth, root being 0 (None = unlimited).
                Directories at this depth or deeper are neither checked nor
                entered; the root itself is always checked.
        """
        self.exclude_patterns = [pattern for pattern in exclude_patterns if pattern]
        self.max_depth = max_depth

    def scan(self, root: Union[str, Path]) -> Set[Path]:
        """Scan a directory tree for Git repositories.

        Args:
            root: Directory to start from

        Returns:
            Set of repository root paths
        """
        root = Path(root)
        repos: Set[Path] = set()
        pending: List[Tuple[Path, int]] = [(root, 0)]

        while pending:
            path, depth = pending.pop()

            if is_git_repository(path):
                repos.add(path)
                # Keep descending to find submodules

            if self.max_depth is not None and depth + 1 >= self.max_depth:
                continue

            # Reverse order so children pop in sorted order
            for child in reversed(self._child_directories(path)):
                pending.append((child, depth + 1))

        logger.debug("scan_complete", root=str(root), repositories=len(repos))
        return repos

    def should_exclude(self, name: str) -> bool:
        """Check if a directory name matches an exclusion pattern."""
        return any(name == pattern or pattern in name for pattern in self.exclude_patterns)

    def _child_directories(self, path: Path) -> List[Path]:
        """Subdirectories worth descending into, sorted by name."""
        try:
            with os.scandir(path) as entries:
                names = []
                for entry in entries:
                    try:
                        if not entry.is_dir(follow_symlinks=False):
                            continue
                    except OSError:
                        continue
                    names.append(entry.name)
        except OSError as e:
            logger.debug("scan_skip_unreadable", path=str(path), error=str(e))
            return []

        children = []
        for name in sorted(names):
            if self.should_exclude(name):
                continue
            if name.startswith("."):
                continue
            children.append(path / name)
        return children


def scan(
    root: Union[str, Path],
    exclude_patterns: Iterable[str] = (),
    max_depth: Optional[int] = None,
) -> Set[Path]:
    """Scan ``root`` for Git repositories. See ``RepositoryScanner``."""
    return RepositoryScanner(exclude_patterns, max_depth).scan(root)


def get_repo_name(path: Union[str, Path]) -> str:
    """Repository name derived from the final path segment."""
    path = Path(path)
    return path.name or path.resolve().name or "unknown"


def get_remote_url(path: Union[str, Path]) -> Optional[str]:
    """Remote URL of the repository at ``path``, or None."""
    try:
        repo = open_repo(path)
    except RepositoryOpenError:
        return None

    try:
        return first_remote_url(repo)
    finally:
        repo.close()
