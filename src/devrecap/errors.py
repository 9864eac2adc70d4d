"""Error types raised by devrecap."""

from pathlib import Path
from typing import Optional, Union


class DevRecapError(Exception):
    """Base class for all devrecap errors."""


class RepositoryOpenError(DevRecapError):
    """Raised when a path is not a valid, openable Git repository."""

    def __init__(self, path: Union[str, Path], reason: Optional[str] = None) -> None:
        self.path = Path(path)
        self.reason = reason
        message = f"Invalid Git repository: {self.path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class NoCommitsFoundError(DevRecapError):
    """Raised when filtering leaves no commits for a repository."""

    def __init__(self, path: Union[str, Path], author: Optional[str] = None) -> None:
        self.path = Path(path)
        self.author = author or "any"
        super().__init__(f"No commits found for author {self.author} in timespan: {self.path}")


class DiffError(DevRecapError):
    """Raised when diff statistics cannot be computed for a commit."""

    def __init__(self, commit_hash: str, reason: str) -> None:
        self.commit_hash = commit_hash
        self.reason = reason
        super().__init__(f"Failed to diff commit {commit_hash}: {reason}")


class ConfigError(DevRecapError):
    """Raised when configuration cannot be loaded or is invalid."""


class RepositoryReadError(DevRecapError):
    """Raised when the commit graph of an opened repository cannot be read."""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to read commit history of {self.path}: {reason}")
