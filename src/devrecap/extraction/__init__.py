"""Commit extraction from Git repositories."""

from devrecap.extraction.backend import DiffStats, GitBackend, RawCommit, RepositoryHandle
from devrecap.extraction.git_backend import (
    GitPythonBackend,
    GitPythonRepository,
    is_git_repository,
)
from devrecap.extraction.memory import InMemoryBackend, InMemoryRepository
from devrecap.extraction.walker import CommitWalker
from devrecap.models.commit import split_message

__all__ = [
    "CommitWalker",
    "GitBackend",
    "RepositoryHandle",
    "RawCommit",
    "DiffStats",
    "GitPythonBackend",
    "GitPythonRepository",
    "InMemoryBackend",
    "InMemoryRepository",
    "is_git_repository",
    "split_message",
]
