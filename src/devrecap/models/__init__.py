"""Data models for commit history analysis."""

from devrecap.models.commit import Author, CommitRecord, commit_day, split_message
from devrecap.models.config import Settings
from devrecap.models.repository import (
    AnalysisOutcome,
    HostingIdentifier,
    RepositoryRecord,
    RepositoryStatistics,
    TimeWindow,
)

__all__ = [
    "Author",
    "CommitRecord",
    "RepositoryRecord",
    "RepositoryStatistics",
    "TimeWindow",
    "HostingIdentifier",
    "AnalysisOutcome",
    "Settings",
    "commit_day",
    "split_message",
]
