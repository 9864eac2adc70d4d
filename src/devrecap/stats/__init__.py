"""Repository statistics."""

from devrecap.stats.aggregate import (
    aggregate,
    average_commits_per_day,
    calculate_commit_frequency,
    find_most_active_day,
    most_changed_files,
    summarize_file_changes,
)

__all__ = [
    "aggregate",
    "calculate_commit_frequency",
    "find_most_active_day",
    "average_commits_per_day",
    "summarize_file_changes",
    "most_changed_files",
]
