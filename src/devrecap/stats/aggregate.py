"""Statistics over commit lists.

All functions are pure folds: the same input always gives the same output.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from devrecap.models import CommitRecord, RepositoryStatistics, commit_day


def aggregate(commits: Iterable[CommitRecord]) -> RepositoryStatistics:
    """Fold a commit list into repository statistics."""
    return RepositoryStatistics.from_commits(commits)


def calculate_commit_frequency(commits: Iterable[CommitRecord]) -> Dict[str, int]:
    """Count commits per calendar day (YYYY-MM-DD)."""
    frequency: Dict[str, int] = {}
    for commit in commits:
        day = commit_day(commit.timestamp)
        frequency[day] = frequency.get(day, 0) + 1
    return dict(sorted(frequency.items()))


def find_most_active_day(stats: RepositoryStatistics) -> Optional[Tuple[str, int]]:
    """Day with the most commits; the earliest day wins a tie."""
    if not stats.commit_frequency:
        return None
    return min(stats.commit_frequency.items(), key=lambda item: (-item[1], item[0]))


def average_commits_per_day(stats: RepositoryStatistics) -> float:
    """Average commits per active day."""
    if not stats.commit_frequency:
        return 0.0
    return stats.total_commits / len(stats.commit_frequency)


def summarize_file_changes(commits: Iterable[CommitRecord]) -> Dict[str, int]:
    """Number of commits touching each file."""
    file_changes: Dict[str, int] = {}
    for commit in commits:
        for file_path in commit.files_changed:
            file_changes[file_path] = file_changes.get(file_path, 0) + 1
    return file_changes


def most_changed_files(commits: Sequence[CommitRecord], limit: int) -> List[Tuple[str, int]]:
    """Most frequently changed files, by count then path."""
    changes = sorted(summarize_file_changes(commits).items(), key=lambda item: (-item[1], item[0]))
    return changes[:limit]
