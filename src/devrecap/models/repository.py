"""Data models for repositories, time windows and aggregated statistics."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from devrecap.models.commit import CommitRecord, commit_day, ensure_utc

if TYPE_CHECKING:
    from devrecap.errors import DevRecapError

GITHUB_BASE_URL = "https://github.com"


class TimeWindow(BaseModel):
    """Inclusive [start, end] range used to filter commits.

    Callers are responsible for passing ``start <= end``.
    """

    model_config = ConfigDict(frozen=True)

    start: datetime = Field(..., description="Start instant (inclusive)")
    end: datetime = Field(..., description="End instant (inclusive)")

    @field_validator("start", "end")
    @classmethod
    def normalize_bounds(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @classmethod
    def days_back(cls, days: int, now: Optional[datetime] = None) -> "TimeWindow":
        """Window covering the last ``days`` days up to ``now``."""
        end = ensure_utc(now) if now is not None else datetime.now(timezone.utc)
        return cls(start=end - timedelta(days=days), end=end)

    @classmethod
    def from_dates(cls, start: datetime, end: datetime) -> "TimeWindow":
        return cls(start=start, end=end)

    def contains(self, timestamp: datetime) -> bool:
        """Check if a timestamp is within this window (bounds included)."""
        return self.start <= ensure_utc(timestamp) <= self.end


class HostingIdentifier(BaseModel):
    """Owner/repository pair of a GitHub-hosted repository."""

    model_config = ConfigDict(frozen=True)

    owner: str = Field(..., description="Repository owner or organization")
    repo: str = Field(..., description="Repository name")

    @property
    def web_url(self) -> str:
        return f"{GITHUB_BASE_URL}/{self.owner}/{self.repo}"

    def pr_url(self, pr_number: int) -> str:
        """Web URL of a pull request."""
        return f"{self.web_url}/pull/{pr_number}"

    def commit_url(self, commit_hash: str) -> str:
        """Web URL of a commit."""
        return f"{self.web_url}/commit/{commit_hash}"


class RepositoryStatistics(BaseModel):
    """Repository-level counters folded from a commit list."""

    model_config = ConfigDict(frozen=True)

    total_commits: int = Field(0, description="Number of commits")
    total_files_changed: int = Field(
        0, description="Sum of files changed per commit (not deduplicated)"
    )
    total_insertions: int = Field(0, description="Total lines added")
    total_deletions: int = Field(0, description="Total lines deleted")
    pr_count: int = Field(0, description="Number of distinct referenced PRs/issues")
    commit_frequency: Dict[str, int] = Field(
        default_factory=dict, description="Commits per calendar day (YYYY-MM-DD)"
    )

    @classmethod
    def from_commits(cls, commits: Iterable[CommitRecord]) -> "RepositoryStatistics":
        """Create statistics from a list of commits."""
        total_commits = 0
        total_files_changed = 0
        total_insertions = 0
        total_deletions = 0
        pr_set = set()
        frequency: Dict[str, int] = {}

        for commit in commits:
            total_commits += 1
            total_files_changed += len(commit.files_changed)
            total_insertions += commit.insertions
            total_deletions += commit.deletions
            pr_set.update(commit.pr_numbers)

            day = commit_day(commit.timestamp)
            frequency[day] = frequency.get(day, 0) + 1

        return cls(
            total_commits=total_commits,
            total_files_changed=total_files_changed,
            total_insertions=total_insertions,
            total_deletions=total_deletions,
            pr_count=len(pr_set),
            commit_frequency=dict(sorted(frequency.items())),
        )

    @property
    def net_lines(self) -> int:
        """Net lines changed (insertions - deletions)."""
        return self.total_insertions - self.total_deletions


class RepositoryRecord(BaseModel):
    """Everything collected for one repository during an analysis pass.

    Statistics are always folded from ``commits`` and cannot be passed in.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: Path = Field(..., description="Filesystem location of the repository")
    name: str = Field(..., description="Repository name (final path segment)")
    remote_url: Optional[str] = Field(None, description="Remote URL, if configured")
    hosting_info: Optional[HostingIdentifier] = Field(
        None, description="GitHub owner/repo, if the remote is on GitHub"
    )
    commits: Tuple[CommitRecord, ...] = Field(
        default_factory=tuple, description="Filtered commits, oldest first"
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def stats(self) -> RepositoryStatistics:
        """Statistics over commits."""
        return RepositoryStatistics.from_commits(self.commits)

    @property
    def commit_hashes(self) -> Tuple[str, ...]:
        return tuple(commit.hash for commit in self.commits)


@dataclass(frozen=True)
class AnalysisOutcome:
    """Result of analyzing one repository: either a record or the error."""

    path: Path
    record: Optional[RepositoryRecord] = None
    error: Optional["DevRecapError"] = None

    def __post_init__(self) -> None:
        if (self.record is None) == (self.error is None):
            raise ValueError("AnalysisOutcome needs exactly one of record or error")

    @property
    def ok(self) -> bool:
        return self.record is not None
