"""Data models for Git commit information."""

from datetime import datetime, timezone
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

SHORT_HASH_LENGTH = 7


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def commit_day(timestamp: datetime) -> str:
    """Calendar day bucket (``YYYY-MM-DD``, UTC) for a commit timestamp."""
    return ensure_utc(timestamp).strftime("%Y-%m-%d")


def split_message(message: str) -> Tuple[str, Optional[str]]:
    """Split a commit message into summary and body.

    Lines end at newline characters only (a trailing carriage return is
    dropped), so form feeds and other Unicode separators stay inside a line.
    The summary is the trimmed first line. The body is every following line,
    once leading blank lines are skipped, joined with newlines.

    Args:
        message: Raw commit message

    Returns:
        Tuple of (summary, body or None)
    """
    lines = [line[:-1] if line.endswith("\r") else line for line in message.split("\n")]
    if lines[-1] == "":
        lines.pop()
    if not lines:
        return "", None

    summary = lines[0].strip()
    rest = lines[1:]
    while rest and not rest[0].strip():
        rest = rest[1:]

    if not rest:
        return summary, None
    return summary, "\n".join(rest)


class Author(BaseModel):
    """Commit author identity."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Author name")
    email: str = Field(..., description="Author email")


class CommitRecord(BaseModel):
    """A single commit with its diff statistics against the first parent."""

    model_config = ConfigDict(frozen=True)

    hash: str = Field(..., description="Full commit SHA hash")
    author: Author = Field(..., description="Commit author")
    timestamp: datetime = Field(..., description="Commit timestamp (UTC)")
    message: str = Field(..., description="Full commit message")
    files_changed: Tuple[str, ...] = Field(
        default_factory=tuple, description="Paths on the new side of the diff, in diff order"
    )
    insertions: int = Field(0, ge=0, description="Number of lines added")
    deletions: int = Field(0, ge=0, description="Number of lines deleted")
    pr_numbers: Tuple[int, ...] = Field(
        default_factory=tuple, description="Issue/PR numbers referenced in the message"
    )

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @field_validator("pr_numbers")
    @classmethod
    def normalize_pr_numbers(cls, value: Tuple[int, ...]) -> Tuple[int, ...]:
        return tuple(sorted(set(value)))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def short_hash(self) -> str:
        """Abbreviated hash (first 7 characters)."""
        return self.hash[:SHORT_HASH_LENGTH]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def summary(self) -> str:
        """First line of the commit message."""
        return split_message(self.message)[0]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def body(self) -> Optional[str]:
        """Remaining message lines, or None for a single-line message."""
        return split_message(self.message)[1]

    @property
    def day(self) -> str:
        return commit_day(self.timestamp)

    def short_desc(self) -> str:
        """Short one-line representation of the commit."""
        return f"{self.short_hash} - {self.summary}"
