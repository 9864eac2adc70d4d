"""Shared fixtures for devrecap tests."""

import pytest

from devrecap.models import TimeWindow
from repo_factory import commit_files, init_repo, utc


@pytest.fixture
def test_repo(tmp_path):
    """A repository with commits on 2024-01-10, 2024-01-12 and 2024-01-15."""
    repo_path = tmp_path / "test-repo"
    repo = init_repo(repo_path)

    commit_files(repo, {"README.md": "# Test Project\n"}, "Initial commit #123", utc(2024, 1, 10))
    commit_files(
        repo,
        {"main.py": "def hello():\n    print('Hello, World!')\n"},
        "Add main.py\n\nIntroduces the hello function.",
        utc(2024, 1, 12),
    )
    commit_files(
        repo,
        {"main.py": "def hello():\n    print('Hello, devrecap!')\n"},
        "Fix: Update hello message (GH-456)",
        utc(2024, 1, 15),
    )

    yield repo_path
    repo.close()


@pytest.fixture
def january_2024():
    """Window covering all of January 2024."""
    return TimeWindow.from_dates(utc(2024, 1, 1, 0), utc(2024, 1, 31, 23, 59, 59))
