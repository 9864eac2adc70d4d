"""Unit tests for commit walking and diff statistics."""

import git
import pytest

from devrecap.errors import RepositoryOpenError
from devrecap.extraction import CommitWalker, DiffStats, GitPythonBackend, InMemoryBackend
from devrecap.extraction.git_backend import parse_numstat
from devrecap.models import TimeWindow
from repo_factory import commit_files, init_repo, make_raw_commit, utc


@pytest.fixture
def memory_backend():
    """In-memory repository with commits on 2024-01-01, 2024-01-15 and 2024-01-31."""
    backend = InMemoryBackend()
    backend.add_repository(
        "/repos/app",
        [
            (make_raw_commit("c" * 40, utc(2024, 1, 31, 23, 59, 59), "Last"), DiffStats(("c.py",), 3, 0)),
            (make_raw_commit("a" * 40, utc(2024, 1, 1, 0), "First"), DiffStats(("a.py",), 1, 0)),
            (
                make_raw_commit("b" * 40, utc(2024, 1, 15), "Middle", email="other@example.org"),
                DiffStats(("b.py", "a.py"), 2, 1),
            ),
        ],
    )
    return backend


def test_walk_returns_oldest_first(memory_backend, january_2024):
    """Test commits are returned in chronological order."""
    commits = CommitWalker(january_2024, backend=memory_backend).walk("/repos/app")

    assert [commit.summary for commit in commits] == ["First", "Middle", "Last"]
    assert commits[1].files_changed == ("b.py", "a.py")


def test_walk_window_bounds_are_inclusive(memory_backend):
    """Test commits exactly on the window bounds are kept."""
    window = TimeWindow.from_dates(utc(2024, 1, 1, 0), utc(2024, 1, 31, 23, 59, 59))

    commits = CommitWalker(window, backend=memory_backend).walk("/repos/app")

    assert len(commits) == 3


def test_walk_window_excludes_outside(memory_backend):
    """Test commits outside the window are dropped."""
    window = TimeWindow.from_dates(utc(2024, 1, 10, 0), utc(2024, 1, 20, 0))

    commits = CommitWalker(window, backend=memory_backend).walk("/repos/app")

    assert [commit.summary for commit in commits] == ["Middle"]


def test_walk_author_filter_is_case_insensitive_substring(memory_backend, january_2024):
    """Test the author filter matches emails case-insensitively and partially."""
    walker = CommitWalker(january_2024, "Test@Example.com", backend=memory_backend)
    assert [commit.summary for commit in walker.walk("/repos/app")] == ["First", "Last"]

    walker = CommitWalker(january_2024, "example.org", backend=memory_backend)
    assert [commit.summary for commit in walker.walk("/repos/app")] == ["Middle"]

    walker = CommitWalker(january_2024, "wrong@example.com", backend=memory_backend)
    assert walker.walk("/repos/app") == []


def test_walk_unknown_repository(memory_backend, january_2024):
    """Test opening an unregistered path fails."""
    with pytest.raises(RepositoryOpenError):
        CommitWalker(january_2024, backend=memory_backend).walk("/repos/missing")


def test_walk_real_repository(test_repo, january_2024):
    """Test extraction from a real Git repository."""
    commits = CommitWalker(january_2024).walk(test_repo)

    assert [commit.summary for commit in commits] == [
        "Initial commit #123",
        "Add main.py",
        "Fix: Update hello message (GH-456)",
    ]
    assert commits[1].body == "Introduces the hello function."
    assert commits[0].author.email == "test@example.com"
    assert commits[0].timestamp == utc(2024, 1, 10)
    assert len(commits[0].hash) == 40
    assert commits[0].pr_numbers == (123,)
    assert commits[2].pr_numbers == (456,)


def test_walk_real_repository_diff_stats(test_repo, january_2024):
    """Test diff statistics, with the root commit compared to the empty tree."""
    root, added, modified = CommitWalker(january_2024).walk(test_repo)

    assert root.files_changed == ("README.md",)
    assert (root.insertions, root.deletions) == (1, 0)

    assert added.files_changed == ("main.py",)
    assert (added.insertions, added.deletions) == (2, 0)

    assert modified.files_changed == ("main.py",)
    assert (modified.insertions, modified.deletions) == (1, 1)


def test_walk_keeps_literal_paths(tmp_path, january_2024):
    """Test non-ASCII paths and paths with spaces are reported unquoted."""
    repo = init_repo(tmp_path / "paths-repo")
    commit_files(repo, {"café.txt": "bonjour\n", "a b.txt": "one\ntwo\n"}, "Add files", utc(2024, 1, 2))
    commit_files(repo, {"café.txt": "salut\n"}, "Edit café", utc(2024, 1, 3))
    repo.close()

    added, edited = CommitWalker(january_2024).walk(tmp_path / "paths-repo")

    assert added.files_changed == ("a b.txt", "café.txt")
    assert (added.insertions, added.deletions) == (3, 0)
    assert edited.files_changed == ("café.txt",)
    assert (edited.insertions, edited.deletions) == (1, 1)


def test_parse_numstat():
    """Test numstat parsing, with binary entries counting zero lines."""
    stats = parse_numstat("3\t1\tsrc/main.py\0-\t-\timage.png\0" "2\t0\tdir/a\tb.txt\0")

    assert stats.files_changed == ("src/main.py", "image.png", "dir/a\tb.txt")
    assert (stats.insertions, stats.deletions) == (5, 1)
    assert parse_numstat("") == DiffStats()


def test_walk_real_repository_author_filter(test_repo, january_2024):
    """Test author filtering on a real repository."""
    repo = git.Repo(test_repo)
    commit_files(repo, {"other.txt": "x\n"}, "Someone else", utc(2024, 1, 20), email="dev@other.org")
    repo.close()

    mine = CommitWalker(january_2024, "TEST@example.com").walk(test_repo)
    theirs = CommitWalker(january_2024, "dev@other.org").walk(test_repo)

    assert len(mine) == 3
    assert [commit.summary for commit in theirs] == ["Someone else"]


def test_walk_merge_commit_uses_first_parent(tmp_path, january_2024):
    """Test a merge commit is diffed against its first parent only."""
    repo = init_repo(tmp_path / "merge-repo")
    base = commit_files(repo, {"a.txt": "a\n"}, "Base", utc(2024, 1, 2))
    feature = commit_files(
        repo, {"b.txt": "b\n"}, "Feature", utc(2024, 1, 3), parent_commits=[base], head=False
    )
    repo.index.remove(["b.txt"], working_tree=True)
    mainline = commit_files(repo, {"c.txt": "c\n"}, "Mainline", utc(2024, 1, 4))
    commit_files(
        repo,
        {"b.txt": "b\n"},
        "Merge pull request #7 from user/feature",
        utc(2024, 1, 5),
        parent_commits=[mainline, feature],
    )
    repo.close()

    commits = CommitWalker(january_2024).walk(tmp_path / "merge-repo")

    assert [commit.summary for commit in commits] == [
        "Base",
        "Feature",
        "Mainline",
        "Merge pull request #7 from user/feature",
    ]
    merge = commits[-1]
    assert merge.files_changed == ("b.txt",)
    assert (merge.insertions, merge.deletions) == (1, 0)
    assert merge.pr_numbers == (7,)


def test_walk_merge_commit_is_flagged(tmp_path):
    """Test raw commits expose their parents."""
    repo = init_repo(tmp_path / "repo")
    first = commit_files(repo, {"a.txt": "a\n"}, "First", utc(2024, 1, 2))
    side = commit_files(repo, {"b.txt": "b\n"}, "Side", utc(2024, 1, 3), parent_commits=[first], head=False)
    commit_files(repo, {"c.txt": "c\n"}, "Merge", utc(2024, 1, 4), parent_commits=[first, side])
    repo.close()

    handle = GitPythonBackend().open(tmp_path / "repo")
    try:
        raw_commits = list(handle.walk_commits())
    finally:
        handle.close()

    assert raw_commits[0].message.startswith("Merge")
    assert raw_commits[0].is_merge
    assert not raw_commits[-1].is_merge
    assert raw_commits[-1].parent_hashes == ()


def test_walk_empty_repository(tmp_path, january_2024):
    """Test a repository without commits yields nothing."""
    init_repo(tmp_path / "empty").close()

    assert CommitWalker(january_2024).walk(tmp_path / "empty") == []


def test_walk_invalid_path(tmp_path, january_2024):
    """Test invalid repository paths."""
    with pytest.raises(RepositoryOpenError):
        CommitWalker(january_2024).walk(tmp_path / "nonexistent")

    (tmp_path / "plain").mkdir()
    with pytest.raises(RepositoryOpenError):
        CommitWalker(january_2024).walk(tmp_path / "plain")
