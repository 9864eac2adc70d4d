"""Unit tests for GitHub URL and reference parsing."""

import pytest

from devrecap.hosting import extract_pr_numbers, extract_references, parse_github_url
from devrecap.models import HostingIdentifier


@pytest.mark.parametrize(
    "url",
    [
        "https://github.com/owner/repo.git",
        "https://github.com/owner/repo",
        "git@github.com:owner/repo.git",
        "git://github.com/owner/repo.git",
        "ssh://git@github.com/owner/repo.git",
        "  https://github.com/owner/repo.git\n",
    ],
)
def test_parse_github_url_forms(url):
    """Test that every supported remote form yields owner/repo."""
    info = parse_github_url(url)

    assert info == HostingIdentifier(owner="owner", repo="repo")


def test_parse_github_url_keeps_dots_in_repo_name():
    """Test that only the .git suffix is stripped."""
    info = parse_github_url("https://github.com/pallets/click.py.git")

    assert info.owner == "pallets"
    assert info.repo == "click.py"


def test_parse_github_url_with_credentials():
    """Test HTTPS URLs carrying a user name."""
    info = parse_github_url("https://user@github.com/rust-lang/rust.git")

    assert info == HostingIdentifier(owner="rust-lang", repo="rust")


@pytest.mark.parametrize(
    "url",
    [
        "https://gitlab.com/owner/repo",
        "git@bitbucket.org:owner/repo.git",
        "https://github.com/owner",
        "not a url",
        "",
        None,
    ],
)
def test_parse_github_url_invalid(url):
    """Test that unrecognized URLs yield no identifier."""
    assert parse_github_url(url) is None


def test_hosting_identifier_urls():
    """Test web URL templates."""
    info = HostingIdentifier(owner="owner", repo="repo")

    assert info.web_url == "https://github.com/owner/repo"
    assert info.pr_url(123) == "https://github.com/owner/repo/pull/123"
    assert info.commit_url("abc123") == "https://github.com/owner/repo/commit/abc123"


def test_extract_references_formats():
    """Test each reference pattern on its own."""
    assert extract_references("Fix bug #123") == [123]
    assert extract_references("Fixes GH-456") == [456]
    assert extract_references("Closes PR#789") == [789]
    assert extract_references("Merge pull request #101 from user/branch") == [101]


def test_extract_references_deduplicates():
    """Test that repeated references are reported once."""
    assert extract_references("Fix #123 and close #123") == [123]


def test_extract_references_sorted():
    """Test that references from different patterns are pooled and sorted."""
    assert extract_references("Fixes GH-456, PR#789") == [456, 789]
    assert extract_references("Refs #42, see GH-7 and #13") == [7, 13, 42]


def test_extract_references_none():
    """Test a message without references."""
    assert extract_references("Regular commit message") == []
    assert extract_references("") == []


def test_extract_pr_numbers_alias():
    """Test the alias matches extract_references."""
    assert extract_pr_numbers("Fix #123 and #456") == [123, 456]
