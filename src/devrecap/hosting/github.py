"""GitHub remote URL and issue/PR reference parsing.

Everything here is best-effort enrichment: unrecognized input yields ``None``
or an empty list, never an exception.
"""

import re
from typing import List, Optional, Pattern, Tuple

from devrecap.models import HostingIdentifier

# Remote URL forms, tried in order:
# - https://github.com/owner/repo.git (also http, optional user@ credentials)
# - git@github.com:owner/repo.git
# - git://github.com/owner/repo.git, ssh://git@github.com/owner/repo.git
GITHUB_URL_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(
        r"^https?://(?:[^@/]+@)?github\.com/(?P<owner>[^/]+)/(?P<repo>[^/]+?)(?:\.git)?/?$",
        re.IGNORECASE,
    ),
    re.compile(
        r"^[^@/:]+@github\.com:(?P<owner>[^/]+)/(?P<repo>[^/]+?)(?:\.git)?/?$",
        re.IGNORECASE,
    ),
    re.compile(
        r"^(?:git|ssh|git\+ssh)://(?:[^@/]+@)?github\.com(?::\d+)?/(?P<owner>[^/]+)/(?P<repo>[^/]+?)(?:\.git)?/?$",
        re.IGNORECASE,
    ),
)

# Issue/PR reference forms: #123, GH-123, PR#123, "pull request #123"
REFERENCE_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"#(\d+)"),
    re.compile(r"GH-(\d+)"),
    re.compile(r"PR#(\d+)"),
    re.compile(r"pull request #(\d+)"),
)


def parse_github_url(url: Optional[str]) -> Optional[HostingIdentifier]:
    """Parse GitHub owner/repo from a remote URL.

    Args:
        url: Remote URL in HTTPS, SSH (scp-like) or protocol form

    Returns:
        HostingIdentifier, or None if the URL is not a recognizable GitHub URL
    """
    if not url:
        return None

    url = url.strip()
    for pattern in GITHUB_URL_PATTERNS:
        match = pattern.match(url)
        if match:
            return HostingIdentifier(owner=match.group("owner"), repo=match.group("repo"))

    return None


def extract_references(message: str) -> List[int]:
    """Extract issue/PR numbers referenced in a commit message.

    Matches from every pattern are pooled and deduplicated.

    Args:
        message: Raw commit message

    Returns:
        Referenced numbers in ascending order
    """
    numbers = set()
    for pattern in REFERENCE_PATTERNS:
        for match in pattern.finditer(message):
            numbers.add(int(match.group(1)))
    return sorted(numbers)


extract_pr_numbers = extract_references
