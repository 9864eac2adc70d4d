"""Hosting provider identifiers and issue/PR references."""

from devrecap.hosting.github import extract_pr_numbers, extract_references, parse_github_url

__all__ = ["parse_github_url", "extract_references", "extract_pr_numbers"]
