"""Repository discovery."""

from devrecap.scanning.scanner import RepositoryScanner, get_remote_url, get_repo_name, scan

__all__ = ["RepositoryScanner", "scan", "get_repo_name", "get_remote_url"]
