"""devrecap - commit history extraction and statistics for local Git repositories."""

__version__ = "0.1.0"
