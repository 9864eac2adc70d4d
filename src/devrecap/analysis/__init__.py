"""Per-repository analysis."""

from devrecap.analysis.analyzer import RepositoryAnalyzer, analyze

__all__ = ["RepositoryAnalyzer", "analyze"]
