"""Summary cache."""

from devrecap.cache.summary_cache import SummaryCache

__all__ = ["SummaryCache"]
