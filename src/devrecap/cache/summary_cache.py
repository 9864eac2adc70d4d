"""File-based cache for repository summaries."""

import hashlib
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import structlog

from devrecap.models import RepositoryRecord
from devrecap.models.commit import ensure_utc

logger = structlog.get_logger(__name__)


class SummaryCache:
    """Caches summaries keyed by repository path and commit hashes.

    Commit hashes are stable across re-walks of an unchanged history, so a
    key stays valid until new commits enter the analyzed range.
    """

    def __init__(self, cache_dir: Path, ttl_hours: int = 168) -> None:
        """Initialize cache.

        Args:
            cache_dir: Directory to store cache files
            ttl_hours: Hours before an entry expires
        """
        self.cache_dir = Path(cache_dir)
        self.summaries_dir = self.cache_dir / "summaries"
        self.summaries_dir.mkdir(parents=True, exist_ok=True)
        self.ttl = timedelta(hours=ttl_hours)

        # Stats
        self.hits = 0
        self.misses = 0

    @staticmethod
    def generate_key(repo_path: str, commit_hashes: Iterable[str]) -> str:
        """Generate a cache key from a repository path and its commit hashes.

        Args:
            repo_path: Repository path
            commit_hashes: Hashes of the analyzed commits, in order

        Returns:
            Cache key
        """
        hash_obj = hashlib.sha256(str(repo_path).encode())
        for commit_hash in commit_hashes:
            hash_obj.update(b"\0")
            hash_obj.update(commit_hash.encode())
        return f"summary_{hash_obj.hexdigest()}"

    @classmethod
    def key_for(cls, record: RepositoryRecord) -> str:
        return cls.generate_key(str(record.path), record.commit_hashes)

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Get a cached summary.

        Expired entries are removed and reported as a miss.

        Args:
            key: Cache key

        Returns:
            Cached summary or None
        """
        cache_file = self._path(key)

        if cache_file.exists():
            try:
                with open(cache_file, "r") as f:
                    data = json.load(f)
                cached_at = datetime.fromisoformat(data["cached_at"])
            except (OSError, ValueError, KeyError, TypeError) as e:
                logger.debug("cache_entry_unreadable", key=key, error=str(e))
            else:
                if self._is_expired(cached_at):
                    cache_file.unlink(missing_ok=True)
                else:
                    self.hits += 1
                    return data.get("summary")

        self.misses += 1
        return None

    def set(self, key: str, summary: Dict[str, Any]) -> None:
        """Cache a summary.

        Args:
            key: Cache key
            summary: JSON-serializable summary
        """
        cache_file = self._path(key)

        try:
            with open(cache_file, "w") as f:
                json.dump(
                    {
                        "cached_at": datetime.now(timezone.utc).isoformat(),
                        "summary": summary,
                    },
                    f,
                    indent=2,
                )
        except (OSError, TypeError) as e:
            logger.warning("cache_write_failed", key=key, error=str(e))

    def clear(self) -> None:
        """Clear all cache files."""
        for cache_file in self.summaries_dir.glob("*.json"):
            cache_file.unlink()

        self.hits = 0
        self.misses = 0

    def cleanup_expired(self) -> int:
        """Remove expired entries.

        Returns:
            Number of removed entries
        """
        removed = 0
        for cache_file in self.summaries_dir.glob("*.json"):
            try:
                with open(cache_file, "r") as f:
                    cached_at = datetime.fromisoformat(json.load(f)["cached_at"])
            except (OSError, ValueError, KeyError, TypeError):
                continue

            if self._is_expired(cached_at):
                cache_file.unlink(missing_ok=True)
                removed += 1

        return removed

    def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with cache stats
        """
        total_requests = self.hits + self.misses
        hit_rate = (self.hits / total_requests * 100) if total_requests > 0 else 0.0

        files = list(self.summaries_dir.glob("*.json"))
        return {
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": f"{hit_rate:.1f}%",
            "cached_summaries": len(files),
            "size_bytes": sum(f.stat().st_size for f in files),
        }

    def _path(self, key: str) -> Path:
        return self.summaries_dir / f"{key}.json"

    def _is_expired(self, cached_at: datetime) -> bool:
        return datetime.now(timezone.utc) - ensure_utc(cached_at) > self.ttl
