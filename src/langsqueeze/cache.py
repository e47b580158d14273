"""
Persistent cache of reference compressed lengths.

Uses diskcache for SQLite-based persistent caching. Keys are derived from the
content hash and the codec settings, so a cached length is always the exact
length the compressor would produce for that content.
"""

import hashlib
from typing import Optional

from diskcache import Cache

from .logging_config import get_logger
from .math.compression import Compressor

logger = get_logger(__name__)


class LengthCache:
    """
    SQLite-based cache for standalone compressed lengths.

    Features:
    - Content-addressed keys (sha256 + algorithm + level)
    - TTL-based expiration
    - Thread-safe operations
    """

    def __init__(
        self,
        cache_dir: str = ".langsqueeze-cache",
        ttl_hours: int = 720,
        enabled: bool = True,
    ):
        """
        Initialize cache.

        Args:
            cache_dir: Directory for cache storage
            ttl_hours: Time-to-live in hours
            enabled: Whether caching is enabled
        """
        self.enabled = enabled
        self.ttl_seconds = ttl_hours * 3600

        if self.enabled:
            self.cache: Optional[Cache] = Cache(cache_dir)
            logger.debug(f"Length cache initialized at {cache_dir} with TTL={ttl_hours}h")
        else:
            self.cache = None
            logger.debug("Length cache disabled")

    @staticmethod
    def make_key(content: bytes, compressor: Compressor) -> str:
        """Build the cache key for ``content`` under ``compressor``'s settings."""
        digest = hashlib.sha256(content).hexdigest()
        return f"{compressor.algorithm}:{compressor.level}:{digest}"

    def compressed_length(self, content: bytes, compressor: Compressor) -> int:
        """Return the cached length, computing and storing it on a miss."""
        if not self.enabled or self.cache is None:
            return compressor.compressed_length(content)

        key = self.make_key(content, compressor)
        cached = self.get(key)
        if cached is not None:
            return cached

        length = compressor.compressed_length(content)
        self.set(key, length)
        return length

    def get(self, key: str) -> Optional[int]:
        """
        Get value from cache.

        Returns:
            Cached length or None if not found/expired
        """
        if not self.enabled or self.cache is None:
            return None

        try:
            value = self.cache.get(key)
            if value is not None:
                logger.debug(f"Cache hit: {key[:24]}...")
            return value
        except Exception as e:
            logger.warning(f"Cache get failed: {e}")
            return None

    def set(self, key: str, value: int) -> None:
        """Store a length in the cache."""
        if not self.enabled or self.cache is None:
            return

        try:
            self.cache.set(key, value, expire=self.ttl_seconds or None)
            logger.debug(f"Cache set: {key[:24]}...")
        except Exception as e:
            logger.warning(f"Cache set failed: {e}")

    def clear(self) -> None:
        """Clear all cache entries."""
        if not self.enabled or self.cache is None:
            return

        try:
            self.cache.clear()
            logger.info("Length cache cleared")
        except Exception as e:
            logger.warning(f"Cache clear failed: {e}")

    def stats(self) -> dict:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache stats
        """
        if not self.enabled or self.cache is None:
            return {"enabled": False}

        try:
            return {
                "enabled": True,
                "size": len(self.cache),
                "directory": self.cache.directory,
                "volume": self.cache.volume(),
            }
        except Exception as e:
            logger.warning(f"Cache stats failed: {e}")
            return {"enabled": True, "error": str(e)}

    def close(self) -> None:
        """Close cache (cleanup)."""
        if self.cache is not None:
            self.cache.close()
