"""
Translation response cache for the chat-model engine.

Model calls are slow and billed per token, while conversation traffic repeats
short phrases ("yes", "thank you", greetings). Entries are evicted least
recently used beyond capacity and expire after a fixed TTL; a read refreshes
the entry's age.

Example:
- Speaker A says "Good morning" (en -> de) -> model call, cached as
  "en:de:Good morning"
- Speaker B says "Good morning" an hour later -> cache hit, no model call
"""
import logging
import threading
import time
from collections import OrderedDict
from typing import Callable, Optional, Tuple

logger = logging.getLogger(__name__)


class TranslationResponseCache:
    """LRU cache with per-entry TTL for translated text."""

    def __init__(
        self,
        maxsize: int = 5000,
        ttl: float = 60 * 60 * 24,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            maxsize: Maximum number of cached translations
            ttl: Seconds an entry stays valid after its last write or read
            clock: Monotonic time source (overridable in tests)
        """
        self._cache: "OrderedDict[str, Tuple[str, float]]" = OrderedDict()
        self._maxsize = maxsize
        self._ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @staticmethod
    def get_cache_key(source_lang: str, target_lang: str, normalized_text: str) -> str:
        return f"{source_lang}:{target_lang}:{normalized_text}"

    def get(self, key: str) -> Optional[str]:
        """Return the cached translation, or None when absent or expired."""
        now = self._clock()
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._misses += 1
                return None

            value, stored_at = entry
            if now - stored_at > self._ttl:
                del self._cache[key]
                self._misses += 1
                logger.debug(f"Translation cache entry expired: {key[:40]}")
                return None

            # Refresh age and move to end (LRU)
            self._cache[key] = (value, now)
            self._cache.move_to_end(key)
            self._hits += 1
            return value

    def put(self, key: str, value: str):
        """Store a translation, evicting the least recently used entry at capacity."""
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
            elif len(self._cache) >= self._maxsize:
                oldest_key, _ = self._cache.popitem(last=False)
                logger.debug(f"Translation cache evicted oldest entry: {oldest_key[:40]}")
            self._cache[key] = (value, self._clock())

    def __len__(self) -> int:
        return len(self._cache)

    def get_stats(self) -> dict:
        """
        Get cache statistics.

        Returns:
            Dict with hits, misses, hit_rate, size
        """
        total = self._hits + self._misses
        hit_rate = (self._hits / total * 100) if total > 0 else 0

        return {
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate_percent": round(hit_rate, 2),
            "cache_size": len(self._cache),
            "max_size": self._maxsize
        }

    def clear(self):
        """Clear all cached entries."""
        with self._lock:
            self._cache.clear()
        logger.info("Translation cache cleared")
