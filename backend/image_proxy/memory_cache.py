"""
Image Memory Cache
图片内存缓存

Bounded in-memory store for proxied images.

Features:
- Thread-safe operations with Lock
- TTL-based expiration (stale entries are never served)
- FIFO eviction: the oldest-inserted entry goes first, reads do not refresh it
"""

import time
import logging
from typing import Dict, Any, Optional, Callable
from dataclasses import dataclass
from threading import Lock

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "image/jpeg"


@dataclass
class CacheEntry:
    """
    Cached image data structure
    缓存条目数据结构
    """
    key: str                                     # Original target URL, as given by the caller
    payload: bytes                               # Image bytes
    content_type: str = DEFAULT_CONTENT_TYPE     # MIME type
    stored_at: float = 0.0                       # Clock reading at insertion

    @property
    def size_bytes(self) -> int:
        return len(self.payload)

    def age(self, now: float) -> float:
        """Seconds since this entry was stored."""
        return now - self.stored_at


class ImageMemoryCache:
    """
    Thread-safe bounded image cache
    线程安全的有界图片缓存

    Dicts keep insertion order, so the first key is always the
    oldest-inserted one and is the eviction victim when full.
    """

    def __init__(
        self,
        max_entries: int = 100,
        ttl_seconds: float = 1800.0,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            max_entries: Maximum number of images to keep
            ttl_seconds: Time-to-live of an entry in seconds (30 min)
            clock: Time source, replaceable in tests
        """
        self._store: Dict[str, CacheEntry] = {}
        self._lock = Lock()
        self._max_entries = max(1, int(max_entries))
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._hits = 0
        self._misses = 0

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def get(self, key: str) -> Optional[CacheEntry]:
        """
        Get a fresh cache entry
        获取未过期的缓存条目

        Returns:
            CacheEntry if present and younger than the TTL, None otherwise
        """
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                return None

            if entry.age(self._clock()) >= self._ttl:
                del self._store[key]
                self._misses += 1
                logger.debug(f"[ImageCache] Expired: {key[:60]}...")
                return None

            self._hits += 1
            return entry

    def put(
        self,
        key: str,
        payload: bytes,
        content_type: Optional[str] = None,
    ) -> CacheEntry:
        """
        Store an image
        存储图片

        Overwriting a key moves it to the newest position. Inserting a new
        key into a full cache evicts exactly one entry, the oldest-inserted.
        """
        with self._lock:
            # Re-insert so an overwritten key counts as newest
            self._store.pop(key, None)

            if len(self._store) >= self._max_entries:
                oldest = next(iter(self._store))
                del self._store[oldest]
                logger.info(f"[ImageCache] FIFO evicted: {oldest[:60]}...")

            entry = CacheEntry(
                key=key,
                payload=payload,
                content_type=content_type or DEFAULT_CONTENT_TYPE,
                stored_at=self._clock(),
            )
            self._store[key] = entry
            logger.debug(
                f"[ImageCache] Stored: {key[:60]}... "
                f"({len(self._store)}/{self._max_entries})"
            )
            return entry

    def cleanup_expired(self) -> int:
        """
        Remove all expired entries
        清理过期条目

        Returns:
            Number of entries removed
        """
        with self._lock:
            now = self._clock()
            expired = [
                k for k, v in self._store.items()
                if v.age(now) >= self._ttl
            ]
            for k in expired:
                del self._store[k]

        if expired:
            logger.info(f"[ImageCache] Cleaned up {len(expired)} expired entries")
        return len(expired)

    def clear(self) -> int:
        """
        Clear all cache entries
        清空所有缓存

        Returns:
            Number of entries deleted
        """
        with self._lock:
            count = len(self._store)
            self._store.clear()

        logger.info(f"[ImageCache] Cleared all {count} entries")
        return count

    def stats(self) -> Dict[str, Any]:
        """
        Get cache statistics
        获取缓存统计信息
        """
        with self._lock:
            total_size = sum(e.size_bytes for e in self._store.values())
            return {
                "total_entries": len(self._store),
                "max_entries": self._max_entries,
                "total_size_bytes": total_size,
                "total_size_mb": round(total_size / (1024 * 1024), 2),
                "ttl_seconds": self._ttl,
                "hits": self._hits,
                "misses": self._misses,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._store
