"""
In-memory TTL cache for search results.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class CacheEntry:
    """Cache entry with timestamp and data"""
    def __init__(self, data: Any, timestamp: datetime, ttl_seconds: int):
        self.data = data
        self.timestamp = timestamp
        self.ttl_seconds = ttl_seconds

    def is_expired(self) -> bool:
        """Check if cache entry is older than TTL"""
        return datetime.now() - self.timestamp > timedelta(seconds=self.ttl_seconds)

    def age_seconds(self) -> int:
        """Get age of cache in seconds"""
        return int((datetime.now() - self.timestamp).total_seconds())


class DataCache:
    """Coroutine-safe cache keyed by search cache keys"""
    def __init__(self, ttl_seconds: int = 60, max_entries: int = 0):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self.cache: Dict[str, CacheEntry] = {}
        self.lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[CacheEntry]:
        """Get cached entry if exists and not expired"""
        async with self.lock:
            entry = self.cache.get(key)
            if entry and not entry.is_expired():
                logger.debug(f"Cache HIT for key '{key}' (age: {entry.age_seconds()}s)")
                return entry
            elif entry:
                logger.debug(f"Cache EXPIRED for key '{key}' (age: {entry.age_seconds()}s)")
                del self.cache[key]
            else:
                logger.debug(f"Cache MISS for key '{key}'")
            return None

    async def set(self, key: str, data: Any) -> None:
        """Store data in cache with current timestamp"""
        async with self.lock:
            if self.max_entries and key not in self.cache and len(self.cache) >= self.max_entries:
                oldest = min(self.cache, key=lambda k: self.cache[k].timestamp)
                del self.cache[oldest]
                logger.debug(f"Cache EVICTED key '{oldest}'")
            self.cache[key] = CacheEntry(data, datetime.now(), self.ttl_seconds)
            logger.debug(f"Cache SET for key '{key}'")

    async def purge_expired(self) -> int:
        """Remove expired entries, returns how many were removed"""
        async with self.lock:
            expired = [key for key, entry in self.cache.items() if entry.is_expired()]
            for key in expired:
                del self.cache[key]
        if expired:
            logger.info(f"Cache purged {len(expired)} expired entries")
        return len(expired)

    async def clear(self) -> None:
        """Clear all cache"""
        async with self.lock:
            self.cache.clear()
            logger.info("Cache CLEARED")

    async def status(self) -> Dict[str, dict]:
        async with self.lock:
            return {
                key: {
                    "age_seconds": entry.age_seconds(),
                    "expired": entry.is_expired(),
                    "next_refresh_seconds": max(0, self.ttl_seconds - entry.age_seconds()),
                }
                for key, entry in self.cache.items()
            }
