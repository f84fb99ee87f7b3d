# Minimal TTL cache for upstream API responses
import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Dict, Optional

from src.utils.logger import logger

_MISSING = object()


class TTLCache:
    """In-memory TTL cache for block times and wallet balances"""

    def __init__(self, ttl_seconds: int, name: str = "cache"):
        self.ttl_seconds = ttl_seconds
        self.name = name
        self._memory_cache: Dict[str, Dict[str, Any]] = {}
        self._cache_lock = asyncio.Lock()

    async def get(self, key: str, default: Any = None) -> Any:
        """Get a cached value if it exists and is fresh"""
        async with self._cache_lock:
            entry = self._memory_cache.get(key)
            if entry is None:
                logger.debug(f"[{self.name}] Cache MISS for {key}")
                return default
            if not self._is_cache_fresh(entry["stored_at"]):
                del self._memory_cache[key]
                logger.debug(f"[{self.name}] Cache EXPIRED for {key}")
                return default
            logger.debug(f"[{self.name}] Cache HIT for {key}")
            return entry["data"]

    async def set(self, key: str, value: Any) -> None:
        async with self._cache_lock:
            self._memory_cache[key] = {
                "data": value,
                "stored_at": datetime.now(timezone.utc),
            }
            self._cleanup_expired()

    async def get_or_fetch(
        self,
        key: str,
        fetch: Callable[[], Awaitable[Any]],
        cache_none: bool = False,
    ) -> Any:
        """
        Return the cached value for ``key`` or await ``fetch()`` and store it.

        None results are not stored unless ``cache_none`` is set, so a block
        that has not been mined yet is looked up again on the next request.
        """
        cached = await self.get(key, _MISSING)
        if cached is not _MISSING:
            return cached

        value = await fetch()
        if value is not None or cache_none:
            await self.set(key, value)
        return value

    async def invalidate(self, key: Optional[str] = None) -> None:
        """Drop one key, or everything when no key is given"""
        async with self._cache_lock:
            if key is None:
                self._memory_cache.clear()
            else:
                self._memory_cache.pop(key, None)
        logger.info(f"[{self.name}] Invalidated cache: {key or '*'}")

    def _is_cache_fresh(self, stored_at: datetime) -> bool:
        expiry_time = stored_at + timedelta(seconds=self.ttl_seconds)
        return datetime.now(timezone.utc) < expiry_time

    def _cleanup_expired(self) -> None:
        expired_keys = [
            key for key, entry in self._memory_cache.items()
            if not self._is_cache_fresh(entry["stored_at"])
        ]
        for key in expired_keys:
            del self._memory_cache[key]
        if expired_keys:
            logger.info(f"[{self.name}] Cleaned up {len(expired_keys)} expired cache entries")

    async def get_cache_stats(self) -> Dict[str, Any]:
        """Get cache statistics for monitoring"""
        async with self._cache_lock:
            entries = len(self._memory_cache)
        return {"name": self.name, "entries": entries, "ttl_seconds": self.ttl_seconds}
