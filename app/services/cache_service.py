"""Optional key/value cache for ranked id lists.

The engine must behave identically (only slower) without a cache, so callers
never talk to a CacheStore directly: IdListCache wraps one and turns every
cache failure into a miss.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import redis.asyncio as redis
from pydantic import BaseModel, ValidationError

from app.config import cache_url_enabled

logger = logging.getLogger(__name__)

ID_LIST_VERSION = 1


class CacheStore(ABC):
    """String key/value store with per-key expiry."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent or expired."""

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store value under key, overwriting any previous value."""

    async def close(self) -> None:
        """Release any client resources."""


class NullCacheStore(CacheStore):
    """Cache used when none is configured: every read misses, writes vanish."""

    async def get(self, key: str) -> Optional[str]:
        return None

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        return None


class RedisCacheStore(CacheStore):
    """CacheStore backed by Redis via redis.asyncio."""

    def __init__(self, url: str, socket_timeout: float = 1.0) -> None:
        # No retries: an unreachable cache must fail fast and fall back to the DB.
        self._client = redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
            retry_on_timeout=False,
        )

    async def get(self, key: str) -> Optional[str]:
        return await self._client.get(key)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._client.set(key, value, ex=ttl_seconds)

    async def close(self) -> None:
        await self._client.aclose()


def build_cache_store(url: str) -> CacheStore:
    """Create the cache store for a configured URL.

    Empty, "memory" and "skip..." values mean no cache.
    """
    if not cache_url_enabled(url):
        logger.info("Discovery cache disabled; trending is computed on every request")
        return NullCacheStore()
    return RedisCacheStore(url.strip())


class CachedIdList(BaseModel):
    """Serialized form of a ranked id list stored in the cache."""

    version: int = ID_LIST_VERSION
    ids: list[int]


class IdListCache:
    """Reads and writes ordered id lists, swallowing all cache failures."""

    def __init__(self, store: CacheStore) -> None:
        self.store = store

    async def get_ids(self, key: str) -> Optional[list[int]]:
        """Return the cached ids for key, or None on miss or any cache error."""
        try:
            raw = await self.store.get(key)
        except Exception:
            logger.warning(f"Cache read failed for {key}; treating as miss", exc_info=True)
            return None
        if raw is None:
            return None

        try:
            envelope = CachedIdList.model_validate_json(raw)
        except ValidationError:
            logger.warning(f"Discarding malformed cache entry for {key}")
            return None
        if envelope.version != ID_LIST_VERSION:
            logger.info(f"Ignoring cache entry for {key} with version {envelope.version}")
            return None
        return envelope.ids

    async def put_ids(self, key: str, ids: list[int], ttl_seconds: int) -> bool:
        """Store ids under key.

        Failures are logged and otherwise ignored; returns False when the write
        did not reach the cache.
        """
        payload = CachedIdList(ids=ids).model_dump_json()
        try:
            await self.store.set(key, payload, ttl_seconds)
        except Exception:
            logger.warning(f"Cache write failed for {key}; skipping", exc_info=True)
            return False
        return True
