"""
Bank directory caches.

The directory is fetched once and reused. The in-process cache never
invalidates, so a stale directory needs a restart; the redis cache can
expire entries through a TTL and is shared between workers.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, List, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from bridgeyou.models import Bank

logger = logging.getLogger(__name__)

DirectoryLoader = Callable[[], Awaitable[List[Bank]]]


class DirectoryCache(ABC):
    """Get-or-populate-once access to the bank directory."""

    @abstractmethod
    async def get_or_populate(self, loader: DirectoryLoader) -> List[Bank]:
        """Return the cached directory, calling loader on first use."""


class InMemoryDirectoryCache(DirectoryCache):
    """
    Process-local cache with no invalidation.

    Concurrent first calls may both run the loader; the last one wins,
    which is harmless because loading is idempotent.
    """

    def __init__(self):
        self._banks: Optional[List[Bank]] = None

    async def get_or_populate(self, loader: DirectoryLoader) -> List[Bank]:
        if self._banks is None:
            banks = await loader()
            logger.info(f"Bank directory cached ({len(banks)} entries)")
            self._banks = banks
        return self._banks

    def clear(self) -> None:
        self._banks = None


class RedisDirectoryCache(DirectoryCache):
    """Directory cached as JSON in redis, with an optional TTL."""

    def __init__(self, client: redis.Redis, key: str, ttl_seconds: int = 0):
        self.client = client
        self.key = key
        self.ttl_seconds = ttl_seconds

    async def get_or_populate(self, loader: DirectoryLoader) -> List[Bank]:
        cached = await self._read()
        if cached is not None:
            return cached

        banks = await loader()
        await self._write(banks)
        return banks

    async def _read(self) -> Optional[List[Bank]]:
        try:
            cached_data = await self.client.get(self.key)
        except RedisError as e:
            logger.warning(f"Bank directory cache read failed: {e}")
            return None

        if not cached_data:
            return None
        try:
            return [Bank(**item) for item in json.loads(cached_data)]
        except (ValueError, TypeError) as e:
            logger.warning(f"Discarding unreadable bank directory cache entry: {e}")
            return None

    async def _write(self, banks: List[Bank]) -> None:
        data = json.dumps([bank.model_dump(mode="json") for bank in banks])
        try:
            if self.ttl_seconds > 0:
                await self.client.setex(self.key, self.ttl_seconds, data)
            else:
                await self.client.set(self.key, data)
            logger.info(f"Bank directory cached in redis ({len(banks)} entries)")
        except RedisError as e:
            logger.warning(f"Bank directory cache write failed: {e}")
