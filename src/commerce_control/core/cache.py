"""Read-through cache for webhook log statistics and log details.

Values are grouped (stats, logs) and expire after a fixed TTL. Writers
invalidate the keys they affect; staleness is otherwise bounded by the TTL.
"""

import json
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

import redis.asyncio as redis

from commerce_control.core.logger import setup_logger

logger = setup_logger(__name__)

KEY_PREFIX = "commerce_control"


def _full_key(group: str, key: str) -> str:
    return f"{KEY_PREFIX}:{group}:{key}"


class LogCache(ABC):
    """Abstract cache used by the log service.

    A miss is reported as ``None``; callers never cache ``None`` values.
    """

    @abstractmethod
    async def get(self, group: str, key: str) -> Optional[Any]:
        pass

    @abstractmethod
    async def set(self, group: str, key: str, value: Any, ttl: int) -> None:
        pass

    @abstractmethod
    async def delete(self, group: str, *keys: str) -> None:
        pass

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        pass


class MemoryLogCache(LogCache):
    """In-process TTL cache (single worker deployments and tests)."""

    def __init__(self):
        self._entries: Dict[str, Tuple[float, Any]] = {}

    async def get(self, group: str, key: str) -> Optional[Any]:
        full_key = _full_key(group, key)
        entry = self._entries.get(full_key)
        if entry is None:
            return None

        expires_at, value = entry
        if time.monotonic() >= expires_at:
            self._entries.pop(full_key, None)
            return None
        return value

    async def set(self, group: str, key: str, value: Any, ttl: int) -> None:
        now = time.monotonic()
        expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
        for expired_key in expired:
            del self._entries[expired_key]
        self._entries[_full_key(group, key)] = (now + ttl, value)

    async def delete(self, group: str, *keys: str) -> None:
        for key in keys:
            self._entries.pop(_full_key(group, key), None)


class RedisLogCache(LogCache):
    """Redis-backed cache shared between workers.

    Values are stored as JSON strings with ``SETEX``. Redis failures are
    logged and treated as cache misses so the database stays authoritative.
    """

    def __init__(self, host: str, port: int, db: int = 0):
        """Initialize Redis cache client.

        Args:
            host: Redis host
            port: Redis port
            db: Redis database number
        """
        self.host = host
        self.port = port
        self.db = db

        self.pool = redis.ConnectionPool(
            host=host,
            port=port,
            db=db,
            decode_responses=True,
            max_connections=10,
            socket_timeout=5.0,
            socket_connect_timeout=5.0,
            retry_on_timeout=True
        )
        self.redis = redis.Redis(connection_pool=self.pool)

        logger.info(f"Redis cache initialized: {host}:{port}/{db}")

    async def get(self, group: str, key: str) -> Optional[Any]:
        try:
            raw = await self.redis.get(_full_key(group, key))
        except Exception as e:
            logger.warning(f"Redis cache get failed for {group}/{key}: {e}")
            return None

        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, group: str, key: str, value: Any, ttl: int) -> None:
        try:
            await self.redis.setex(_full_key(group, key), ttl, json.dumps(value, default=str))
        except Exception as e:
            logger.warning(f"Redis cache set failed for {group}/{key}: {e}")

    async def delete(self, group: str, *keys: str) -> None:
        if not keys:
            return
        try:
            await self.redis.delete(*[_full_key(group, key) for key in keys])
        except Exception as e:
            logger.warning(f"Redis cache delete failed for {group}: {e}")

    async def health_check(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except Exception as e:
            logger.error(f"Redis health check failed: {e}")
            return False

    async def close(self) -> None:
        await self.redis.aclose()
        await self.pool.aclose()
