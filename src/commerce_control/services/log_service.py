"""Webhook log lifecycle with read-through caching of dashboard aggregates."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from commerce_control.config.constants import (
    CACHE_GROUP_LOGS,
    CACHE_GROUP_STATS,
    CACHE_KEY_DETAIL_PREFIX,
    CACHE_KEY_ERROR,
    CACHE_KEY_RECENT,
    CACHE_KEY_RECENT_PAGE,
    CACHE_KEY_SUCCESS,
    CACHE_KEY_TOTAL,
    DASHBOARD_RECENT_LOGS,
    LOGS_PAGE_SIZE,
    STATUS_ERROR,
    STATUS_SUCCESS,
)
from commerce_control.core.cache import LogCache
from commerce_control.core.exceptions import NotFoundError
from commerce_control.core.logger import setup_logger
from commerce_control.db.repository import WebhookLogRepository

logger = setup_logger(__name__)


class WebhookLogService:
    """Writes log rows and serves cached counts, recent rows and details.

    Every write invalidates the cache keys it affects; other staleness is
    bounded by the TTLs.
    """

    def __init__(
        self,
        repository: WebhookLogRepository,
        cache: LogCache,
        stats_ttl: int = 300,
        detail_ttl: int = 3600,
    ):
        self.repository = repository
        self.cache = cache
        self.stats_ttl = stats_ttl
        self.detail_ttl = detail_ttl

    async def record_request(
        self,
        request_body: str,
        request_params: Optional[Any],
        request_headers: Dict[str, Any],
        ip_address: str,
        created_at: datetime,
    ) -> int:
        """Insert a ``pending`` row. Returns its id."""
        log_id = await self.repository.insert_pending(
            request_body=request_body,
            request_params=request_params,
            request_headers=request_headers,
            ip_address=ip_address,
            created_at=created_at,
        )

        await self.cache.delete(CACHE_GROUP_STATS, CACHE_KEY_TOTAL, CACHE_KEY_RECENT)
        await self.cache.delete(CACHE_GROUP_LOGS, CACHE_KEY_RECENT_PAGE)

        logger.info(f"Logged webhook request {log_id} from {ip_address or 'unknown'}")
        return log_id

    async def record_outcome(
        self,
        log_id: int,
        status: str,
        response_data: Optional[Any],
        processed_at: datetime,
    ) -> None:
        """Move a row to its terminal status."""
        await self.repository.update_status(log_id, status, response_data, processed_at)

        await self.cache.delete(
            CACHE_GROUP_STATS, CACHE_KEY_SUCCESS, CACHE_KEY_ERROR, CACHE_KEY_RECENT
        )
        await self.cache.delete(
            CACHE_GROUP_LOGS, CACHE_KEY_RECENT_PAGE, f"{CACHE_KEY_DETAIL_PREFIX}{log_id}"
        )

        logger.info(f"Webhook log {log_id} marked {status}")

    async def _cached(self, group: str, key: str, ttl: int, loader) -> Any:
        value = await self.cache.get(group, key)
        if value is None:
            value = await loader()
            await self.cache.set(group, key, value, ttl)
        return value

    async def get_stats(self) -> Dict[str, Any]:
        """Total/success/error counts and the most recent rows."""

        async def recent() -> List[Dict[str, Any]]:
            rows = await self.repository.recent(DASHBOARD_RECENT_LOGS)
            return [row.to_dict() for row in rows]

        total = await self._cached(
            CACHE_GROUP_STATS, CACHE_KEY_TOTAL, self.stats_ttl, self.repository.count
        )
        success = await self._cached(
            CACHE_GROUP_STATS, CACHE_KEY_SUCCESS, self.stats_ttl,
            lambda: self.repository.count(STATUS_SUCCESS),
        )
        error = await self._cached(
            CACHE_GROUP_STATS, CACHE_KEY_ERROR, self.stats_ttl,
            lambda: self.repository.count(STATUS_ERROR),
        )
        recent_logs = await self._cached(
            CACHE_GROUP_STATS, CACHE_KEY_RECENT, self.stats_ttl, recent
        )

        return {
            "total_logs": total,
            "success_logs": success,
            "error_logs": error,
            "recent_logs": recent_logs,
        }

    async def recent_logs(self) -> List[Dict[str, Any]]:
        """Rows for the logs page, most recent first."""

        async def load() -> List[Dict[str, Any]]:
            rows = await self.repository.recent(LOGS_PAGE_SIZE)
            return [row.to_dict() for row in rows]

        return await self._cached(CACHE_GROUP_LOGS, CACHE_KEY_RECENT_PAGE, self.stats_ttl, load)

    async def get_detail(self, log_id: int) -> Dict[str, Any]:
        """Full log entry; raises ``NotFoundError`` for unknown ids."""
        key = f"{CACHE_KEY_DETAIL_PREFIX}{log_id}"
        cached = await self.cache.get(CACHE_GROUP_LOGS, key)
        if cached is not None:
            return cached

        log = await self.repository.get(log_id)
        if log is None:
            raise NotFoundError("Log", log_id)

        detail = log.to_dict()
        await self.cache.set(CACHE_GROUP_LOGS, key, detail, self.detail_ttl)
        return detail
