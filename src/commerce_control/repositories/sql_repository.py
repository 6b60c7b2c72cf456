"""Settings records stored in the ``settings_records`` table."""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from commerce_control.core.logger import setup_logger
from commerce_control.db.models import SettingsRecord
from commerce_control.repositories.base import SettingsRepository

logger = setup_logger(__name__)


class SqlSettingsRepository(SettingsRepository):
    """Database storage implementation."""

    def __init__(self, session: AsyncSession):
        """Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        record = await self.session.get(SettingsRecord, key)
        if record is None:
            return None
        return dict(record.value)

    async def save(self, key: str, value: Dict[str, Any]) -> None:
        record = await self.session.get(SettingsRecord, key)
        if record is None:
            self.session.add(SettingsRecord(key=key, value=value, updated_at=datetime.utcnow()))
        else:
            record.value = value
            record.updated_at = datetime.utcnow()
        await self.session.commit()
        logger.info(f"Saved settings record '{key}'")

    async def health_check(self) -> bool:
        try:
            await self.session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Settings database health check failed: {e}")
            return False
