"""Abstract base repository for persisted settings records."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class SettingsRepository(ABC):
    """Abstract key/value store for settings records.

    Each module (general, order control, payment gateways, currency) owns one
    JSON-serializable record. Saves replace the whole record (last write wins).
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Get a settings record.

        Args:
            key: Record name

        Returns:
            The stored record, or None if it was never saved
        """
        pass

    @abstractmethod
    async def save(self, key: str, value: Dict[str, Any]) -> None:
        """Replace a settings record.

        Args:
            key: Record name
            value: JSON-serializable record
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if storage backend is accessible.

        Returns:
            True if healthy, False otherwise
        """
        pass
