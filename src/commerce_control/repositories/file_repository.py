"""
Settings records persisted to a JSON file.

Keeps all records in memory and rewrites the file on every save, so changes
survive restarts without a database.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from commerce_control.core.logger import setup_logger
from commerce_control.repositories.base import SettingsRepository

logger = setup_logger(__name__)


class JsonFileSettingsRepository(SettingsRepository):
    """Manages settings records with JSON file persistence."""

    def __init__(self, path: Path):
        """Initialize the store, loading from file if it exists."""
        self.path = Path(path)
        self._records = self._load()

    def _load(self) -> Dict[str, Dict[str, Any]]:
        """
        Load records from the JSON file.

        Returns:
            Mapping of record name to record; empty if the file is missing or unreadable
        """
        if not self.path.exists():
            logger.info(f"No settings file at {self.path}, starting empty")
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                records = json.load(f)
            logger.info(f"Loaded settings records from {self.path}")
            return records if isinstance(records, dict) else {}
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load settings file {self.path}: {e}")
            return {}

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._records, f, indent=2, ensure_ascii=False)

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        record = self._records.get(key)
        return dict(record) if record is not None else None

    async def save(self, key: str, value: Dict[str, Any]) -> None:
        self._records[key] = value
        self._write()
        logger.info(f"Saved settings record '{key}' to {self.path}")

    async def health_check(self) -> bool:
        """True when the settings file can be written (or created)."""
        target = self.path
        while not target.exists():
            if target.parent == target:
                return False
            target = target.parent
        return os.access(target, os.W_OK)
