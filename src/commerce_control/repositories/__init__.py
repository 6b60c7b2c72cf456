"""Settings repositories (database or JSON file backend)."""

from commerce_control.repositories.base import SettingsRepository
from commerce_control.repositories.file_repository import JsonFileSettingsRepository
from commerce_control.repositories.sql_repository import SqlSettingsRepository

__all__ = ["SettingsRepository", "JsonFileSettingsRepository", "SqlSettingsRepository"]
