"""Shared fixtures for the Commerce Control Suite test suite."""

import os

# Keep test runs from writing log files
os.environ.setdefault("LOG_TO_FILE", "false")

from datetime import datetime
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from commerce_control.config.settings import Settings
from commerce_control.core.nonce import create_nonce
from commerce_control.repositories.file_repository import JsonFileSettingsRepository
from commerce_control.server.app import create_app
from commerce_control.services.settings_service import SettingsService

API_KEY = "test-api-key"


@pytest.fixture()
def app_settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite database."""
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'commerce_control.db'}",
        settings_backend="database",
        dashboard_api_key=API_KEY,
        nonce_secret=None,
        site_url="https://shop.example/",
        store_timezone="UTC",
        store_currency="USD",
        forward_webhook_url=None,
        glitchtip_dsn=None,
        redis_enabled=False,
    )


@pytest.fixture()
def app(app_settings: Settings):
    return create_app(app_settings)


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def freeze_store_clock(app):
    """Pin the store-local clock of the app to a fixed wall time."""

    def freeze(moment: datetime) -> None:
        app.state.clock = lambda: moment

    return freeze


@pytest.fixture()
def admin_headers() -> dict:
    return {"X-API-Key": API_KEY}


@pytest.fixture()
def nonce_headers(admin_headers):
    """Admin headers plus a valid anti-forgery token for ``action``."""

    def build(action: str) -> dict:
        return {**admin_headers, "X-CSRF-Token": create_nonce(API_KEY, action)}

    return build


@pytest.fixture()
def file_repository(tmp_path: Path) -> JsonFileSettingsRepository:
    return JsonFileSettingsRepository(tmp_path / "settings.json")


@pytest.fixture()
def settings_service(file_repository) -> SettingsService:
    return SettingsService(file_repository, store_currency="USD")
