"""FastAPI dependencies wiring repositories and services per request."""

from datetime import datetime
from typing import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from commerce_control.config.settings import Settings
from commerce_control.core.cache import LogCache
from commerce_control.db.repository import OrderRepository, ProductRepository, WebhookLogRepository
from commerce_control.handlers.shipping import ShippingEventProcessor
from commerce_control.integrations.forwarder import WebhookForwarder
from commerce_control.repositories.base import SettingsRepository
from commerce_control.repositories.sql_repository import SqlSettingsRepository
from commerce_control.services.gateway_rules import GatewayRuleService
from commerce_control.services.log_service import WebhookLogService
from commerce_control.services.settings_service import SettingsService
from commerce_control.services.webhook_ingestor import WebhookIngestor


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_db_session(request: Request) -> AsyncIterator[AsyncSession]:
    """Dependency for getting database session."""
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        raise RuntimeError("Database not initialized")

    async with session_factory() as session:
        yield session


def get_cache(request: Request) -> LogCache:
    return request.app.state.cache


def get_store_now(request: Request) -> datetime:
    """Store-local wall clock."""
    return request.app.state.clock()


def get_settings_repository(
    request: Request,
    session: AsyncSession = Depends(get_db_session),
) -> SettingsRepository:
    file_repository = getattr(request.app.state, "settings_repository", None)
    if file_repository is not None:
        return file_repository
    return SqlSettingsRepository(session)


def get_settings_service(
    repository: SettingsRepository = Depends(get_settings_repository),
    app_settings: Settings = Depends(get_app_settings),
) -> SettingsService:
    return SettingsService(repository, store_currency=app_settings.store_currency)


def get_gateway_rule_service(
    settings_service: SettingsService = Depends(get_settings_service),
) -> GatewayRuleService:
    return GatewayRuleService(settings_service)


def get_log_service(
    session: AsyncSession = Depends(get_db_session),
    cache: LogCache = Depends(get_cache),
    app_settings: Settings = Depends(get_app_settings),
) -> WebhookLogService:
    return WebhookLogService(
        WebhookLogRepository(session),
        cache,
        stats_ttl=app_settings.stats_cache_ttl,
        detail_ttl=app_settings.log_detail_cache_ttl,
    )


def get_order_repository(session: AsyncSession = Depends(get_db_session)) -> OrderRepository:
    return OrderRepository(session)


def get_product_repository(session: AsyncSession = Depends(get_db_session)) -> ProductRepository:
    return ProductRepository(session)


def get_ingestor(
    request: Request,
    log_service: WebhookLogService = Depends(get_log_service),
    orders: OrderRepository = Depends(get_order_repository),
) -> WebhookIngestor:
    clock = request.app.state.clock
    forwarder: WebhookForwarder = request.app.state.forwarder
    processor = ShippingEventProcessor(orders, forwarder=forwarder, clock=clock)
    return WebhookIngestor(log_service, processor, clock=clock)
