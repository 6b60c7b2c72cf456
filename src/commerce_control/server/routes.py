"""API routes for the shipping webhook receiver."""

import json
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from commerce_control.config.settings import Settings
from commerce_control.core.cache import LogCache
from commerce_control.core.logger import setup_logger
from commerce_control.repositories.base import SettingsRepository
from commerce_control.server.dependencies import (
    get_app_settings,
    get_cache,
    get_db_session,
    get_ingestor,
    get_settings_repository,
    get_settings_service,
)
from commerce_control.services.settings_service import SettingsService
from commerce_control.services.webhook_ingestor import WebhookIngestor, resolve_client_ip

logger = setup_logger(__name__)
router = APIRouter()


@router.get("/")
async def root(settings_service: SettingsService = Depends(get_settings_service)) -> dict:
    """Root endpoint with basic service info."""
    general = await settings_service.get_general()
    return {
        "service": "Commerce Control Suite",
        "version": "2.0.0",
        "endpoints": {
            "webhook": f"POST /{general.endpoint_slug}",
            "health": "GET /health",
            "admin": "/api/admin",
            "store": "/api/store",
            "docs": "GET /docs",
        },
    }


@router.get("/health")
async def health_check(
    session: AsyncSession = Depends(get_db_session),
    cache: LogCache = Depends(get_cache),
    settings_repository: SettingsRepository = Depends(get_settings_repository),
    app_settings: Settings = Depends(get_app_settings),
) -> dict:
    """Health check endpoint for monitoring."""
    health_status = {
        "status": "healthy",
        "service": "commerce-control-suite",
        "checks": {},
    }

    try:
        await session.execute(text("SELECT 1"))
        health_status["checks"]["database"] = "ok"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        health_status["checks"]["database"] = "unreachable"
        health_status["status"] = "degraded"

    cache_ok = await cache.health_check()
    health_status["checks"]["cache"] = {
        "backend": "redis" if app_settings.redis_enabled else "memory",
        "status": "ok" if cache_ok else "unreachable",
    }
    if not cache_ok:
        health_status["status"] = "degraded"

    settings_ok = await settings_repository.health_check()
    health_status["checks"]["settings"] = {
        "backend": app_settings.settings_backend,
        "status": "ok" if settings_ok else "unavailable",
    }
    if not settings_ok:
        health_status["status"] = "degraded"

    health_status["checks"]["forwarding"] = (
        "enabled" if app_settings.forward_webhook_url else "disabled"
    )

    return health_status


def _parse_params(body: str) -> Optional[Any]:
    """Parsed JSON body, or None when the body is empty or not JSON."""
    if not body.strip():
        return None
    try:
        return json.loads(body)
    except json.JSONDecodeError:
        logger.warning("Webhook body is not valid JSON")
        return None


@router.post("/{slug}")
async def shipping_webhook(
    slug: str,
    request: Request,
    settings_service: SettingsService = Depends(get_settings_service),
    ingestor: WebhookIngestor = Depends(get_ingestor),
) -> JSONResponse:
    """
    Shipping webhook endpoint.

    The path is the configured endpoint slug, looked up on every request so a
    changed slug takes effect without a restart. Every delivery is logged
    before it is processed.

    Returns:
        200 with the processed data, or 500 with the processing error;
        both carry the log row id
    """
    general = await settings_service.get_general()
    if slug != general.endpoint_slug:
        raise HTTPException(status_code=404, detail="Not Found")

    raw_body = await request.body()
    body_str = raw_body.decode("utf-8", errors="replace")
    params = _parse_params(body_str)

    client_ip = resolve_client_ip(
        request.headers,
        request.client.host if request.client else None,
    )

    result = await ingestor.receive(body_str, params, dict(request.headers), client_ip)

    logger.info(f"Webhook received: log_id={result.log_id}, success={result.success}")
    return JSONResponse(content=result.to_response(), status_code=result.status_code)
