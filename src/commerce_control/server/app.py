"""FastAPI application setup and configuration."""

from datetime import datetime
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from commerce_control.config.settings import Settings, settings as default_settings
from commerce_control.core.cache import MemoryLogCache, RedisLogCache
from commerce_control.core.exceptions import NotFoundError, SettingsValidationError
from commerce_control.core.logger import setup_logger
from commerce_control.core.monitoring import init_monitoring
from commerce_control.db import get_engine, get_session_factory, init_db
from commerce_control.integrations.forwarder import WebhookForwarder
from commerce_control.repositories.file_repository import JsonFileSettingsRepository

logger = setup_logger(__name__)


def store_clock(timezone: str):
    """Clock returning the store-local wall time (naive)."""
    tz = ZoneInfo(timezone)

    def now() -> datetime:
        return datetime.now(tz).replace(tzinfo=None)

    return now


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure FastAPI application."""
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="Commerce Control Suite",
        version="2.0.0",
        description=(
            "Receives shipping webhooks and gates ordering, payment gateways "
            "and prices for the store"
        ),
    )

    app.state.settings = app_settings
    app.state.clock = store_clock(app_settings.store_timezone)
    app.state.forwarder = WebhookForwarder(app_settings.forward_webhook_url)
    app.state.engine = None
    app.state.session_factory = None
    app.state.settings_repository = None

    if app_settings.redis_enabled:
        app.state.cache = RedisLogCache(
            host=app_settings.redis_host,
            port=app_settings.redis_port,
            db=app_settings.redis_db,
        )
    else:
        app.state.cache = MemoryLogCache()

    if app_settings.settings_backend == "file":
        app.state.settings_repository = JsonFileSettingsRepository(Path(app_settings.settings_file))

    init_monitoring(app_settings.glitchtip_dsn, app_settings.environment)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(SettingsValidationError)
    async def settings_validation_handler(request: Request, exc: SettingsValidationError):
        logger.warning(f"Rejected settings submission: {exc}")
        return JSONResponse(
            status_code=422,
            content={"success": False, "message": str(exc), "errors": exc.errors},
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"success": False, "message": str(exc)})

    # Import and include routers; the webhook catch-all route goes last
    from commerce_control.server import admin_routes, routes, storefront_routes

    app.include_router(admin_routes.router)
    app.include_router(storefront_routes.router)
    app.include_router(routes.router)

    @app.on_event("startup")
    async def startup_db():
        """Initialize database on application startup."""
        try:
            logger.info("Initializing database")
            engine = get_engine(app_settings.database_url)
            await init_db(engine)

            app.state.engine = engine
            app.state.session_factory = get_session_factory(engine)

            logger.info("Database initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}", exc_info=True)
            raise

    @app.on_event("shutdown")
    async def shutdown_handler():
        """Close database connections and the cache client."""
        logger.info("Starting graceful shutdown...")

        if app.state.engine is not None:
            try:
                await app.state.engine.dispose()
                logger.info("Database connections closed successfully")
            except Exception as e:
                logger.error(f"Error closing database connections: {e}")

        try:
            await app.state.cache.close()
        except Exception as e:
            logger.error(f"Error closing cache: {e}")

        logger.info("Graceful shutdown completed successfully")

    return app
