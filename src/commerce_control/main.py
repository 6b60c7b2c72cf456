"""Commerce Control Suite - Main Entry Point."""

import os

from commerce_control.server.app import create_app

# Create FastAPI application
app = create_app()

if __name__ == "__main__":
    import uvicorn

    from commerce_control.config.settings import settings

    # Get configuration from environment
    reload = os.getenv("RELOAD", "false").lower() == "true"
    log_level = os.getenv("LOG_LEVEL", "info").lower()

    # - timeout_graceful_shutdown: uvicorn's outer limit for the shutdown handler
    # - timeout_keep_alive: keep-alive timeout for persistent connections
    uvicorn.run(
        "commerce_control.main:app",
        host=settings.host,
        port=settings.port,
        reload=reload,
        log_level=log_level,
        timeout_graceful_shutdown=30,
        timeout_keep_alive=5,
        access_log=False,  # Structured logging replaces the access log
    )
