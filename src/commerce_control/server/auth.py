"""
Authentication Dependencies

API key authentication for admin endpoints and anti-forgery token checks
for admin actions.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from commerce_control.config.settings import Settings
from commerce_control.core.nonce import verify_nonce
from commerce_control.server.dependencies import get_app_settings


async def verify_api_key(
    x_api_key: Optional[str] = Header(None, description="Dashboard API key"),
    app_settings: Settings = Depends(get_app_settings),
) -> bool:
    """
    Verify API key from X-API-Key header.

    Raises:
        HTTPException: If API key is missing, invalid, or the admin API is not configured

    Returns:
        True if authentication successful
    """
    expected_key = app_settings.dashboard_api_key

    # Check if dashboard is configured
    if not expected_key:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin API not configured (DASHBOARD_API_KEY not set in environment)"
        )

    if x_api_key != expected_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
            headers={"WWW-Authenticate": "ApiKey"}
        )

    return True


def nonce_secret(app_settings: Settings) -> str:
    """Signing secret for anti-forgery tokens."""
    return app_settings.nonce_secret or app_settings.dashboard_api_key or ""


def require_nonce(action: str):
    """
    Build a dependency that rejects requests without a valid token for ``action``.

    The token is read from the X-CSRF-Token header.
    """

    async def dependency(
        x_csrf_token: Optional[str] = Header(None, description="Anti-forgery token"),
        app_settings: Settings = Depends(get_app_settings),
    ) -> bool:
        if not verify_nonce(nonce_secret(app_settings), action, x_csrf_token):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Invalid security token",
            )
        return True

    return dependency
