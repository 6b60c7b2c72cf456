"""Anti-forgery tokens for admin actions.

Tokens are HMAC-SHA256 over ``tick|action`` where the tick advances every
``NONCE_TICK_SECONDS``. A token stays valid for the tick it was issued in and
the one after it.
"""

import hashlib
import hmac
import time
from typing import Optional

from commerce_control.config.constants import NONCE_TICK_SECONDS
from commerce_control.core.logger import setup_logger

logger = setup_logger(__name__)


def _tick(now: Optional[float] = None) -> int:
    return int((time.time() if now is None else now) // NONCE_TICK_SECONDS)


def _sign(secret: str, tick: int, action: str) -> str:
    return hmac.new(
        secret.encode("utf-8"),
        f"{tick}|{action}".encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def create_nonce(secret: str, action: str, now: Optional[float] = None) -> str:
    """
    Create a token binding ``action`` to the current time window.

    Args:
        secret: Server-side signing secret
        action: Name of the protected admin action
        now: Unix timestamp override (tests)

    Returns:
        Hex token
    """
    return _sign(secret, _tick(now), action)


def verify_nonce(
    secret: str,
    action: str,
    token: Optional[str],
    now: Optional[float] = None,
) -> bool:
    """
    Verify a token issued by :func:`create_nonce`.

    Args:
        secret: Server-side signing secret
        action: Name of the protected admin action
        token: Token sent by the client
        now: Unix timestamp override (tests)

    Returns:
        True if the token matches the current or the previous tick
    """
    if not token:
        logger.warning(f"Missing anti-forgery token for action {action}")
        return False

    tick = _tick(now)
    for candidate in (tick, tick - 1):
        # Constant-time comparison
        if hmac.compare_digest(_sign(secret, candidate, action), token):
            return True

    logger.warning(f"Invalid anti-forgery token for action {action}")
    return False
