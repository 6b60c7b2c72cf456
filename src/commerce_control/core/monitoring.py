"""
GlitchTip Error Monitoring Utilities

Helper functions for error tracking and context management.
"""

from typing import Any, Dict, Optional

import sentry_sdk

from commerce_control.core.logger import setup_logger

logger = setup_logger(__name__)


def init_monitoring(dsn: Optional[str], environment: str) -> bool:
    """
    Initialize GlitchTip (Sentry-compatible) error monitoring.

    Args:
        dsn: GlitchTip DSN; monitoring stays off when empty
        environment: Deployment environment name

    Returns:
        True if monitoring was initialized
    """
    if not dsn:
        return False

    try:
        import logging
        from sentry_sdk.integrations.fastapi import FastApiIntegration
        from sentry_sdk.integrations.logging import LoggingIntegration

        sentry_sdk.init(
            dsn=dsn,
            environment=environment,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                LoggingIntegration(
                    level=None,  # Capture all log levels as breadcrumbs
                    event_level=logging.ERROR  # Send ERROR logs as events
                ),
            ],
            traces_sample_rate=0.1,
            profiles_sample_rate=0.0,
            send_default_pii=False,
        )
        logger.info("GlitchTip error monitoring initialized")
        return True
    except Exception as e:
        logger.error(f"Failed to initialize GlitchTip: {e}")
        return False


def set_webhook_context(
    log_id: int,
    order_id: Optional[str] = None,
    event_type: Optional[str] = None,
    **extra_tags
) -> None:
    """
    Set webhook-specific context for error tracking.

    Args:
        log_id: Webhook log row id
        order_id: Order referenced by the event
        event_type: Shipping platform event type
        **extra_tags: Additional tags to add
    """
    try:
        sentry_sdk.set_tag("webhook.log_id", log_id)
        if order_id:
            sentry_sdk.set_tag("webhook.order_id", order_id)
        if event_type:
            sentry_sdk.set_tag("webhook.event_type", event_type)

        for key, value in extra_tags.items():
            sentry_sdk.set_tag(key, value)

        context_data = {
            "log_id": log_id,
            "order_id": order_id,
            "event_type": event_type,
        }
        context_data.update(extra_tags)
        sentry_sdk.set_context("webhook", context_data)

    except Exception as e:
        logger.warning(f"Failed to set webhook context: {e}")


def capture_exception(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
    level: str = "error"
) -> None:
    """
    Capture an exception and send to GlitchTip.

    Args:
        error: The exception to capture
        context: Additional context data
        level: Error level (error, warning, info)
    """
    try:
        if context:
            with sentry_sdk.new_scope() as scope:
                scope.set_context("custom", context)
                scope.level = level
                sentry_sdk.capture_exception(error)
        else:
            sentry_sdk.capture_exception(error)

    except Exception as e:
        logger.warning(f"Failed to capture exception in GlitchTip: {e}")
