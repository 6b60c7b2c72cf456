"""
Order availability policy.

Pure functions deciding whether ordering is currently permitted, globally or
for one product. ``now`` is the store-local wall clock; date-range bounds are
compared against it as naive timestamps and the time-of-day window uses
minute precision.
"""

from datetime import datetime, time
from typing import Any, Dict, Iterable, Optional

from commerce_control.config.constants import (
    RESTRICTION_ALL,
    RESTRICTION_CATEGORIES,
    RESTRICTION_PRODUCTS,
)
from commerce_control.models.settings import OrderControlSettings


def _wall_clock(now: datetime) -> datetime:
    return now.replace(tzinfo=None) if now.tzinfo is not None else now


def within_date_range(settings: OrderControlSettings, now: datetime) -> bool:
    """True unless ``now`` falls before the start or after the end bound."""
    current = _wall_clock(now)
    if settings.start_datetime is not None and current < settings.start_datetime:
        return False
    if settings.end_datetime is not None and current > settings.end_datetime:
        return False
    return True


def within_timeframe(settings: OrderControlSettings, now: datetime) -> bool:
    """
    Check the time-of-day window.

    ``start <= end`` is a same-day window, ``start > end`` an overnight one
    (e.g. 22:00 to 06:00). A missing bound leaves the window open.
    """
    start, end = settings.start_time, settings.end_time
    if start is None or end is None:
        return True

    current = time(now.hour, now.minute)
    if start <= end:
        return start <= current <= end
    return current >= start or current <= end


def within_allowed_period(settings: OrderControlSettings, now: datetime) -> bool:
    """Date range and timeframe, each only when enabled, both must pass."""
    if settings.enable_date_range and not within_date_range(settings, now):
        return False
    if settings.enable_timeframe and not within_timeframe(settings, now):
        return False
    return True


def orders_enabled(settings: OrderControlSettings, now: datetime) -> bool:
    """Checkout-wide predicate; ignores the restriction scope."""
    return settings.enable_orders and within_allowed_period(settings, now)


def can_order(
    product_id: int,
    settings: OrderControlSettings,
    now: datetime,
    product_categories: Iterable[int] = (),
) -> bool:
    """
    Decide whether one product can be ordered right now.

    Args:
        product_id: Catalog product id
        settings: Order control settings
        now: Store-local current time
        product_categories: Category ids the product belongs to

    Returns:
        True if the product is purchasable
    """
    if not settings.enable_orders:
        return False

    restriction_type = settings.restriction_type

    if restriction_type == RESTRICTION_ALL:
        return within_allowed_period(settings, now)

    if restriction_type == RESTRICTION_CATEGORIES:
        restricted = set(settings.restricted_categories)
        if restricted and restricted.intersection(product_categories):
            return within_allowed_period(settings, now)
        return True

    if restriction_type == RESTRICTION_PRODUCTS:
        if product_id in settings.restricted_products:
            return within_allowed_period(settings, now)
        return True

    return True


def checkout_block(
    settings: OrderControlSettings,
    now: datetime,
    home_url: str,
) -> Optional[Dict[str, str]]:
    """
    Describe how checkout is blocked, if it is.

    Returns:
        None when orders are enabled, otherwise the validation message and
        the redirect target (``redirect_url`` or the store home page)
    """
    if orders_enabled(settings, now):
        return None
    return {
        "message": settings.disabled_message,
        "redirect_url": settings.redirect_url or home_url,
    }


def order_statistics(settings: OrderControlSettings, now: datetime) -> Dict[str, Any]:
    """Dashboard summary of the order gate."""
    return {
        "orders_enabled": settings.enable_orders,
        "timeframe_enabled": settings.enable_timeframe,
        "date_range_enabled": settings.enable_date_range,
        "restriction_type": settings.restriction_type,
        "current_status": "active" if orders_enabled(settings, now) else "disabled",
        "start_time": settings.start_time.strftime("%H:%M") if settings.start_time else "",
        "end_time": settings.end_time.strftime("%H:%M") if settings.end_time else "",
    }
