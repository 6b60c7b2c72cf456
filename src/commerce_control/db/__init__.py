"""Database module."""

from .base import Base, get_engine, get_session_factory, init_db
from .models import Order, OrderNote, Product, SettingsRecord, WebhookLog
from .repository import OrderRepository, ProductRepository, WebhookLogRepository

__all__ = [
    "Base",
    "get_engine",
    "get_session_factory",
    "init_db",
    "Order",
    "OrderNote",
    "Product",
    "SettingsRecord",
    "WebhookLog",
    "OrderRepository",
    "ProductRepository",
    "WebhookLogRepository",
]
