"""SQLAlchemy models for webhook logs, settings records and the store catalog."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from commerce_control.config.constants import STATUS_PENDING

from .base import Base


class WebhookLog(Base):
    """
    Audit record of one inbound shipping webhook.

    Inserted as ``pending`` before the event is processed, then updated once
    to ``success`` or ``error``. Rows are never deleted.
    """

    __tablename__ = "webhook_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Request capture
    request_body: Mapped[str] = mapped_column(Text, nullable=False)
    request_params: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    request_headers: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)

    # Outcome
    status: Mapped[str] = mapped_column(
        String(20), default=STATUS_PENDING, nullable=False, index=True
    )
    response_data: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    processed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "ip_address": self.ip_address,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "processed_at": self.processed_at.isoformat() if self.processed_at else None,
            "request_body": self.request_body,
            "request_params": self.request_params,
            "request_headers": self.request_headers,
            "response_data": self.response_data,
        }


class SettingsRecord(Base):
    """One persisted settings blob per module (order control, currency, ...)."""

    __tablename__ = "settings_records"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )


class Product(Base):
    """Catalog product with its categories and per-currency fixed prices."""

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    base_price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    category_ids: Mapped[List[int]] = mapped_column(JSON, nullable=False, default=list)
    currency_prices: Mapped[Dict[str, float]] = mapped_column(JSON, nullable=False, default=dict)


class Order(Base):
    """Order whose shipping information is updated by webhook events."""

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    shipping_tracking_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    shipping_status: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )


class OrderNote(Base):
    """Free-text note attached to an order."""

    __tablename__ = "order_notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[str] = mapped_column(
        String(50), ForeignKey("orders.id"), index=True, nullable=False
    )
    note: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
