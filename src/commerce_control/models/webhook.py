"""Pydantic models for shipping webhook events."""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from commerce_control.config.constants import SHIPPING_EVENT_FIELDS


class ShippingEvent(BaseModel):
    """Shipping platform callback. All recognized fields are optional."""

    order_id: Optional[str] = Field(None, description="Store order id")
    tracking_number: Optional[str] = Field(None, description="Carrier tracking number")
    status: Optional[str] = Field(None, description="Shipping status reported by the platform")
    event_type: Optional[str] = Field(None, description="Platform event type")

    class Config:
        extra = "allow"

    @field_validator(*SHIPPING_EVENT_FIELDS, mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> Optional[str]:
        """Coerce scalars to stripped strings; empty values become None."""
        if value is None or isinstance(value, (dict, list)):
            return None
        text = str(value).strip()
        return text or None
