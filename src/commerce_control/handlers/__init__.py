"""Handlers module - Shipping event processing."""

from commerce_control.handlers.shipping import ShippingEventProcessor

__all__ = ["ShippingEventProcessor"]
