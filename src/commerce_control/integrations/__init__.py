"""Integrations module - Downstream forwarding of shipping events."""

from commerce_control.integrations.forwarder import WebhookForwarder

__all__ = ["WebhookForwarder"]
