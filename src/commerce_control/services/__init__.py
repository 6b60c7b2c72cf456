"""Services module - Order gate, gateway and currency rules, webhook ingestion."""

from commerce_control.services.gateway_rules import GatewayRuleService, allowed_gateways
from commerce_control.services.log_service import WebhookLogService
from commerce_control.services.order_availability import can_order, orders_enabled
from commerce_control.services.settings_service import SettingsService
from commerce_control.services.webhook_ingestor import WebhookIngestor

__all__ = [
    "GatewayRuleService",
    "allowed_gateways",
    "WebhookLogService",
    "can_order",
    "orders_enabled",
    "SettingsService",
    "WebhookIngestor",
]
