"""Models module - Settings records and webhook payloads."""

from commerce_control.models.settings import (
    CurrencyRate,
    CurrencySettings,
    GeneralSettings,
    OrderControlSettings,
    PaymentGatewayRule,
    PaymentGatewayRuleInput,
    PaymentGatewaySettings,
)
from commerce_control.models.webhook import ShippingEvent

__all__ = [
    "CurrencyRate",
    "CurrencySettings",
    "GeneralSettings",
    "OrderControlSettings",
    "PaymentGatewayRule",
    "PaymentGatewayRuleInput",
    "PaymentGatewaySettings",
    "ShippingEvent",
]
