"""Currency-based payment gateway filtering and rule management."""

from typing import Any, Dict, Iterable, List, Mapping, Sequence

from commerce_control.core.exceptions import NotFoundError
from commerce_control.core.logger import setup_logger
from commerce_control.models.settings import (
    PaymentGatewayRule,
    PaymentGatewayRuleInput,
    PaymentGatewaySettings,
)
from commerce_control.services.settings_service import SettingsService

logger = setup_logger(__name__)


def allowed_gateways(
    current_currency: str,
    rules: Sequence[PaymentGatewayRule],
    all_gateways: Iterable[str],
) -> List[str]:
    """
    Gateways usable for ``current_currency``.

    Gateways of every enabled rule listing the currency are unioned in rule
    order. No matching rule leaves all gateways available (fail-open);
    otherwise the union is intersected with the available gateways.

    Args:
        current_currency: Shopper's currency code
        rules: Stored rules in order
        all_gateways: Currently available gateway ids

    Returns:
        Gateway ids, in the order of ``all_gateways``
    """
    available = list(all_gateways)
    allowed = set()
    for rule in rules:
        if rule.enabled and current_currency in rule.currencies:
            allowed.update(rule.gateways)

    if not allowed:
        return available
    return [gateway for gateway in available if gateway in allowed]


def filter_gateway_map(
    current_currency: str,
    rules: Sequence[PaymentGatewayRule],
    gateways: Mapping[str, str],
) -> Dict[str, str]:
    """Apply :func:`allowed_gateways` to an id → title mapping."""
    keep = allowed_gateways(current_currency, rules, gateways.keys())
    return {gateway_id: gateways[gateway_id] for gateway_id in keep}


class GatewayRuleService:
    """Rule CRUD addressed by stable rule ids."""

    def __init__(self, settings_service: SettingsService):
        self.settings_service = settings_service

    async def list_rules(self) -> List[PaymentGatewayRule]:
        return (await self.settings_service.get_payment_gateways()).rules

    async def _store(self, rules: List[PaymentGatewayRule]) -> None:
        await self.settings_service.save_payment_gateways(
            PaymentGatewaySettings(rules=rules).model_dump(mode="json")
        )

    async def add_rule(self, rule_input: PaymentGatewayRuleInput) -> PaymentGatewayRule:
        rules = await self.list_rules()
        rule = PaymentGatewayRule(**rule_input.model_dump())
        rules.append(rule)
        await self._store(rules)
        logger.info(f"Added payment gateway rule {rule.id} ({rule.name})")
        return rule

    async def update_rule(self, rule_id: str, rule_input: PaymentGatewayRuleInput) -> PaymentGatewayRule:
        rules = await self.list_rules()
        for index, rule in enumerate(rules):
            if rule.id == rule_id:
                rules[index] = PaymentGatewayRule(id=rule_id, **rule_input.model_dump())
                await self._store(rules)
                logger.info(f"Updated payment gateway rule {rule_id}")
                return rules[index]
        raise NotFoundError("Rule", rule_id)

    async def delete_rule(self, rule_id: str) -> None:
        rules = await self.list_rules()
        remaining = [rule for rule in rules if rule.id != rule_id]
        if len(remaining) == len(rules):
            raise NotFoundError("Rule", rule_id)
        await self._store(remaining)
        logger.info(f"Deleted payment gateway rule {rule_id}")

    async def toggle_rule(self, rule_id: str) -> PaymentGatewayRule:
        rules = await self.list_rules()
        for rule in rules:
            if rule.id == rule_id:
                rule.enabled = not rule.enabled
                await self._store(rules)
                logger.info(f"Payment gateway rule {rule_id} enabled={rule.enabled}")
                return rule
        raise NotFoundError("Rule", rule_id)


def gateway_statistics(
    rules: Sequence[PaymentGatewayRule],
    active_currencies: Sequence[str],
    gateways: Mapping[str, str],
) -> Dict[str, Any]:
    """Dashboard summary of the gateway filter."""
    return {
        "total_rules": len(rules),
        "enabled_rules": sum(1 for rule in rules if rule.enabled),
        "active_currencies": len(active_currencies),
        "available_gateways": len(gateways),
    }
