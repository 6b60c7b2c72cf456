"""Typed access to the persisted settings records."""

from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from commerce_control.config.constants import (
    SETTINGS_KEY_CURRENCY,
    SETTINGS_KEY_GENERAL,
    SETTINGS_KEY_ORDER_CONTROL,
    SETTINGS_KEY_PAYMENT_GATEWAYS,
)
from commerce_control.core.exceptions import SettingsValidationError
from commerce_control.core.logger import setup_logger
from commerce_control.models.settings import (
    CurrencySettings,
    GeneralSettings,
    OrderControlSettings,
    PaymentGatewaySettings,
)
from commerce_control.repositories.base import SettingsRepository

logger = setup_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class SettingsService:
    """Loads and validates settings records from an injected repository.

    Records that fail validation on load are reported and replaced by defaults.
    Submissions that fail validation raise ``SettingsValidationError`` and
    leave the stored record untouched.
    """

    def __init__(self, repository: SettingsRepository, store_currency: str = "USD"):
        self.repository = repository
        self.store_currency = store_currency

    async def _load(self, key: str, model: Type[ModelT]) -> ModelT:
        return self._validate_stored(key, model, await self.repository.get(key))

    def _validate_stored(self, key: str, model: Type[ModelT], raw: Optional[Dict[str, Any]]) -> ModelT:
        if raw is None:
            return model()
        try:
            return model.model_validate(raw)
        except ValidationError as e:
            logger.error(f"Stored '{key}' settings are invalid, using defaults: {e}")
            return model()

    async def _save(self, key: str, model: Type[ModelT], data: Dict[str, Any]) -> ModelT:
        try:
            validated = model.model_validate(data)
        except ValidationError as e:
            raise SettingsValidationError.from_pydantic(key, e) from e
        await self.repository.save(key, validated.model_dump(mode="json"))
        return validated

    async def get_general(self) -> GeneralSettings:
        return await self._load(SETTINGS_KEY_GENERAL, GeneralSettings)

    async def save_general(self, data: Dict[str, Any]) -> GeneralSettings:
        return await self._save(SETTINGS_KEY_GENERAL, GeneralSettings, data)

    async def get_order_control(self) -> OrderControlSettings:
        return await self._load(SETTINGS_KEY_ORDER_CONTROL, OrderControlSettings)

    async def save_order_control(self, data: Dict[str, Any]) -> OrderControlSettings:
        return await self._save(SETTINGS_KEY_ORDER_CONTROL, OrderControlSettings, data)

    async def get_payment_gateways(self) -> PaymentGatewaySettings:
        """Stored rules; rules saved without an id get one assigned and persisted."""
        raw = await self.repository.get(SETTINGS_KEY_PAYMENT_GATEWAYS)
        gateways = self._validate_stored(SETTINGS_KEY_PAYMENT_GATEWAYS, PaymentGatewaySettings, raw)

        stored_rules = (raw or {}).get("rules") or []
        missing_ids = [
            rule
            for rule in stored_rules
            if isinstance(rule, dict) and not str(rule.get("id") or "").strip()
        ]
        if missing_ids and gateways.rules:
            await self.repository.save(SETTINGS_KEY_PAYMENT_GATEWAYS, gateways.model_dump(mode="json"))
            logger.info(f"Assigned ids to {len(missing_ids)} stored payment gateway rule(s)")
        return gateways

    async def save_payment_gateways(self, data: Dict[str, Any]) -> PaymentGatewaySettings:
        return await self._save(SETTINGS_KEY_PAYMENT_GATEWAYS, PaymentGatewaySettings, data)

    async def get_currency(self) -> CurrencySettings:
        currency = await self._load(SETTINGS_KEY_CURRENCY, CurrencySettings)
        if not currency.default_currency:
            currency.default_currency = self.store_currency.upper()
        return currency

    async def save_currency(self, data: Dict[str, Any]) -> CurrencySettings:
        currency = await self._save(SETTINGS_KEY_CURRENCY, CurrencySettings, data)
        if not currency.default_currency:
            currency.default_currency = self.store_currency.upper()
        return currency
