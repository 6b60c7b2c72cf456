"""Pydantic models for the persisted settings records."""

import re
import uuid
from datetime import datetime, time
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator

from commerce_control.config.constants import (
    DEFAULT_DISABLED_MESSAGE,
    DEFAULT_ENDPOINT_SLUG,
    RESTRICTION_ALL,
)


def sanitize_slug(value: str) -> str:
    """Lowercase, collapse anything but ``a-z0-9_`` into single hyphens."""
    slug = re.sub(r"[^a-z0-9_]+", "-", value.strip().lower())
    return slug.strip("-")


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _currency_code(value: Any) -> str:
    return str(value).strip().upper()


class GeneralSettings(BaseModel):
    """Receiver settings (webhook endpoint slug)."""

    endpoint_slug: str = DEFAULT_ENDPOINT_SLUG

    class Config:
        extra = "ignore"

    @field_validator("endpoint_slug", mode="before")
    @classmethod
    def _sanitize_slug(cls, value: Any) -> str:
        slug = sanitize_slug(str(value or ""))
        return slug or DEFAULT_ENDPOINT_SLUG


class OrderControlSettings(BaseModel):
    """Order availability gate: kill switch, restriction scope and time windows."""

    enable_orders: bool = True
    restriction_type: Literal["all", "categories", "products"] = RESTRICTION_ALL
    restricted_categories: List[int] = Field(default_factory=list)
    restricted_products: List[int] = Field(default_factory=list)

    enable_timeframe: bool = False
    start_time: Optional[time] = time(0, 0)
    end_time: Optional[time] = time(23, 59)

    enable_date_range: bool = False
    start_datetime: Optional[datetime] = None
    end_datetime: Optional[datetime] = None

    redirect_url: str = ""
    disabled_message: str = DEFAULT_DISABLED_MESSAGE

    class Config:
        extra = "ignore"

    @field_validator("start_time", "end_time", "start_datetime", "end_datetime", mode="before")
    @classmethod
    def _empty_is_unset(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("start_time", "end_time")
    @classmethod
    def _minute_precision(cls, value: Optional[time]) -> Optional[time]:
        if value is None:
            return None
        return value.replace(second=0, microsecond=0, tzinfo=None)

    @field_validator("start_datetime", "end_datetime")
    @classmethod
    def _wall_clock(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Bounds are store-local wall clock times
        if value is not None and value.tzinfo is not None:
            return value.replace(tzinfo=None)
        return value

    @field_validator("disabled_message", mode="before")
    @classmethod
    def _default_message(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_DISABLED_MESSAGE
        return value

    @field_serializer("start_time", "end_time")
    def _serialize_time(self, value: Optional[time]) -> Optional[str]:
        return value.strftime("%H:%M") if value is not None else None

    @field_serializer("start_datetime", "end_datetime")
    def _serialize_datetime(self, value: Optional[datetime]) -> Optional[str]:
        return value.strftime("%Y-%m-%dT%H:%M") if value is not None else None


class PaymentGatewayRuleInput(BaseModel):
    """Rule fields submitted from the admin form."""

    name: str = ""
    currencies: List[str] = Field(..., min_length=1)
    gateways: List[str] = Field(..., min_length=1)
    enabled: bool = True

    @field_validator("currencies", mode="before")
    @classmethod
    def _normalize_currencies(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [_currency_code(code) for code in value if str(code).strip()]
        return value

    @field_validator("gateways", mode="before")
    @classmethod
    def _normalize_gateways(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [str(gateway).strip() for gateway in value if str(gateway).strip()]
        return value


class PaymentGatewayRule(PaymentGatewayRuleInput):
    """A stored rule, addressed by a stable generated id."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    currencies: List[str] = Field(default_factory=list)
    gateways: List[str] = Field(default_factory=list)

    class Config:
        extra = "ignore"

    @field_validator("id", mode="before")
    @classmethod
    def _blank_id(cls, value: Any) -> Any:
        if value is None or not str(value).strip():
            return uuid.uuid4().hex
        return value

    @model_validator(mode="before")
    @classmethod
    def _legacy_single_currency(cls, data: Any) -> Any:
        # Older records stored one ``currency`` instead of ``currencies``
        if isinstance(data, dict) and "currencies" not in data and data.get("currency"):
            data = dict(data)
            data["currencies"] = [data.pop("currency")]
        return data


class PaymentGatewaySettings(BaseModel):
    """Ordered list of currency → gateway rules."""

    rules: List[PaymentGatewayRule] = Field(default_factory=list)

    class Config:
        extra = "ignore"


class CurrencyRate(BaseModel):
    """One row of the rate table."""

    code: str
    symbol: str = ""
    rate: float = Field(..., gt=0)

    @field_validator("code", mode="before")
    @classmethod
    def _normalize_code(cls, value: Any) -> str:
        return _currency_code(value)


class CurrencySettings(BaseModel):
    """Currency switcher settings and the global rate table."""

    enable_currency_switcher: bool = False
    default_currency: Optional[str] = None
    currencies: List[CurrencyRate] = Field(default_factory=list)

    class Config:
        extra = "ignore"

    @field_validator("default_currency", mode="before")
    @classmethod
    def _normalize_default(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        return _currency_code(value) if value is not None else None

    @field_validator("currencies", mode="before")
    @classmethod
    def _drop_blank_rows(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [
                row for row in value
                if not (isinstance(row, dict) and not str(row.get("code") or "").strip())
            ]
        return value

    def rate_table(self) -> Dict[str, CurrencyRate]:
        """Rows keyed by code; the first row wins on duplicates."""
        table: Dict[str, CurrencyRate] = {}
        for row in self.currencies:
            table.setdefault(row.code, row)
        return table
