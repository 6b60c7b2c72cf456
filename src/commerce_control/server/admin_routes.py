"""
Admin API Routes

Dashboard, webhook logs and the settings forms of every module. All routes
require the X-API-Key header; state-changing routes also require an
anti-forgery token for their action.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from commerce_control.config.constants import (
    NONCE_CURRENCY_SETTINGS,
    NONCE_GENERAL_SETTINGS,
    NONCE_LOG_DETAILS,
    NONCE_ORDER_CONTROL,
    NONCE_PAYMENT_GATEWAY_RULE,
    NONCE_PRODUCT_PRICES,
)
from commerce_control.config.settings import Settings
from commerce_control.core.exceptions import NotFoundError
from commerce_control.core.logger import setup_logger
from commerce_control.core.nonce import create_nonce, verify_nonce
from commerce_control.db.repository import OrderRepository, ProductRepository
from commerce_control.models.settings import PaymentGatewayRuleInput
from commerce_control.server.auth import nonce_secret, require_nonce, verify_api_key
from commerce_control.server.dependencies import (
    get_app_settings,
    get_gateway_rule_service,
    get_log_service,
    get_order_repository,
    get_product_repository,
    get_settings_service,
    get_store_now,
)
from commerce_control.services.currency import available_currencies, clean_price_overrides
from commerce_control.services.gateway_rules import GatewayRuleService, gateway_statistics
from commerce_control.services.log_service import WebhookLogService
from commerce_control.services.order_availability import order_statistics
from commerce_control.services.settings_service import SettingsService

logger = setup_logger(__name__)

NONCE_ACTIONS = [
    NONCE_LOG_DETAILS,
    NONCE_GENERAL_SETTINGS,
    NONCE_ORDER_CONTROL,
    NONCE_PAYMENT_GATEWAY_RULE,
    NONCE_CURRENCY_SETTINGS,
    NONCE_PRODUCT_PRICES,
]

# Router with /api/admin prefix
router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    dependencies=[Depends(verify_api_key)],
)


class LogDetailRequest(BaseModel):
    """Body of the log-detail action."""

    log_id: Any = None
    nonce: Optional[str] = None


class ProductInput(BaseModel):
    """Catalog entry synchronized from the store."""

    name: str
    base_price: float = Field(..., ge=0)
    category_ids: List[int] = Field(default_factory=list)


@router.get("/nonce")
async def get_nonce(
    action: str = Query(..., description="Admin action the token is for"),
    app_settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Issue an anti-forgery token for one admin action."""
    if action not in NONCE_ACTIONS:
        raise HTTPException(status_code=400, detail=f"Unknown action: {action}")
    return {"action": action, "nonce": create_nonce(nonce_secret(app_settings), action)}


@router.get("/dashboard")
async def get_dashboard(
    log_service: WebhookLogService = Depends(get_log_service),
    settings_service: SettingsService = Depends(get_settings_service),
    app_settings: Settings = Depends(get_app_settings),
    now: datetime = Depends(get_store_now),
) -> Dict[str, Any]:
    """
    Dashboard overview.

    Returns cached webhook log counts and recent rows, plus the status of the
    order gate and the payment gateway filter.
    """
    general = await settings_service.get_general()
    order_settings = await settings_service.get_order_control()
    gateway_settings = await settings_service.get_payment_gateways()
    currency_settings = await settings_service.get_currency()

    return {
        "generated_at": now.isoformat(timespec="seconds"),
        "endpoint_url": f"{app_settings.site_url.rstrip('/')}/{general.endpoint_slug}",
        "webhooks": await log_service.get_stats(),
        "order_control": order_statistics(order_settings, now),
        "payment_gateways": gateway_statistics(
            gateway_settings.rules,
            available_currencies(currency_settings),
            app_settings.available_gateways,
        ),
    }


@router.get("/logs")
async def get_logs(log_service: WebhookLogService = Depends(get_log_service)) -> Dict[str, Any]:
    """Most recent webhook log rows."""
    logs = await log_service.recent_logs()
    return {"total": len(logs), "logs": logs}


@router.post("/logs/detail")
async def get_log_detail(
    body: LogDetailRequest,
    x_csrf_token: Optional[str] = Header(None),
    log_service: WebhookLogService = Depends(get_log_service),
    app_settings: Settings = Depends(get_app_settings),
) -> JSONResponse:
    """
    Full webhook log entry for the log modal.

    Body:
        {"log_id": int, "nonce": str}

    The token may also be sent in the X-CSRF-Token header.
    """
    token = body.nonce or x_csrf_token
    if not verify_nonce(nonce_secret(app_settings), NONCE_LOG_DETAILS, token):
        return JSONResponse(status_code=403, content={"success": False, "data": "Invalid security token"})

    try:
        log_id = int(body.log_id)
    except (TypeError, ValueError):
        log_id = 0

    if log_id <= 0:
        return JSONResponse(status_code=400, content={"success": False, "data": "Invalid log ID"})

    try:
        detail = await log_service.get_detail(log_id)
    except NotFoundError:
        return JSONResponse(status_code=404, content={"success": False, "data": "Log not found"})

    return JSONResponse(content={"success": True, "data": detail})


# ------------------------------------------------------------------------------
# General settings
# ------------------------------------------------------------------------------


@router.get("/settings/general")
async def get_general_settings(
    settings_service: SettingsService = Depends(get_settings_service),
) -> Dict[str, Any]:
    return (await settings_service.get_general()).model_dump(mode="json")


@router.put("/settings/general", dependencies=[Depends(require_nonce(NONCE_GENERAL_SETTINGS))])
async def update_general_settings(
    data: Dict[str, Any],
    settings_service: SettingsService = Depends(get_settings_service),
) -> Dict[str, Any]:
    """
    Update the webhook endpoint slug.

    Body:
        {"endpoint_slug": str}
    """
    general = await settings_service.save_general(data)
    return {
        "success": True,
        "message": "Settings saved successfully!",
        "settings": general.model_dump(mode="json"),
    }


# ------------------------------------------------------------------------------
# Order control
# ------------------------------------------------------------------------------


@router.get("/order-control")
async def get_order_control(
    settings_service: SettingsService = Depends(get_settings_service),
    now: datetime = Depends(get_store_now),
) -> Dict[str, Any]:
    order_settings = await settings_service.get_order_control()
    return {
        "settings": order_settings.model_dump(mode="json"),
        "statistics": order_statistics(order_settings, now),
    }


@router.put("/order-control", dependencies=[Depends(require_nonce(NONCE_ORDER_CONTROL))])
async def update_order_control(
    data: Dict[str, Any],
    settings_service: SettingsService = Depends(get_settings_service),
    now: datetime = Depends(get_store_now),
) -> Dict[str, Any]:
    """Replace the order control settings."""
    order_settings = await settings_service.save_order_control(data)
    return {
        "success": True,
        "message": "Settings saved successfully!",
        "settings": order_settings.model_dump(mode="json"),
        "statistics": order_statistics(order_settings, now),
    }


# ------------------------------------------------------------------------------
# Payment gateway rules
# ------------------------------------------------------------------------------


@router.get("/payment-gateways")
async def get_payment_gateways(
    rule_service: GatewayRuleService = Depends(get_gateway_rule_service),
    settings_service: SettingsService = Depends(get_settings_service),
    app_settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    rules = await rule_service.list_rules()
    currencies = available_currencies(await settings_service.get_currency())
    return {
        "rules": [rule.model_dump(mode="json") for rule in rules],
        "available_gateways": app_settings.available_gateways,
        "active_currencies": currencies,
        "statistics": gateway_statistics(rules, currencies, app_settings.available_gateways),
    }


@router.post(
    "/payment-gateways/rules",
    dependencies=[Depends(require_nonce(NONCE_PAYMENT_GATEWAY_RULE))],
)
async def create_rule(
    rule_input: PaymentGatewayRuleInput,
    rule_service: GatewayRuleService = Depends(get_gateway_rule_service),
) -> Dict[str, Any]:
    rule = await rule_service.add_rule(rule_input)
    return {"success": True, "message": "Rule saved successfully!", "rule": rule.model_dump(mode="json")}


@router.put(
    "/payment-gateways/rules/{rule_id}",
    dependencies=[Depends(require_nonce(NONCE_PAYMENT_GATEWAY_RULE))],
)
async def update_rule(
    rule_id: str,
    rule_input: PaymentGatewayRuleInput,
    rule_service: GatewayRuleService = Depends(get_gateway_rule_service),
) -> Dict[str, Any]:
    rule = await rule_service.update_rule(rule_id, rule_input)
    return {"success": True, "message": "Rule saved successfully!", "rule": rule.model_dump(mode="json")}


@router.delete(
    "/payment-gateways/rules/{rule_id}",
    dependencies=[Depends(require_nonce(NONCE_PAYMENT_GATEWAY_RULE))],
)
async def delete_rule(
    rule_id: str,
    rule_service: GatewayRuleService = Depends(get_gateway_rule_service),
) -> Dict[str, Any]:
    await rule_service.delete_rule(rule_id)
    return {"success": True, "message": "Rule deleted successfully!"}


@router.post(
    "/payment-gateways/rules/{rule_id}/toggle",
    dependencies=[Depends(require_nonce(NONCE_PAYMENT_GATEWAY_RULE))],
)
async def toggle_rule(
    rule_id: str,
    rule_service: GatewayRuleService = Depends(get_gateway_rule_service),
) -> Dict[str, Any]:
    rule = await rule_service.toggle_rule(rule_id)
    return {"success": True, "message": "Rule status updated!", "rule": rule.model_dump(mode="json")}


# ------------------------------------------------------------------------------
# Currency
# ------------------------------------------------------------------------------


@router.get("/currency")
async def get_currency_settings(
    settings_service: SettingsService = Depends(get_settings_service),
) -> Dict[str, Any]:
    return (await settings_service.get_currency()).model_dump(mode="json")


@router.put("/currency", dependencies=[Depends(require_nonce(NONCE_CURRENCY_SETTINGS))])
async def update_currency_settings(
    data: Dict[str, Any],
    settings_service: SettingsService = Depends(get_settings_service),
) -> Dict[str, Any]:
    """
    Replace the currency switcher settings and rate table.

    Body:
        {
            "enable_currency_switcher": bool,
            "default_currency": str,
            "currencies": [{"code": str, "symbol": str, "rate": float}]
        }
    """
    currency = await settings_service.save_currency(data)
    return {"success": True, "message": "Settings saved successfully!", "settings": currency.model_dump(mode="json")}


# ------------------------------------------------------------------------------
# Catalog and orders
# ------------------------------------------------------------------------------


@router.put(
    "/products/{product_id}",
    dependencies=[Depends(require_nonce(NONCE_PRODUCT_PRICES))],
)
async def upsert_product(
    product_id: int,
    product_input: ProductInput,
    products: ProductRepository = Depends(get_product_repository),
) -> Dict[str, Any]:
    """Create or update a catalog product."""
    product = await products.upsert(
        product_id,
        name=product_input.name,
        base_price=product_input.base_price,
        category_ids=product_input.category_ids,
    )
    return {
        "id": product.id,
        "name": product.name,
        "base_price": product.base_price,
        "category_ids": product.category_ids,
        "currency_prices": product.currency_prices,
    }


@router.get("/products/{product_id}/currency-prices")
async def get_product_prices(
    product_id: int,
    products: ProductRepository = Depends(get_product_repository),
) -> Dict[str, Any]:
    product = await products.get(product_id)
    if product is None:
        raise NotFoundError("Product", product_id)
    return {"product_id": product.id, "prices": product.currency_prices or {}}


@router.put(
    "/products/{product_id}/currency-prices",
    dependencies=[Depends(require_nonce(NONCE_PRODUCT_PRICES))],
)
async def update_product_prices(
    product_id: int,
    prices: Dict[str, Optional[float]],
    products: ProductRepository = Depends(get_product_repository),
) -> Dict[str, Any]:
    """
    Replace a product's fixed per-currency prices.

    Blank or non-positive prices are dropped (the exchange rate applies).
    """
    product = await products.get(product_id)
    if product is None:
        raise NotFoundError("Product", product_id)
    product = await products.set_currency_prices(product, clean_price_overrides(prices))
    return {"success": True, "product_id": product.id, "prices": product.currency_prices}


@router.put("/orders/{order_id}")
async def register_order(
    order_id: str,
    orders: OrderRepository = Depends(get_order_repository),
) -> Dict[str, Any]:
    """Register a store order so shipping events can update it."""
    order = await orders.create(order_id)
    return {"id": order.id}


@router.get("/orders/{order_id}")
async def get_order(
    order_id: str,
    orders: OrderRepository = Depends(get_order_repository),
) -> Dict[str, Any]:
    """Order shipping information and notes."""
    order = await orders.get(order_id)
    if order is None:
        raise NotFoundError("Order", order_id)
    notes = await orders.get_notes(order_id)
    return {
        "id": order.id,
        "shipping_tracking_number": order.shipping_tracking_number,
        "shipping_status": order.shipping_status,
        "notes": [
            {"note": note.note, "created_at": note.created_at.isoformat()}
            for note in notes
        ],
    }
