"""
Storefront API Routes

Read-side endpoints the shop front calls: currency switcher, product
availability and price, checkout gating and the payment gateways offered for
the shopper's currency.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, Cookie, Depends, Query, Response
from fastapi.responses import JSONResponse

from commerce_control.config.constants import CURRENCY_COOKIE
from commerce_control.config.settings import Settings
from commerce_control.core.exceptions import NotFoundError
from commerce_control.core.logger import setup_logger
from commerce_control.db.repository import ProductRepository
from commerce_control.models.settings import CurrencySettings
from commerce_control.server.dependencies import (
    get_app_settings,
    get_product_repository,
    get_settings_service,
    get_store_now,
)
from commerce_control.services.currency import (
    available_currencies,
    resolve_price,
    resolve_symbol,
    select_currency,
)
from commerce_control.services.gateway_rules import filter_gateway_map
from commerce_control.services.order_availability import can_order, checkout_block, orders_enabled
from commerce_control.services.settings_service import SettingsService

logger = setup_logger(__name__)

router = APIRouter(prefix="/api/store", tags=["storefront"])

COOKIE_MAX_AGE = 30 * 24 * 3600


async def get_currency_settings(
    settings_service: SettingsService = Depends(get_settings_service),
) -> CurrencySettings:
    return await settings_service.get_currency()


def get_current_currency(
    response: Response,
    currency: Optional[str] = Query(None, description="Currency to switch to"),
    commerce_currency: Optional[str] = Cookie(None),
    currency_settings: CurrencySettings = Depends(get_currency_settings),
) -> str:
    """
    Shopper's currency.

    An explicit ``currency`` query parameter switches and is remembered in a
    cookie; otherwise the cookie is used. Unknown or disabled choices fall
    back to the store default.
    """
    if currency:
        selected = select_currency(currency, currency_settings)
        response.set_cookie(CURRENCY_COOKIE, selected, max_age=COOKIE_MAX_AGE, path="/")
        return selected
    return select_currency(commerce_currency, currency_settings)


@router.get("/currencies")
async def get_currencies(
    current_currency: str = Depends(get_current_currency),
    currency_settings: CurrencySettings = Depends(get_currency_settings),
    app_settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Currency switcher contents."""
    rate_table = currency_settings.rate_table()
    return {
        "enabled": currency_settings.enable_currency_switcher,
        "default_currency": currency_settings.default_currency,
        "current_currency": current_currency,
        "currencies": [
            {
                "code": code,
                "symbol": resolve_symbol(code, code, rate_table, app_settings.default_currency_symbol),
            }
            for code in available_currencies(currency_settings)
        ],
    }


@router.get("/products/{product_id}")
async def get_product(
    product_id: int,
    current_currency: str = Depends(get_current_currency),
    currency_settings: CurrencySettings = Depends(get_currency_settings),
    settings_service: SettingsService = Depends(get_settings_service),
    products: ProductRepository = Depends(get_product_repository),
    app_settings: Settings = Depends(get_app_settings),
    now: datetime = Depends(get_store_now),
) -> Dict[str, Any]:
    """Product as the shopper sees it: purchasable flag, price and symbol."""
    product = await products.get(product_id)
    if product is None:
        raise NotFoundError("Product", product_id)

    order_settings = await settings_service.get_order_control()
    rate_table = currency_settings.rate_table()

    return {
        "id": product.id,
        "name": product.name,
        "purchasable": can_order(product.id, order_settings, now, product.category_ids or []),
        "currency": current_currency,
        "symbol": resolve_symbol(
            current_currency, current_currency, rate_table, app_settings.default_currency_symbol
        ),
        "price": resolve_price(
            product.base_price,
            product.currency_prices,
            current_currency,
            currency_settings.default_currency,
            rate_table,
        ),
    }


@router.get("/checkout/status")
async def get_checkout_status(
    settings_service: SettingsService = Depends(get_settings_service),
    app_settings: Settings = Depends(get_app_settings),
    now: datetime = Depends(get_store_now),
) -> Dict[str, Any]:
    """
    Whether the checkout page may be shown.

    When ordering is disabled the shopper is redirected to ``redirect_url``
    (or the store home page).
    """
    order_settings = await settings_service.get_order_control()
    block = checkout_block(order_settings, now, app_settings.site_url)
    if block is None:
        return {"orders_enabled": True}
    return {"orders_enabled": False, **block}


@router.post("/checkout/validate")
async def validate_checkout(
    settings_service: SettingsService = Depends(get_settings_service),
    now: datetime = Depends(get_store_now),
) -> JSONResponse:
    """Final check before an order is placed."""
    order_settings = await settings_service.get_order_control()
    if not orders_enabled(order_settings, now):
        logger.info("Checkout rejected: ordering is disabled")
        return JSONResponse(
            status_code=403,
            content={"valid": False, "message": order_settings.disabled_message},
        )
    return JSONResponse(content={"valid": True})


@router.get("/payment-gateways")
async def get_payment_gateways(
    current_currency: str = Depends(get_current_currency),
    settings_service: SettingsService = Depends(get_settings_service),
    app_settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Gateways offered at checkout for the shopper's currency."""
    gateway_settings = await settings_service.get_payment_gateways()
    return {
        "currency": current_currency,
        "gateways": filter_gateway_map(
            current_currency, gateway_settings.rules, app_settings.available_gateways
        ),
    }
