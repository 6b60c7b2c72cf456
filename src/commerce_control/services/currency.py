"""Multi-currency price and symbol resolution."""

from typing import Dict, List, Mapping, Optional

from commerce_control.models.settings import CurrencyRate, CurrencySettings


def resolve_price(
    base_price: float,
    overrides: Optional[Mapping[str, float]],
    current_currency: str,
    default_currency: str,
    rate_table: Mapping[str, CurrencyRate],
) -> float:
    """
    Price of a product in ``current_currency``.

    Order of precedence: default currency → base price; a fixed per-product
    override → verbatim; a positive rate → ``base_price * rate``. Anything
    else falls back to the base price.

    Args:
        base_price: Price in the default currency
        overrides: Product's fixed prices keyed by currency code
        current_currency: Shopper's currency
        default_currency: Store default currency
        rate_table: Rate rows keyed by currency code

    Returns:
        Resolved price
    """
    if current_currency == default_currency:
        return base_price

    override = (overrides or {}).get(current_currency)
    if override:
        return override

    row = rate_table.get(current_currency)
    if row is not None and row.rate > 0:
        return base_price * row.rate

    return base_price


def resolve_symbol(
    currency_code: str,
    current_currency: str,
    rate_table: Mapping[str, CurrencyRate],
    default_symbol: str,
) -> str:
    """Configured symbol for the shopper's currency, else ``default_symbol``."""
    if currency_code == current_currency:
        row = rate_table.get(currency_code)
        if row is not None:
            return row.symbol
    return default_symbol


def available_currencies(settings: CurrencySettings) -> List[str]:
    """Default currency first, then every configured code once."""
    codes = [settings.default_currency] if settings.default_currency else []
    for row in settings.currencies:
        if row.code not in codes:
            codes.append(row.code)
    return codes


def select_currency(requested: Optional[str], settings: CurrencySettings) -> str:
    """
    Currency to show the shopper.

    A requested code is honoured only while the switcher is enabled and the
    code is available; otherwise the default currency is used.
    """
    if requested and settings.enable_currency_switcher:
        code = requested.strip().upper()
        if code in available_currencies(settings):
            return code
    return settings.default_currency


def clean_price_overrides(prices: Mapping[str, Optional[float]]) -> Dict[str, float]:
    """Drop blank and non-positive overrides; normalize currency codes."""
    cleaned: Dict[str, float] = {}
    for code, price in prices.items():
        if price is None or price <= 0:
            continue
        cleaned[code.strip().upper()] = float(price)
    return cleaned
