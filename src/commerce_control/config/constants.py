"""
Centralized application constants.

Single point of truth for the names and defaults shared by the webhook
receiver, the admin API and the storefront API.
"""

# ==============================================================================
# WEBHOOK LOG
# ==============================================================================

STATUS_PENDING = "pending"
STATUS_SUCCESS = "success"
STATUS_ERROR = "error"

# Rows shown on the dashboard and on the logs page
DASHBOARD_RECENT_LOGS = 5
LOGS_PAGE_SIZE = 20

# Recognized shipping event fields
SHIPPING_EVENT_FIELDS = ["order_id", "tracking_number", "status", "event_type"]

DEFAULT_ENDPOINT_SLUG = "shipping-webhook"

# ==============================================================================
# CACHE KEYS
# ==============================================================================

CACHE_GROUP_STATS = "commerce_control_suite_stats"
CACHE_GROUP_LOGS = "commerce_control_suite_logs"

CACHE_KEY_TOTAL = "total_logs"
CACHE_KEY_SUCCESS = "success_logs"
CACHE_KEY_ERROR = "error_logs"
CACHE_KEY_RECENT = "recent_logs"
CACHE_KEY_RECENT_PAGE = "recent_logs_20"
CACHE_KEY_DETAIL_PREFIX = "log_detail_"

# ==============================================================================
# SETTINGS RECORDS
# ==============================================================================

SETTINGS_KEY_GENERAL = "general"
SETTINGS_KEY_ORDER_CONTROL = "order_control"
SETTINGS_KEY_PAYMENT_GATEWAYS = "payment_gateways"
SETTINGS_KEY_CURRENCY = "currency"

DEFAULT_DISABLED_MESSAGE = "Orders are currently disabled. Please try again later."

RESTRICTION_ALL = "all"
RESTRICTION_CATEGORIES = "categories"
RESTRICTION_PRODUCTS = "products"

# ==============================================================================
# ADMIN / STOREFRONT
# ==============================================================================

# Anti-forgery token actions
NONCE_LOG_DETAILS = "webhook_log_details"
NONCE_GENERAL_SETTINGS = "general_settings_save"
NONCE_ORDER_CONTROL = "order_control_save"
NONCE_PAYMENT_GATEWAY_RULE = "payment_gateway_rule"
NONCE_CURRENCY_SETTINGS = "currency_settings_save"
NONCE_PRODUCT_PRICES = "product_currency_prices_save"

# Token lifetime is two ticks of this many seconds
NONCE_TICK_SECONDS = 12 * 60 * 60

CURRENCY_COOKIE = "commerce_currency"
