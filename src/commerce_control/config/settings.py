"""Configuration management using Pydantic Settings.

Loads configuration from environment variables with .env file support.
"""

from typing import Dict, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration."""

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    environment: str = "development"

    # Storage Configuration
    database_url: str = "sqlite+aiosqlite:///./commerce_control.db"
    settings_backend: str = "database"  # database | file
    settings_file: str = "config/commerce_settings.json"

    # Store Configuration
    site_url: str = "http://localhost:8000/"
    store_timezone: str = "UTC"
    store_currency: str = "USD"
    default_currency_symbol: str = "$"
    available_gateways: Dict[str, str] = {
        "bacs": "Direct bank transfer",
        "cheque": "Check payments",
        "cod": "Cash on delivery",
        "paypal": "PayPal",
        "stripe": "Credit Card (Stripe)",
    }

    # Dashboard Configuration
    dashboard_api_key: Optional[str] = None
    nonce_secret: Optional[str] = None

    # Forwarding Configuration
    forward_webhook_url: Optional[str] = None

    # GlitchTip Error Monitoring
    glitchtip_dsn: Optional[str] = None

    # Redis Cache Configuration
    redis_enabled: bool = False
    redis_host: str = "redis"
    redis_port: int = 6379
    redis_db: int = 0
    stats_cache_ttl: int = 300
    log_detail_cache_ttl: int = 3600

    class Config:
        """Pydantic config."""

        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


# Create a global settings instance
settings = Settings()
