"""Application settings from environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

from linear_connect.common.models import ChargePolicy


class Settings(BaseSettings):
    """All configuration loaded from environment variables."""

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}

    # --- OpenAI ---
    openai_api_key: str = ""
    openai_model_basic: str = "gpt-3.5-turbo"
    openai_model_advanced: str = "gpt-4"
    openai_model_premium: str = "gpt-4"
    openai_temperature: float = 0.3
    max_tokens_basic: int = 300
    max_tokens_detailed: int = 800

    # --- Linear ---
    linear_api_url: str = "https://api.linear.app/graphql"
    linear_default_priority: int = 3

    # --- Intercom ---
    intercom_api_url: str = "https://api.intercom.io"

    # --- Outbound HTTP ---
    http_timeout_seconds: float | None = None  # None: no timeout at this layer

    # --- Tiers (tickets per period) ---
    tier_limit_free: int = 100
    tier_limit_pro: int = 1000
    tier_limit_enterprise: int = 10000

    # --- Billing ---
    charge_policy: ChargePolicy = ChargePolicy.CHARGE_ON_ATTEMPT

    # --- Agent ---
    app_name: str = "Linear Connect"
    base_url: str = "http://localhost:3001"
    log_level: str = "INFO"
    environment: str = "development"

    # --- Webhook server ---
    webhook_host: str = "0.0.0.0"
    webhook_port: int = 3001
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # --- Auth ---
    auth_signing_secret: str = ""


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings (for testing)."""
    global _settings
    _settings = None
