"""Provider factory — process-wide singleton."""

from __future__ import annotations

from linear_connect.common.settings import get_settings
from linear_connect.reasoning.providers._base import LLMProvider

_provider: LLMProvider | None = None


def get_provider() -> LLMProvider:
    """Return the configured LLM provider (singleton)."""
    global _provider
    if _provider is not None:
        return _provider

    settings = get_settings()
    if not settings.openai_api_key:
        raise RuntimeError("OPENAI_API_KEY is required for ticket enhancement")

    from linear_connect.reasoning.providers._openai import OpenAIProvider

    _provider = OpenAIProvider(
        api_key=settings.openai_api_key,
        timeout=settings.http_timeout_seconds,
    )
    return _provider


def provider_available() -> bool:
    """Check if the provider's API key is configured."""
    return bool(get_settings().openai_api_key)


def reset_provider() -> None:
    """Reset the singleton (for testing)."""
    global _provider
    _provider = None
