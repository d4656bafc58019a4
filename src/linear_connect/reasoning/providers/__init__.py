"""LLM provider abstraction."""

from linear_connect.reasoning.providers._base import LLMProvider, LLMResponse
from linear_connect.reasoning.providers._factory import (
    get_provider,
    provider_available,
    reset_provider,
)

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "get_provider",
    "provider_available",
    "reset_provider",
]
