"""Model selection based on the account's AI quality level."""

from __future__ import annotations

from linear_connect.common.models import AIQuality
from linear_connect.common.settings import get_settings


def select_model(quality: AIQuality) -> str:
    """Return the completion model for a quality level."""
    return getattr(get_settings(), f"openai_model_{quality.value}")


def output_budget(quality: AIQuality) -> int:
    """Basic quality gets the short output budget; paid qualities get the long one."""
    settings = get_settings()
    if quality == AIQuality.BASIC:
        return settings.max_tokens_basic
    return settings.max_tokens_detailed
