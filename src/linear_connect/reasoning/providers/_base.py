"""Abstract base for LLM providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class LLMResponse:
    """Unified response from any LLM provider."""

    text: str | None = None
    model: str = ""
    input_tokens: int = 0
    output_tokens: int = 0


class LLMProvider(ABC):
    """Abstract text-completion interface."""

    @abstractmethod
    async def generate(
        self,
        model: str,
        messages: list[dict],
        *,
        max_tokens: int = 800,
        temperature: float = 0.3,
        system: str | None = None,
    ) -> LLMResponse:
        """Generate a completion from the LLM.

        Args:
            model: Model identifier (provider-specific).
            messages: List of message dicts with keys:
                - role: "user" | "assistant"
                - content: text content
            max_tokens: Maximum output tokens.
            temperature: Sampling temperature.
            system: System prompt.

        Returns:
            LLMResponse with the generated text.
        """
