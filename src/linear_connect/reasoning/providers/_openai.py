"""OpenAI provider — wraps the OpenAI SDK chat completions API."""

from __future__ import annotations

from openai import AsyncOpenAI

from linear_connect.reasoning.providers._base import LLMProvider, LLMResponse


def _build_openai_messages(messages: list[dict], system: str | None) -> list[dict]:
    """Convert unified messages to OpenAI chat format."""
    result: list[dict] = []

    if system:
        result.append({"role": "system", "content": system})

    for msg in messages:
        if msg["role"] in ("user", "assistant"):
            result.append({"role": msg["role"], "content": msg.get("content") or ""})

    return result


class OpenAIProvider(LLMProvider):
    """LLM provider backed by the OpenAI API."""

    def __init__(self, api_key: str, *, timeout: float | None = None) -> None:
        self._client = AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    async def generate(
        self,
        model: str,
        messages: list[dict],
        *,
        max_tokens: int = 800,
        temperature: float = 0.3,
        system: str | None = None,
    ) -> LLMResponse:
        response = await self._client.chat.completions.create(
            model=model,
            messages=_build_openai_messages(messages, system),
            max_tokens=max_tokens,
            temperature=temperature,
        )

        msg = response.choices[0].message

        input_tokens = response.usage.prompt_tokens if response.usage else 0
        output_tokens = response.usage.completion_tokens if response.usage else 0

        return LLMResponse(
            text=msg.content,
            model=response.model or model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
