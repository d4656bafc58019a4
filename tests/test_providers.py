"""Tests for LLM provider abstraction."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from linear_connect.reasoning.providers import (
    LLMResponse,
    get_provider,
    provider_available,
    reset_provider,
)


class TestDataclasses:
    def test_llm_response_defaults(self):
        r = LLMResponse()
        assert r.text is None
        assert r.model == ""
        assert r.input_tokens == 0
        assert r.output_tokens == 0


class TestOpenAIProvider:
    def test_build_messages_prepends_system(self):
        from linear_connect.reasoning.providers._openai import _build_openai_messages

        result = _build_openai_messages([{"role": "user", "content": "hi"}], "be brief")
        assert result == [
            {"role": "system", "content": "be brief"},
            {"role": "user", "content": "hi"},
        ]

    def test_build_messages_without_system(self):
        from linear_connect.reasoning.providers._openai import _build_openai_messages

        result = _build_openai_messages([{"role": "user", "content": "hi"}], None)
        assert result == [{"role": "user", "content": "hi"}]

    async def test_generate_maps_response(self):
        from linear_connect.reasoning.providers._openai import OpenAIProvider

        completion = MagicMock()
        completion.choices = [MagicMock(message=MagicMock(content="# Ticket"))]
        completion.model = "gpt-4-0613"
        completion.usage = MagicMock(prompt_tokens=12, completion_tokens=34)

        provider = OpenAIProvider(api_key="sk-test")
        provider._client = MagicMock()
        provider._client.chat.completions.create = AsyncMock(return_value=completion)

        response = await provider.generate(
            "gpt-4",
            [{"role": "user", "content": "hello"}],
            max_tokens=800,
            temperature=0.3,
            system="sys",
        )

        assert response.text == "# Ticket"
        assert response.model == "gpt-4-0613"
        assert response.input_tokens == 12
        assert response.output_tokens == 34
        provider._client.chat.completions.create.assert_awaited_once_with(
            model="gpt-4",
            messages=[
                {"role": "system", "content": "sys"},
                {"role": "user", "content": "hello"},
            ],
            max_tokens=800,
            temperature=0.3,
        )

    async def test_generate_handles_missing_usage(self):
        from linear_connect.reasoning.providers._openai import OpenAIProvider

        completion = MagicMock()
        completion.choices = [MagicMock(message=MagicMock(content="ok"))]
        completion.model = None
        completion.usage = None

        provider = OpenAIProvider(api_key="sk-test")
        provider._client = MagicMock()
        provider._client.chat.completions.create = AsyncMock(return_value=completion)

        response = await provider.generate("gpt-3.5-turbo", [{"role": "user", "content": "x"}])
        assert response.model == "gpt-3.5-turbo"
        assert response.input_tokens == 0


class TestFactory:
    def test_missing_key_raises(self):
        with patch("linear_connect.reasoning.providers._factory.get_settings") as mock:
            mock.return_value = MagicMock(openai_api_key="")
            with pytest.raises(RuntimeError, match="OPENAI_API_KEY"):
                get_provider()

    def test_singleton(self):
        with patch("linear_connect.reasoning.providers._factory.get_settings") as mock:
            mock.return_value = MagicMock(openai_api_key="sk-test", http_timeout_seconds=None)
            first = get_provider()
            assert get_provider() is first
            reset_provider()
            assert get_provider() is not first

    def test_provider_available(self):
        with patch("linear_connect.reasoning.providers._factory.get_settings") as mock:
            mock.return_value = MagicMock(openai_api_key="")
            assert provider_available() is False
            mock.return_value = MagicMock(openai_api_key="sk-test")
            assert provider_available() is True
