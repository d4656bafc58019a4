"""Shared pytest fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from linear_connect.common.models import IntegrationConfig, build_tier_table
from linear_connect.common.settings import reset_settings
from linear_connect.reasoning.providers import reset_provider
from linear_connect.store import reset_stores


@pytest.fixture(autouse=True)
def _fresh_state(monkeypatch):
    """Every test starts with empty stores and default settings."""
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("OPENAI_API_KEY", "")
    reset_settings()
    reset_stores()
    reset_provider()
    yield
    reset_settings()
    reset_stores()
    reset_provider()


@pytest.fixture
def tiers():
    return build_tier_table(free_limit=100, pro_limit=1000, enterprise_limit=10000)


@pytest.fixture
def small_tiers():
    return build_tier_table(free_limit=3, pro_limit=5, enterprise_limit=10)


@pytest.fixture
def integration_config() -> IntegrationConfig:
    return IntegrationConfig(
        tracker_token="lin_api_test",
        source_token="ic_test",
        destination_team_id="team-1",
        callback_url="http://localhost:3001/webhook/acct-1",
        display_name="Grace",
    )


@pytest.fixture
def user_created_event() -> dict[str, Any]:
    return {
        "topic": "conversation.user.created",
        "data": {"item": {"id": "C1"}},
    }


@pytest.fixture
def ada_conversation() -> dict[str, Any]:
    return {
        "id": "C1",
        "conversation_message": {"body": "Button is broken", "subject": None},
        "contacts": {
            "contacts": [
                {
                    "name": "Ada",
                    "email": "ada@x.com",
                    "custom_attributes": {"plan": "Starter"},
                }
            ]
        },
    }


@pytest.fixture
def ada_issue() -> dict[str, Any]:
    return {
        "id": "I1",
        "identifier": "ENG-42",
        "url": "https://x/ENG-42",
        "title": "[FREE] Ada - Support Request",
    }
