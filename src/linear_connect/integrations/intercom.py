"""Intercom API client — conversation retrieval and internal notes."""

from __future__ import annotations

from typing import Any

import httpx

from linear_connect.common.settings import get_settings
from linear_connect.integrations._base import BaseAPIClient, IntegrationError


class IntercomClient(BaseAPIClient):
    _integration_name = "Intercom"

    def _build_client(self) -> httpx.AsyncClient:
        settings = get_settings()
        return httpx.AsyncClient(
            base_url=settings.intercom_api_url,
            headers=self._auth_headers(),
            timeout=settings.http_timeout_seconds,
        )

    # -- Typed convenience methods -------------------------------------------

    async def get_conversation(self, conversation_id: str) -> dict[str, Any]:
        data = await self.get(f"/conversations/{conversation_id}")
        if not isinstance(data, dict):
            raise IntegrationError(
                integration=self._integration_name,
                detail="Conversation payload is not an object",
            )
        return data

    async def add_note(self, conversation_id: str, body: str) -> Any:
        """Append an internal admin note to the conversation."""
        return await self.post(
            f"/conversations/{conversation_id}/reply",
            json={"message_type": "note", "type": "admin", "body": body},
        )
