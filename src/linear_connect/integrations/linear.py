"""Linear GraphQL client — token validation and issue creation."""

from __future__ import annotations

import json
from typing import Any

import httpx

from linear_connect.common.settings import get_settings
from linear_connect.integrations._base import BaseAPIClient, IntegrationError

VIEWER_QUERY = '{ user(id: "me") { id name email } }'

ISSUE_CREATE_MUTATION = """
mutation CreateIssue($input: IssueCreateInput!) {
  issueCreate(input: $input) {
    success
    issue { id identifier title url }
  }
}
"""


class GraphQLError(IntegrationError):
    """The tracker answered with a non-empty GraphQL error list."""

    def __init__(self, errors: list[Any]) -> None:
        self.errors = errors
        super().__init__("Linear", f"API error {json.dumps(errors)}")


class LinearClient(BaseAPIClient):
    _integration_name = "Linear"

    def _build_client(self) -> httpx.AsyncClient:
        settings = get_settings()
        return httpx.AsyncClient(
            headers=self._auth_headers(),
            timeout=settings.http_timeout_seconds,
        )

    async def graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict:
        """Run a GraphQL operation and return the raw ``{data, errors}`` envelope."""
        body: dict[str, Any] = {"query": query}
        if variables is not None:
            body["variables"] = variables
        envelope = await self.post(get_settings().linear_api_url, json=body)
        if not isinstance(envelope, dict):
            raise IntegrationError(self._integration_name, "Malformed GraphQL envelope")
        return envelope

    async def _execute(self, query: str, variables: dict[str, Any] | None = None) -> dict:
        envelope = await self.graphql(query, variables)
        if envelope.get("errors"):
            raise GraphQLError(envelope["errors"])
        return envelope.get("data") or {}

    # -- Typed convenience methods -------------------------------------------

    async def viewer(self) -> dict[str, Any]:
        """Return the user owning the token."""
        data = await self._execute(VIEWER_QUERY)
        user = data.get("user")
        if not isinstance(user, dict):
            raise IntegrationError(self._integration_name, "No user returned for token")
        return user

    async def create_issue(
        self,
        team_id: str,
        title: str,
        description: str,
        *,
        priority: int = 3,
    ) -> dict[str, Any]:
        data = await self._execute(
            ISSUE_CREATE_MUTATION,
            {
                "input": {
                    "teamId": team_id,
                    "title": title,
                    "description": description,
                    "priority": priority,
                }
            },
        )
        issue = (data.get("issueCreate") or {}).get("issue")
        if not isinstance(issue, dict) or "id" not in issue:
            raise IntegrationError(self._integration_name, "Issue was not created")
        return issue
