"""Tests for integrations package — BaseAPIClient, IntercomClient, LinearClient."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from linear_connect.integrations import (
    BaseAPIClient,
    GraphQLError,
    IntegrationError,
    IntercomClient,
    LinearClient,
)
from linear_connect.integrations.linear import ISSUE_CREATE_MUTATION, VIEWER_QUERY


# -- Helpers -----------------------------------------------------------------


def _mock_response(json_data, status_code: int = 200) -> MagicMock:
    resp = MagicMock(spec=httpx.Response)
    resp.status_code = status_code
    resp.json.return_value = json_data
    resp.raise_for_status = MagicMock()
    return resp


def _mock_error_response(status_code: int = 500) -> MagicMock:
    resp = MagicMock(spec=httpx.Response)
    resp.status_code = status_code
    resp.text = "Internal Server Error"
    resp.json.return_value = {"error": "server error"}
    resp.raise_for_status.side_effect = httpx.HTTPStatusError(
        "Server Error", request=MagicMock(), response=resp
    )
    return resp


def _make_mock_httpx_client() -> AsyncMock:
    client = AsyncMock(spec=httpx.AsyncClient)
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client


# ===========================================================================
# BaseAPIClient tests
# ===========================================================================


class TestBaseAPIClient:
    async def test_request_returns_json_on_success(self):
        mock_httpx = _make_mock_httpx_client()
        mock_httpx.request.return_value = _mock_response({"result": "ok"})

        client = BaseAPIClient("tok")
        client._client = mock_httpx

        data = await client.request("GET", "/test")
        assert data == {"result": "ok"}

    async def test_request_raises_integration_error_on_http_error(self):
        mock_httpx = _make_mock_httpx_client()
        mock_httpx.request.return_value = _mock_error_response(503)

        client = BaseAPIClient("tok")
        client._integration_name = "TestAPI"
        client._client = mock_httpx

        with pytest.raises(IntegrationError) as exc_info:
            await client.request("GET", "/fail")

        assert exc_info.value.status_code == 503
        assert exc_info.value.integration == "TestAPI"

    async def test_request_raises_integration_error_on_network_error(self):
        mock_httpx = _make_mock_httpx_client()
        mock_httpx.request.side_effect = httpx.ConnectError("Connection refused")

        client = BaseAPIClient("tok")
        client._integration_name = "TestAPI"
        client._client = mock_httpx

        with pytest.raises(IntegrationError) as exc_info:
            await client.request("GET", "/fail")

        assert exc_info.value.status_code is None
        assert "Connection refused" in exc_info.value.detail

    async def test_request_raises_integration_error_on_bad_json(self):
        mock_httpx = _make_mock_httpx_client()
        resp = _mock_response(None)
        resp.json.side_effect = json.JSONDecodeError("Expecting value", "", 0)
        mock_httpx.request.return_value = resp

        client = BaseAPIClient("tok")
        client._client = mock_httpx

        with pytest.raises(IntegrationError) as exc_info:
            await client.request("GET", "/garbage")
        assert exc_info.value.detail == "Malformed JSON response"

    async def test_get_post_convenience(self):
        mock_httpx = _make_mock_httpx_client()
        mock_httpx.request.return_value = _mock_response({"ok": True})

        client = BaseAPIClient("tok")
        client._client = mock_httpx

        await client.get("/a", params={"x": 1})
        mock_httpx.request.assert_called_with("GET", "/a", params={"x": 1}, json=None)

        await client.post("/b", json={"y": 2})
        mock_httpx.request.assert_called_with("POST", "/b", params=None, json={"y": 2})

    def test_auth_headers_use_bearer_token(self):
        assert BaseAPIClient("secret")._auth_headers()["Authorization"] == "Bearer secret"


# ===========================================================================
# IntercomClient tests
# ===========================================================================


class TestIntercomClient:
    def test_build_client_uses_bearer_auth_and_base_url(self):
        httpx_client = IntercomClient("ic_tok")._build_client()
        assert httpx_client.headers["Authorization"] == "Bearer ic_tok"
        assert str(httpx_client.base_url).startswith("https://api.intercom.io")

    async def test_get_conversation_calls_correct_path(self):
        client = IntercomClient("ic_tok")
        mock_httpx = _make_mock_httpx_client()
        mock_httpx.request.return_value = _mock_response({"id": "C1"})
        client._client = mock_httpx

        result = await client.get_conversation("C1")
        mock_httpx.request.assert_called_once_with(
            "GET", "/conversations/C1", params=None, json=None
        )
        assert result == {"id": "C1"}

    async def test_get_conversation_rejects_non_object(self):
        client = IntercomClient("ic_tok")
        mock_httpx = _make_mock_httpx_client()
        mock_httpx.request.return_value = _mock_response(["not", "a", "dict"])
        client._client = mock_httpx

        with pytest.raises(IntegrationError):
            await client.get_conversation("C1")

    async def test_add_note_posts_admin_note(self):
        client = IntercomClient("ic_tok")
        mock_httpx = _make_mock_httpx_client()
        mock_httpx.request.return_value = _mock_response({"type": "conversation"})
        client._client = mock_httpx

        await client.add_note("C1", "hello")
        mock_httpx.request.assert_called_once_with(
            "POST",
            "/conversations/C1/reply",
            params=None,
            json={"message_type": "note", "type": "admin", "body": "hello"},
        )


# ===========================================================================
# LinearClient tests
# ===========================================================================


class TestLinearClient:
    async def test_viewer_returns_user(self):
        client = LinearClient("lin_tok")
        mock_httpx = _make_mock_httpx_client()
        mock_httpx.request.return_value = _mock_response(
            {"data": {"user": {"id": "u1", "name": "Grace", "email": "g@x.com"}}}
        )
        client._client = mock_httpx

        user = await client.viewer()
        assert user["name"] == "Grace"
        mock_httpx.request.assert_called_once_with(
            "POST",
            "https://api.linear.app/graphql",
            params=None,
            json={"query": VIEWER_QUERY},
        )

    async def test_viewer_raises_graphql_error(self):
        client = LinearClient("bad")
        mock_httpx = _make_mock_httpx_client()
        mock_httpx.request.return_value = _mock_response(
            {"errors": [{"message": "Authentication required"}]}
        )
        client._client = mock_httpx

        with pytest.raises(GraphQLError) as exc_info:
            await client.viewer()
        assert exc_info.value.errors == [{"message": "Authentication required"}]
        assert "Authentication required" in exc_info.value.detail

    async def test_create_issue_sends_input_and_returns_issue(self, ada_issue):
        client = LinearClient("lin_tok")
        mock_httpx = _make_mock_httpx_client()
        mock_httpx.request.return_value = _mock_response(
            {"data": {"issueCreate": {"success": True, "issue": ada_issue}}}
        )
        client._client = mock_httpx

        issue = await client.create_issue("team-1", "Title", "Body", priority=2)
        assert issue == ada_issue

        sent = mock_httpx.request.call_args.kwargs["json"]
        assert sent["query"] == ISSUE_CREATE_MUTATION
        assert sent["variables"] == {
            "input": {"teamId": "team-1", "title": "Title", "description": "Body", "priority": 2}
        }

    async def test_create_issue_surfaces_error_payload(self):
        client = LinearClient("lin_tok")
        mock_httpx = _make_mock_httpx_client()
        mock_httpx.request.return_value = _mock_response(
            {"data": None, "errors": [{"message": "Team not found"}]}
        )
        client._client = mock_httpx

        with pytest.raises(IntegrationError) as exc_info:
            await client.create_issue("missing", "T", "B")
        assert "Team not found" in str(exc_info.value)

    async def test_create_issue_without_issue_raises(self):
        client = LinearClient("lin_tok")
        mock_httpx = _make_mock_httpx_client()
        mock_httpx.request.return_value = _mock_response(
            {"data": {"issueCreate": {"success": False, "issue": None}}}
        )
        client._client = mock_httpx

        with pytest.raises(IntegrationError):
            await client.create_issue("team-1", "T", "B")
