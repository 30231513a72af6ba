"""
Unit tests for the dashboard identity bridge.
"""

import pytest
import pytest_asyncio
from httpx import ConnectError, Request, Response

from config import SupabaseEndpoint
from plugin_hub.core.errors import AuthError, UpstreamError
from plugin_hub.core.models import Subject
from plugin_hub.integrations.supabase_auth import IdentityBridge, SupabaseIdentityBridge


@pytest_asyncio.fixture
async def bridge():
    """Bridge pointed at a fake dashboard project."""
    bridge = SupabaseIdentityBridge(SupabaseEndpoint(url="https://dash.supabase.co", key="anon-key"))
    yield bridge
    await bridge.close()


class TestSupabaseIdentityBridge:
    def test_satisfies_protocol(self, bridge):
        assert isinstance(bridge, IdentityBridge)

    @pytest.mark.asyncio
    async def test_valid_token(self, bridge, monkeypatch):
        seen = {}

        async def mock_get(url, **kwargs):
            seen["url"] = url
            seen["headers"] = kwargs["headers"]
            return Response(
                200,
                json={"id": "user-123", "email": "teacher@example.com", "aud": "authenticated"},
                request=Request("GET", url),
            )

        monkeypatch.setattr(bridge.client, "get", mock_get)

        subject = await bridge.get_user("session-token")

        assert subject == Subject(id="user-123", email="teacher@example.com")
        assert seen["url"] == "https://dash.supabase.co/auth/v1/user"
        assert seen["headers"]["Authorization"] == "Bearer session-token"

    @pytest.mark.asyncio
    async def test_missing_email_defaults_to_empty(self, bridge, monkeypatch):
        async def mock_get(url, **kwargs):
            return Response(200, json={"id": "user-9", "email": None}, request=Request("GET", url))

        monkeypatch.setattr(bridge.client, "get", mock_get)

        assert (await bridge.get_user("t")).email == ""

    @pytest.mark.asyncio
    async def test_rejected_token(self, bridge, monkeypatch):
        async def mock_get(url, **kwargs):
            return Response(401, json={"msg": "invalid JWT"}, request=Request("GET", url))

        monkeypatch.setattr(bridge.client, "get", mock_get)

        with pytest.raises(AuthError) as exc_info:
            await bridge.get_user("expired-token")

        assert exc_info.value.error == "Invalid Supabase token"

    @pytest.mark.asyncio
    async def test_response_without_user_id(self, bridge, monkeypatch):
        async def mock_get(url, **kwargs):
            return Response(200, json={}, request=Request("GET", url))

        monkeypatch.setattr(bridge.client, "get", mock_get)

        with pytest.raises(AuthError):
            await bridge.get_user("token")

    @pytest.mark.asyncio
    async def test_empty_credential(self, bridge):
        with pytest.raises(AuthError) as exc_info:
            await bridge.get_user("")

        assert exc_info.value.error == "Supabase token required"

    @pytest.mark.asyncio
    async def test_server_error_is_upstream_error(self, bridge, monkeypatch):
        async def mock_get(url, **kwargs):
            return Response(503, text="unavailable", request=Request("GET", url))

        monkeypatch.setattr(bridge.client, "get", mock_get)

        with pytest.raises(UpstreamError):
            await bridge.get_user("token")

    @pytest.mark.asyncio
    async def test_connection_error_is_upstream_error(self, bridge, monkeypatch):
        async def mock_get(url, **kwargs):
            raise ConnectError("dns failure", request=Request("GET", url))

        monkeypatch.setattr(bridge.client, "get", mock_get)

        with pytest.raises(UpstreamError) as exc_info:
            await bridge.get_user("token")

        assert exc_info.value.details == "dns failure"
