"""
Identity bridge to the dashboard Supabase project.

Validates a dashboard session token by asking Supabase Auth who it belongs to.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import httpx
from loguru import logger

from config import SupabaseEndpoint
from plugin_hub.core.errors import AuthError, UpstreamError
from plugin_hub.core.models import Subject


@runtime_checkable
class IdentityBridge(Protocol):
    """Exchanges an upstream credential for a verified subject."""

    async def get_user(self, credential: str) -> Subject:
        """Return the subject the credential belongs to, or raise AuthError."""


class SupabaseIdentityBridge:
    """HTTP client for the Supabase Auth ``/user`` endpoint."""

    def __init__(self, endpoint: SupabaseEndpoint, client: httpx.AsyncClient | None = None):
        self.endpoint = endpoint
        self.auth_url = f"{endpoint.url.rstrip('/')}/auth/v1"
        self.client = client or httpx.AsyncClient(headers={"apikey": endpoint.key})

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def get_user(self, credential: str) -> Subject:
        """
        Resolve a Supabase access token to its user.

        Args:
            credential: Dashboard Supabase access token

        Returns:
            Verified subject (id, email)

        Raises:
            AuthError: If the token is empty, rejected, or belongs to no user
            UpstreamError: If Supabase cannot be reached or fails server-side
        """
        if not credential:
            raise AuthError("Supabase token required")

        try:
            response = await self.client.get(
                f"{self.auth_url}/user",
                headers={"Authorization": f"Bearer {credential}"},
            )
        except httpx.RequestError as e:
            logger.error(f"Connection error validating Supabase token: {e}")
            raise UpstreamError("Identity service unavailable", details=str(e)) from e

        if response.status_code >= 500:
            logger.error(f"Supabase auth returned {response.status_code}")
            raise UpstreamError(
                "Identity service unavailable",
                details=f"HTTP {response.status_code}",
            )
        if response.status_code != 200:
            logger.warning(f"Supabase token rejected: {response.status_code}")
            raise AuthError("Invalid Supabase token")

        data = response.json()
        user_id = data.get("id") if isinstance(data, dict) else None
        if not user_id:
            raise AuthError("Invalid Supabase token")

        logger.debug(f"Validated Supabase token for user {user_id}")
        return Subject(id=str(user_id), email=data.get("email") or "")
