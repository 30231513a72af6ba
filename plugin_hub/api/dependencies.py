"""
FastAPI dependency providers.

The upstream clients live on ``app.state`` (created in the lifespan) and are
handed to routes through these providers, so tests can swap them out with
``app.dependency_overrides``.
"""

from __future__ import annotations

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config import Settings, get_settings
from plugin_hub.core.errors import AuthError, InternalError
from plugin_hub.core.models import Subject
from plugin_hub.core.tokens import verify_access_token
from plugin_hub.integrations.supabase_auth import IdentityBridge
from plugin_hub.integrations.supabase_query import QueryGateway

bearer_scheme = HTTPBearer(auto_error=False)


def get_math_gateway(request: Request) -> QueryGateway:
    """Query gateway for the math plugin dataset."""
    gateway = getattr(request.app.state, "math_gateway", None)
    if gateway is None:
        raise InternalError("Math plugin data store is not initialized")
    return gateway


def get_identity_bridge(request: Request) -> IdentityBridge:
    """Identity bridge to the dashboard project."""
    bridge = getattr(request.app.state, "identity_bridge", None)
    if bridge is None:
        raise InternalError("Identity service is not initialized")
    return bridge


def require_access_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> Subject:
    """Reject the request unless it carries a valid API access token."""
    if credentials is None or not credentials.credentials:
        raise AuthError("Access token required")
    return verify_access_token(
        credentials.credentials,
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
