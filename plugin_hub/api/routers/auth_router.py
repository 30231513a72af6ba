"""
Auth router.

Exchanges a dashboard Supabase session token for an API access token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from config import Settings, get_settings
from plugin_hub.api.dependencies import get_identity_bridge
from plugin_hub.core.errors import AuthError, GatewayError, InternalError
from plugin_hub.core.tokens import issue_access_token
from plugin_hub.integrations.supabase_auth import IdentityBridge

router = APIRouter()


# ========================================
# Response Models
# ========================================


class TokenUser(BaseModel):
    """Subject summary returned with a token."""

    id: str
    email: str


class TokenResponse(BaseModel):
    """Response model for a token exchange."""

    model_config = ConfigDict(populate_by_name=True)

    token: str
    expires_in: str = Field(..., alias="expiresIn")
    user: TokenUser


def _bearer_credential(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


# ========================================
# Token Endpoints
# ========================================


@router.post(
    "/token",
    response_model=TokenResponse,
    response_model_by_alias=True,
    summary="Exchange a Supabase token for an API token",
)
async def create_token(
    authorization: str | None = Header(default=None),
    bridge: IdentityBridge = Depends(get_identity_bridge),
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    """
    Validate the dashboard Supabase token and mint an API access token.

    **Headers:**
    - `Authorization: Bearer <supabase-access-token>`

    **Response:**
    - `token` (str): Signed API access token
    - `expiresIn` (str): Configured lifetime, e.g. `24h`
    - `user` (object): `id` and `email` of the dashboard user
    """
    credential = _bearer_credential(authorization)
    if credential is None:
        raise AuthError("Supabase token required")

    try:
        subject = await bridge.get_user(credential)
        access_token = issue_access_token(
            subject,
            secret=settings.jwt_secret,
            expires_in=settings.jwt_expires_in,
            algorithm=settings.jwt_algorithm,
        )
    except GatewayError:
        raise
    except Exception:
        logger.exception("Token generation error")
        raise InternalError()

    logger.info(f"Issued API token for user {subject.id}")
    return TokenResponse(
        token=access_token.token,
        expires_in=access_token.expires_in,
        user=TokenUser(**subject.to_dict()),
    )
