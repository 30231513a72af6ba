"""
API access token issuing and verification.

Tokens are HS256 JWTs carrying the dashboard user's id and email. Lifetimes
use the compact unit suffixes of the `ms` package (``"30m"``, ``"24h"``,
``"7d"``). A bare number such as ``"3600"`` is a count of seconds, where `ms`
would read it as milliseconds.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from plugin_hub.core.errors import AuthError
from plugin_hub.core.models import AccessToken, Subject

_DURATION_RE = re.compile(
    r"^\s*(?P<amount>-?\d+(?:\.\d+)?)\s*(?P<unit>ms|s|sec|secs|m|min|mins|h|hr|hrs|d|days?|w|weeks?|y|years?)?\s*$",
    re.IGNORECASE,
)

_UNIT_SECONDS = {
    "ms": 0.001,
    "s": 1,
    "sec": 1,
    "secs": 1,
    "m": 60,
    "min": 60,
    "mins": 60,
    "h": 3600,
    "hr": 3600,
    "hrs": 3600,
    "d": 86400,
    "day": 86400,
    "days": 86400,
    "w": 604800,
    "week": 604800,
    "weeks": 604800,
    "y": 31557600,
    "year": 31557600,
    "years": 31557600,
}


def parse_duration(value: str) -> timedelta:
    """
    Parse a token lifetime string.

    A bare number is seconds; otherwise the unit suffix decides.

    Raises:
        ValueError: If the string is not a positive duration
    """
    match = _DURATION_RE.match(str(value))
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")

    amount = float(match.group("amount"))
    unit = (match.group("unit") or "s").lower()
    seconds = amount * _UNIT_SECONDS[unit]
    if seconds <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")
    return timedelta(seconds=seconds)


def issue_access_token(
    subject: Subject,
    *,
    secret: str,
    expires_in: str,
    algorithm: str = "HS256",
    now: datetime | None = None,
) -> AccessToken:
    """Sign an access token for a verified subject."""
    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + parse_duration(expires_in)
    claims: dict[str, Any] = {
        "sub": subject.id,
        "userId": subject.id,
        "email": subject.email,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    token = jwt.encode(claims, secret, algorithm=algorithm)
    return AccessToken(token=token, expires_in=expires_in, subject=subject, claims=claims)


def verify_access_token(token: str, *, secret: str, algorithm: str = "HS256") -> Subject:
    """
    Verify an access token and return its subject.

    Raises:
        AuthError: If the token is expired, tampered with, or has no subject
    """
    try:
        claims = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.ExpiredSignatureError as e:
        raise AuthError("Invalid or expired access token", details="token expired") from e
    except jwt.InvalidTokenError as e:
        raise AuthError("Invalid or expired access token") from e

    user_id = claims.get("sub") or claims.get("userId")
    if not user_id:
        raise AuthError("Invalid or expired access token")
    return Subject(id=str(user_id), email=claims.get("email") or "")
