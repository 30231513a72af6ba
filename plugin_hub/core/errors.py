"""
Gateway error taxonomy.

Every expected failure is raised as a GatewayError subclass and rendered by
the API layer as ``{"error": ..., "details": ...}`` with the matching status.
"""

from __future__ import annotations

from typing import Any


class GatewayError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, error: str | None = None, details: str | None = None):
        self.error = error or self.default_message
        self.details = details
        super().__init__(self.error if details is None else f"{self.error}: {details}")

    def to_dict(self) -> dict[str, Any]:
        """Response body for this error."""
        body: dict[str, Any] = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


class AuthError(GatewayError):
    """Missing or invalid bearer credential."""

    status_code = 401
    default_message = "Authentication required"


class NotFoundError(GatewayError):
    """Requested record or subject does not exist."""

    status_code = 404
    default_message = "Not found"


class UpstreamError(GatewayError):
    """A query gateway or identity bridge call failed."""

    status_code = 500
    default_message = "Upstream request failed"

    def with_context(self, error: str) -> UpstreamError:
        """Re-label the failure for the route while keeping the upstream detail."""
        return UpstreamError(error, details=self.details)


class InternalError(GatewayError):
    """Unexpected failure. Details are logged, never returned."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, error: str | None = None):
        super().__init__(error, details=None)
