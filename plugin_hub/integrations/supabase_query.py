"""
Supabase query gateway.

Thin async client over the PostgREST interface a Supabase project exposes at
``/rest/v1``. Supports the read shapes the gateway needs: column projection,
equality filters, set-membership filters and ordering.

Usage:
    gateway = SupabaseQueryGateway(settings.get_math_endpoint())
    rows = await gateway.select("standards")
    row = await gateway.select_one("standards", eq={"id": 7})
    await gateway.close()
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol, runtime_checkable

import httpx
from loguru import logger

from config import SupabaseEndpoint
from plugin_hub.core.errors import UpstreamError

_RESERVED_FILTER_CHARS = frozenset(',()"\\ ')


@runtime_checkable
class QueryGateway(Protocol):
    """Read interface over named record collections."""

    async def select(
        self,
        table: str,
        columns: str = "*",
        *,
        eq: Mapping[str, Any] | None = None,
        in_: Mapping[str, Iterable[Any]] | None = None,
        order: str | None = None,
    ) -> list[dict[str, Any]]:
        """Return all rows matching the filters."""

    async def select_one(
        self,
        table: str,
        columns: str = "*",
        *,
        eq: Mapping[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Return the first matching row, or None."""


def _format_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    text = str(value)
    if any(char in _RESERVED_FILTER_CHARS for char in text):
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return text


def build_query_params(
    columns: str = "*",
    *,
    eq: Mapping[str, Any] | None = None,
    in_: Mapping[str, Iterable[Any]] | None = None,
    order: str | None = None,
    limit: int | None = None,
) -> list[tuple[str, str]]:
    """
    Translate filters into PostgREST query parameters.

    Examples:
        eq={"id": 7}            -> id=eq.7
        in_={"id": [1, 2]}      -> id=in.(1,2)
        order="created_at.desc" -> order=created_at.desc
    """
    params: list[tuple[str, str]] = [("select", columns)]
    for column, value in (eq or {}).items():
        if value is None:
            params.append((column, "is.null"))
        else:
            params.append((column, f"eq.{_format_value(value)}"))
    for column, values in (in_ or {}).items():
        joined = ",".join(_format_value(value) for value in values)
        params.append((column, f"in.({joined})"))
    if order:
        params.append(("order", order))
    if limit is not None:
        params.append(("limit", str(limit)))
    return params


def _upstream_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(payload, dict):
        for key in ("message", "error_description", "msg", "error"):
            if payload.get(key):
                return str(payload[key])
    return f"HTTP {response.status_code}"


class SupabaseQueryGateway:
    """HTTP client for a Supabase project's REST interface."""

    def __init__(self, endpoint: SupabaseEndpoint, client: httpx.AsyncClient | None = None):
        """
        Initialize the gateway.

        Args:
            endpoint: Project URL and API key
            client: Optional preconfigured httpx client (shared or test double)
        """
        self.endpoint = endpoint
        self.rest_url = f"{endpoint.url.rstrip('/')}/rest/v1"
        self.client = client or httpx.AsyncClient(
            headers={
                "apikey": endpoint.key,
                "Authorization": f"Bearer {endpoint.key}",
                "Accept": "application/json",
            },
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def _get(self, table: str, params: list[tuple[str, str]]) -> list[dict[str, Any]]:
        url = f"{self.rest_url}/{table}"
        try:
            response = await self.client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = _upstream_message(e.response)
            logger.error(f"Query on '{table}' failed with {e.response.status_code}: {message}")
            raise UpstreamError(f"Query on '{table}' failed", details=message) from e
        except httpx.RequestError as e:
            logger.error(f"Connection error querying '{table}': {e}")
            raise UpstreamError(f"Query on '{table}' failed", details=str(e)) from e

        rows = response.json()
        if not isinstance(rows, list):
            raise UpstreamError(
                f"Query on '{table}' failed",
                details="expected a JSON array of rows",
            )
        logger.debug(f"Fetched {len(rows)} rows from '{table}'")
        return rows

    async def select(
        self,
        table: str,
        columns: str = "*",
        *,
        eq: Mapping[str, Any] | None = None,
        in_: Mapping[str, Iterable[Any]] | None = None,
        order: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch rows from a collection.

        Args:
            table: Collection name
            columns: Comma-separated projection
            eq: Column equality filters
            in_: Column set-membership filters
            order: PostgREST order clause, e.g. ``created_at.desc``

        Returns:
            Matching rows (possibly empty)

        Raises:
            UpstreamError: On transport failure or a non-2xx response
        """
        params = build_query_params(columns, eq=eq, in_=in_, order=order)
        return await self._get(table, params)

    async def select_one(
        self,
        table: str,
        columns: str = "*",
        *,
        eq: Mapping[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Fetch a single row, returning None when nothing matches."""
        params = build_query_params(columns, eq=eq, limit=1)
        rows = await self._get(table, params)
        return rows[0] if rows else None
