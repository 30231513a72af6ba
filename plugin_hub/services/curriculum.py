"""
Curriculum reads: standards, modules and topics.
"""

from __future__ import annotations

from typing import Any

from plugin_hub.core.enrichment import MODULES_TABLE, TOPICS_TABLE, enrich_standard, enrich_standards
from plugin_hub.core.errors import NotFoundError, UpstreamError
from plugin_hub.integrations.supabase_query import QueryGateway

STANDARDS_TABLE = "standards"

_LABELS = {
    STANDARDS_TABLE: ("standards", "Standard"),
    MODULES_TABLE: ("modules", "Module"),
    TOPICS_TABLE: ("topics", "Topic"),
}


async def list_records(gateway: QueryGateway, table: str) -> list[dict[str, Any]]:
    """All rows of a curriculum collection."""
    plural, _ = _LABELS[table]
    try:
        return await gateway.select(table)
    except UpstreamError as e:
        raise e.with_context(f"Failed to fetch {plural}") from e


async def get_record(gateway: QueryGateway, table: str, record_id: str) -> dict[str, Any]:
    """
    One row of a curriculum collection by id.

    Raises:
        NotFoundError: If no row has this id
    """
    _, singular = _LABELS[table]
    try:
        row = await gateway.select_one(table, eq={"id": record_id})
    except UpstreamError as e:
        raise e.with_context(f"Failed to fetch {singular.lower()}") from e

    if row is None:
        raise NotFoundError(f"{singular} not found")
    return row


async def list_standards(gateway: QueryGateway, *, enrich: bool = True) -> list[dict[str, Any]]:
    """All standards, optionally with their module and topic attached."""
    standards = await list_records(gateway, STANDARDS_TABLE)
    if not enrich:
        return standards

    try:
        return await enrich_standards(gateway, standards)
    except UpstreamError as e:
        raise e.with_context("Failed to fetch standard relations") from e


async def get_standard(gateway: QueryGateway, standard_id: str) -> dict[str, Any]:
    """One standard with its module and topic attached."""
    standard = await get_record(gateway, STANDARDS_TABLE, standard_id)
    try:
        return await enrich_standard(gateway, standard)
    except UpstreamError as e:
        raise e.with_context("Failed to fetch standard relations") from e
