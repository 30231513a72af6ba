"""
Relation enrichment for standards.

Attaches the referenced module and topic records to each standard row:

    {"id": 1, "module_id": 3, "topic_id": 9, ...}
        -> {"id": 1, "module_id": 3, "topic_id": 9, ..., "module": {...}, "topic": {...}}

A reference that matches no record becomes ``None``.
"""

from __future__ import annotations

import asyncio
from typing import Any, Iterable, Mapping, Sequence

from plugin_hub.integrations.supabase_query import QueryGateway

MODULES_TABLE = "modules"
TOPICS_TABLE = "topics"


def _distinct_ids(rows: Iterable[Mapping[str, Any]], column: str) -> list[Any]:
    return list(dict.fromkeys(row.get(column) for row in rows if row.get(column) is not None))


async def _fetch_by_ids(
    gateway: QueryGateway,
    table: str,
    ids: Sequence[Any],
) -> dict[Any, dict[str, Any]]:
    if not ids:
        return {}
    rows = await gateway.select(table, in_={"id": ids})
    return {row.get("id"): row for row in rows}


def _attach(
    standard: Mapping[str, Any],
    module: dict[str, Any] | None,
    topic: dict[str, Any] | None,
) -> dict[str, Any]:
    enriched = dict(standard)
    enriched["module"] = module
    enriched["topic"] = topic
    return enriched


async def enrich_standards(
    gateway: QueryGateway,
    standards: Sequence[Mapping[str, Any]],
) -> list[dict[str, Any]]:
    """
    Enrich a list of standards with one batched lookup per collection.

    The module and topic lookups are dispatched together; if either fails the
    error propagates and nothing is returned.
    """
    if not standards:
        return []

    modules, topics = await asyncio.gather(
        _fetch_by_ids(gateway, MODULES_TABLE, _distinct_ids(standards, "module_id")),
        _fetch_by_ids(gateway, TOPICS_TABLE, _distinct_ids(standards, "topic_id")),
    )

    return [
        _attach(standard, modules.get(standard.get("module_id")), topics.get(standard.get("topic_id")))
        for standard in standards
    ]


async def _fetch_one(gateway: QueryGateway, table: str, record_id: Any) -> dict[str, Any] | None:
    if record_id is None:
        return None
    return await gateway.select_one(table, eq={"id": record_id})


async def enrich_standard(gateway: QueryGateway, standard: Mapping[str, Any]) -> dict[str, Any]:
    """Enrich a single standard with two individual lookups."""
    module, topic = await asyncio.gather(
        _fetch_one(gateway, MODULES_TABLE, standard.get("module_id")),
        _fetch_one(gateway, TOPICS_TABLE, standard.get("topic_id")),
    )
    return _attach(standard, module, topic)
