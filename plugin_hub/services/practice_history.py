"""
Practice history service.

Resolves a student by Clever id, loads their practice attempts and the
question catalog entries those attempts reference, and aggregates mastery.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from plugin_hub.core.errors import NotFoundError, UpstreamError
from plugin_hub.core.mastery import build_catalog, compute_mastery, referenced_question_ids
from plugin_hub.core.models import MasteryRecord, PracticeAttempt, RecordId
from plugin_hub.integrations.supabase_query import QueryGateway

USERS_TABLE = "users"
PRACTICE_HISTORY_TABLE = "practice_history"
QUESTION_POOL_TABLE = "question_pool"

ATTEMPT_COLUMNS = (
    "id,user_id,correct,response_time_ms,created_at,module_id,topic_id,"
    "question_type,question_id,reference_question_id"
)
CATALOG_COLUMNS = "id,ny_standards_codes,module_id,topic_id"


async def resolve_user_id(gateway: QueryGateway, clever_id: str) -> RecordId:
    """
    Map a Clever id to the internal user id.

    Raises:
        NotFoundError: If no user has this Clever id, or the lookup fails
    """
    try:
        user = await gateway.select_one(USERS_TABLE, "id", eq={"clever_id": clever_id})
    except UpstreamError as e:
        raise NotFoundError("User not found", details=e.details) from e

    if user is None or user.get("id") is None:
        raise NotFoundError("User not found")
    return user["id"]


async def fetch_practice_history(gateway: QueryGateway, clever_id: str) -> list[dict[str, Any]]:
    """Raw practice attempts for a student, newest first."""
    user_id = await resolve_user_id(gateway, clever_id)
    try:
        return await gateway.select(
            PRACTICE_HISTORY_TABLE,
            eq={"user_id": user_id},
            order="created_at.desc",
        )
    except UpstreamError as e:
        raise e.with_context("Failed to fetch practice history") from e


async def compute_student_mastery(gateway: QueryGateway, clever_id: str) -> list[MasteryRecord]:
    """
    Per-standard-code mastery for one student.

    Raises:
        NotFoundError: If the Clever id matches no user
        UpstreamError: If the history or catalog query fails
        ValueError: If an attempt carries a malformed timestamp
    """
    user_id = await resolve_user_id(gateway, clever_id)

    try:
        rows = await gateway.select(
            PRACTICE_HISTORY_TABLE,
            ATTEMPT_COLUMNS,
            eq={"user_id": user_id},
        )
    except UpstreamError as e:
        raise e.with_context("Failed to fetch practice history") from e

    attempts = [PracticeAttempt.from_row(row) for row in rows]
    question_ids = referenced_question_ids(attempts)
    if not question_ids:
        logger.debug(f"No catalog-linked attempts for user {user_id}")
        return []

    try:
        catalog_rows = await gateway.select(
            QUESTION_POOL_TABLE,
            CATALOG_COLUMNS,
            in_={"id": question_ids},
        )
    except UpstreamError as e:
        raise e.with_context("Failed to fetch question catalog") from e

    records = compute_mastery(attempts, build_catalog(catalog_rows))
    logger.info(
        f"Computed mastery for user {user_id}: "
        f"{len(attempts)} attempts -> {len(records)} standards"
    )
    return records
