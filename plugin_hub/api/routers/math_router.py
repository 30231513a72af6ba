"""
Math plugin router.

Read endpoints over the math plugin dataset. Every route requires an API
access token issued by ``POST /auth/token``.
"""

from __future__ import annotations

from typing import Any, Union

from fastapi import APIRouter, Depends, Query
from loguru import logger
from pydantic import BaseModel

from plugin_hub.api.dependencies import get_math_gateway, require_access_token
from plugin_hub.core.enrichment import MODULES_TABLE, TOPICS_TABLE
from plugin_hub.core.errors import GatewayError, InternalError
from plugin_hub.integrations.supabase_query import QueryGateway
from plugin_hub.services import curriculum, practice_history

router = APIRouter(dependencies=[Depends(require_access_token)])


# ========================================
# Response Models
# ========================================


class RecordListResponse(BaseModel):
    """Envelope for a list of store rows."""

    success: bool = True
    data: list[dict[str, Any]]


class RecordResponse(BaseModel):
    """Envelope for a single store row."""

    success: bool = True
    data: dict[str, Any]


class MasteryRecordResponse(BaseModel):
    """Mastery summary for one standard code."""

    standard_code: str
    module_id: Union[int, str, None]
    topic_id: Union[int, str, None]
    total_attempts: int
    correct_count: int
    incorrect_count: int
    mastery_percentage: float
    avg_response_time_ms: int | None
    last_attempted: str


class MasteryResponse(BaseModel):
    """Envelope for a student's mastery summaries."""

    success: bool = True
    data: list[MasteryRecordResponse]


# ========================================
# Standards Endpoints
# ========================================


@router.get("/standards", response_model=RecordListResponse, summary="List math standards")
async def list_standards(
    enrich: bool = Query(True, description="Attach the referenced module and topic"),
    gateway: QueryGateway = Depends(get_math_gateway),
) -> RecordListResponse:
    """
    Get all math standards.

    With `enrich=true` (default) each standard carries `module` and `topic`
    objects, or `null` when the reference does not resolve.
    """
    try:
        standards = await curriculum.list_standards(gateway, enrich=enrich)
    except GatewayError:
        raise
    except Exception:
        logger.exception("Error fetching standards")
        raise InternalError()

    return RecordListResponse(data=standards)


@router.get("/standards/{standard_id}", response_model=RecordResponse, summary="Get math standard")
async def get_standard(
    standard_id: str,
    gateway: QueryGateway = Depends(get_math_gateway),
) -> RecordResponse:
    """Get a specific standard by ID, with its module and topic."""
    try:
        standard = await curriculum.get_standard(gateway, standard_id)
    except GatewayError:
        raise
    except Exception:
        logger.exception(f"Error fetching standard {standard_id}")
        raise InternalError()

    return RecordResponse(data=standard)


# ========================================
# Modules & Topics Endpoints
# ========================================


@router.get("/modules", response_model=RecordListResponse, summary="List modules")
async def list_modules(gateway: QueryGateway = Depends(get_math_gateway)) -> RecordListResponse:
    """Get all curriculum modules."""
    try:
        modules = await curriculum.list_records(gateway, MODULES_TABLE)
    except GatewayError:
        raise
    except Exception:
        logger.exception("Error fetching modules")
        raise InternalError()

    return RecordListResponse(data=modules)


@router.get("/modules/{module_id}", response_model=RecordResponse, summary="Get module")
async def get_module(
    module_id: str,
    gateway: QueryGateway = Depends(get_math_gateway),
) -> RecordResponse:
    """Get a specific module by ID."""
    try:
        module = await curriculum.get_record(gateway, MODULES_TABLE, module_id)
    except GatewayError:
        raise
    except Exception:
        logger.exception(f"Error fetching module {module_id}")
        raise InternalError()

    return RecordResponse(data=module)


@router.get("/topics", response_model=RecordListResponse, summary="List topics")
async def list_topics(gateway: QueryGateway = Depends(get_math_gateway)) -> RecordListResponse:
    """Get all curriculum topics."""
    try:
        topics = await curriculum.list_records(gateway, TOPICS_TABLE)
    except GatewayError:
        raise
    except Exception:
        logger.exception("Error fetching topics")
        raise InternalError()

    return RecordListResponse(data=topics)


@router.get("/topics/{topic_id}", response_model=RecordResponse, summary="Get topic")
async def get_topic(
    topic_id: str,
    gateway: QueryGateway = Depends(get_math_gateway),
) -> RecordResponse:
    """Get a specific topic by ID."""
    try:
        topic = await curriculum.get_record(gateway, TOPICS_TABLE, topic_id)
    except GatewayError:
        raise
    except Exception:
        logger.exception(f"Error fetching topic {topic_id}")
        raise InternalError()

    return RecordResponse(data=topic)


# ========================================
# Practice History Endpoints
# ========================================


@router.get(
    "/practice-history/{clever_id}",
    response_model=RecordListResponse,
    summary="Get practice history",
)
async def get_practice_history(
    clever_id: str,
    gateway: QueryGateway = Depends(get_math_gateway),
) -> RecordListResponse:
    """Get a student's raw practice attempts, newest first."""
    try:
        attempts = await practice_history.fetch_practice_history(gateway, clever_id)
    except GatewayError:
        raise
    except Exception:
        logger.exception(f"Error fetching practice history for {clever_id}")
        raise InternalError()

    return RecordListResponse(data=attempts)


@router.get(
    "/practice-history/{clever_id}/mastery",
    response_model=MasteryResponse,
    summary="Get mastery by standard",
)
async def get_mastery(
    clever_id: str,
    gateway: QueryGateway = Depends(get_math_gateway),
) -> MasteryResponse:
    """
    Get a student's mastery for every NY standards code they have practiced.

    **Response:**
    - `standard_code` (str): NY standards code
    - `total_attempts`, `correct_count`, `incorrect_count` (int)
    - `mastery_percentage` (float): Accuracy, one decimal place
    - `avg_response_time_ms` (int | null): Mean response time
    - `last_attempted` (str): Timestamp of the latest attempt
    """
    try:
        records = await practice_history.compute_student_mastery(gateway, clever_id)
    except GatewayError:
        raise
    except Exception:
        logger.exception(f"Error computing mastery for {clever_id}")
        raise InternalError()

    return MasteryResponse(data=[MasteryRecordResponse(**record.to_dict()) for record in records])
