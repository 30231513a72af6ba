"""
Domain records for the math plugin dataset.

Rows arrive from the query gateway as plain dictionaries; these dataclasses
give the aggregation code typed, immutable views of them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Union

from dateutil import parser as date_parser

RecordId = Union[int, str]


class QuestionType(str, Enum):
    """How a practice attempt references its question."""

    SAVED = "saved"  # question_id points at question_pool
    ON_THE_FLY = "on_the_fly"  # generated question, reference_question_id points at its template

    @classmethod
    def parse(cls, value: Any) -> QuestionType | None:
        """Return the matching member, or None for unknown types."""
        try:
            return cls(value)
        except ValueError:
            return None


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware datetime.

    Accepts any number of fraction digits, as Postgres trims trailing zeros.
    Naive timestamps are read as UTC. Malformed input raises ValueError.
    """
    if not isinstance(value, str):
        raise ValueError(f"timestamp must be a string, got {type(value).__name__}")
    parsed = date_parser.isoparse(value.strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class PracticeAttempt:
    """One recorded student response."""

    id: RecordId
    user_id: RecordId
    correct: bool
    created_at: str
    question_type: QuestionType | None
    response_time_ms: int | None = None
    module_id: RecordId | None = None
    topic_id: RecordId | None = None
    question_id: RecordId | None = None
    reference_question_id: RecordId | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> PracticeAttempt:
        """Build from a ``practice_history`` row."""
        response_time = row.get("response_time_ms")
        return cls(
            id=row.get("id"),
            user_id=row.get("user_id"),
            correct=bool(row.get("correct", False)),
            created_at=row.get("created_at"),
            question_type=QuestionType.parse(row.get("question_type")),
            response_time_ms=int(response_time) if response_time is not None else None,
            module_id=row.get("module_id"),
            topic_id=row.get("topic_id"),
            question_id=row.get("question_id"),
            reference_question_id=row.get("reference_question_id"),
        )

    @property
    def resolved_question_id(self) -> RecordId | None:
        """The question_pool id this attempt counts against."""
        if self.question_type is QuestionType.SAVED:
            return self.question_id
        if self.question_type is QuestionType.ON_THE_FLY:
            return self.reference_question_id
        return None


@dataclass(frozen=True)
class QuestionPoolEntry:
    """Catalog entry linking a question to its NY standards codes."""

    id: RecordId
    ny_standards_codes: tuple[str, ...] = ()
    module_id: RecordId | None = None
    topic_id: RecordId | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> QuestionPoolEntry:
        """Build from a ``question_pool`` row, dropping duplicate and blank codes."""
        codes = row.get("ny_standards_codes") or []
        if isinstance(codes, str):
            codes = [codes]
        distinct = tuple(dict.fromkeys(code for code in codes if code))
        return cls(
            id=row.get("id"),
            ny_standards_codes=distinct,
            module_id=row.get("module_id"),
            topic_id=row.get("topic_id"),
        )


@dataclass(frozen=True)
class MasteryRecord:
    """Per-standard-code mastery summary. Derived, never persisted."""

    standard_code: str
    module_id: RecordId | None
    topic_id: RecordId | None
    total_attempts: int
    correct_count: int
    incorrect_count: int
    mastery_percentage: float
    avg_response_time_ms: int | None
    last_attempted: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to the response payload format."""
        return {
            "standard_code": self.standard_code,
            "module_id": self.module_id,
            "topic_id": self.topic_id,
            "total_attempts": self.total_attempts,
            "correct_count": self.correct_count,
            "incorrect_count": self.incorrect_count,
            "mastery_percentage": self.mastery_percentage,
            "avg_response_time_ms": self.avg_response_time_ms,
            "last_attempted": self.last_attempted,
        }


@dataclass(frozen=True)
class Subject:
    """Verified identity returned by the identity bridge."""

    id: str
    email: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "email": self.email}


@dataclass
class AccessToken:
    """A minted API access token."""

    token: str
    expires_in: str
    subject: Subject
    claims: dict[str, Any] = field(default_factory=dict)
