"""
Practice-history mastery aggregation.

Folds a student's practice attempts into per-standard-code mastery records:

    attempt -> resolved question -> {code, code, ...} -> accumulator per code

Each attempt counts once for every distinct NY standards code attached to the
question it resolves to. Attempts whose question is missing from the catalog,
or carries no codes, are dropped.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Mapping

from plugin_hub.core.models import (
    MasteryRecord,
    PracticeAttempt,
    QuestionPoolEntry,
    RecordId,
    parse_timestamp,
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def mastery_percentage(correct_count: int, total_attempts: int) -> float:
    """Accuracy as a percentage with one decimal place."""
    if total_attempts <= 0:
        return 0.0
    return round_half_up(correct_count / total_attempts * 1000) / 10


@dataclass
class _CodeAccumulator:
    standard_code: str
    module_id: RecordId | None
    topic_id: RecordId | None
    total_attempts: int = 0
    correct_count: int = 0
    incorrect_count: int = 0
    response_times: list[int] = field(default_factory=list)
    last_attempted: str = ""
    _last_instant: datetime | None = None

    def add(self, attempt: PracticeAttempt, attempted_at: datetime) -> None:
        self.total_attempts += 1
        if attempt.correct:
            self.correct_count += 1
        else:
            self.incorrect_count += 1

        if attempt.response_time_ms is not None:
            self.response_times.append(attempt.response_time_ms)

        if self._last_instant is None or attempted_at > self._last_instant:
            self._last_instant = attempted_at
            self.last_attempted = attempt.created_at

    def finalize(self) -> MasteryRecord:
        avg_response_time = None
        if self.response_times:
            avg_response_time = round_half_up(sum(self.response_times) / len(self.response_times))

        return MasteryRecord(
            standard_code=self.standard_code,
            module_id=self.module_id,
            topic_id=self.topic_id,
            total_attempts=self.total_attempts,
            correct_count=self.correct_count,
            incorrect_count=self.incorrect_count,
            mastery_percentage=mastery_percentage(self.correct_count, self.total_attempts),
            avg_response_time_ms=avg_response_time,
            last_attempted=self.last_attempted,
        )


def compute_mastery(
    attempts: Iterable[PracticeAttempt],
    catalog: Mapping[RecordId, QuestionPoolEntry],
) -> list[MasteryRecord]:
    """
    Aggregate practice attempts into per-standard-code mastery records.

    Args:
        attempts: Practice attempts for one student, in any order
        catalog: Question pool entries keyed by question id

    Returns:
        One MasteryRecord per standard code, in first-seen order

    Raises:
        ValueError: If a contributing attempt has a malformed created_at
    """
    accumulators: dict[str, _CodeAccumulator] = {}

    for attempt in attempts:
        question_id = attempt.resolved_question_id
        if question_id is None:
            continue

        question = catalog.get(question_id)
        if question is None or not question.ny_standards_codes:
            continue

        attempted_at = parse_timestamp(attempt.created_at)

        for code in dict.fromkeys(question.ny_standards_codes):
            accumulator = accumulators.get(code)
            if accumulator is None:
                accumulator = _CodeAccumulator(
                    standard_code=code,
                    module_id=attempt.module_id if attempt.module_id is not None else question.module_id,
                    topic_id=attempt.topic_id if attempt.topic_id is not None else question.topic_id,
                )
                accumulators[code] = accumulator
            accumulator.add(attempt, attempted_at)

    return [accumulator.finalize() for accumulator in accumulators.values()]


def build_catalog(rows: Iterable[Mapping]) -> dict[RecordId, QuestionPoolEntry]:
    """Index question_pool rows by id."""
    catalog: dict[RecordId, QuestionPoolEntry] = {}
    for row in rows:
        entry = QuestionPoolEntry.from_row(row)
        catalog[entry.id] = entry
    return catalog


def referenced_question_ids(attempts: Iterable[PracticeAttempt]) -> list[RecordId]:
    """Distinct resolved question ids, in first-seen order."""
    ids = (attempt.resolved_question_id for attempt in attempts)
    return list(dict.fromkeys(qid for qid in ids if qid is not None))
