"""
Core Module - Domain records and pure logic.

Components:
- models: Practice attempts, catalog entries, mastery records
- mastery: Per-standard-code mastery aggregation
- enrichment: Module/topic joins for standards
- tokens: API access token issuing and verification
- errors: Gateway error taxonomy
"""

from plugin_hub.core.errors import (
    AuthError,
    GatewayError,
    InternalError,
    NotFoundError,
    UpstreamError,
)
from plugin_hub.core.mastery import compute_mastery
from plugin_hub.core.models import (
    MasteryRecord,
    PracticeAttempt,
    QuestionPoolEntry,
    QuestionType,
)

__all__ = [
    "AuthError",
    "GatewayError",
    "InternalError",
    "MasteryRecord",
    "NotFoundError",
    "PracticeAttempt",
    "QuestionPoolEntry",
    "QuestionType",
    "UpstreamError",
    "compute_mastery",
]
