"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests,
including in-memory stand-ins for the Supabase query gateway and identity
bridge.
"""
import pytest
import sys
from pathlib import Path
from typing import Any, Iterable, Mapping

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from plugin_hub.core.errors import AuthError, UpstreamError  # noqa: E402
from plugin_hub.core.models import Subject  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Route tests against in-memory upstreams")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


# ========================================
# In-memory upstreams
# ========================================


def _same(left: Any, right: Any) -> bool:
    return str(left) == str(right)


class InMemoryQueryGateway:
    """Query gateway over a dict of tables. Records every call."""

    def __init__(self, tables: Mapping[str, list[dict[str, Any]]] | None = None):
        self.tables = {name: list(rows) for name, rows in (tables or {}).items()}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.failing: dict[str, str] = {}

    def fail(self, table: str, message: str = "relation does not exist") -> None:
        """Make every query on ``table`` raise UpstreamError."""
        self.failing[table] = message

    def _rows(self, table: str, eq: Mapping[str, Any] | None, in_: Mapping[str, Iterable[Any]] | None):
        if table in self.failing:
            raise UpstreamError(f"Query on '{table}' failed", details=self.failing[table])

        rows = self.tables.get(table, [])
        for column, value in (eq or {}).items():
            rows = [row for row in rows if _same(row.get(column), value)]
        for column, values in (in_ or {}).items():
            wanted = {str(value) for value in values}
            rows = [row for row in rows if str(row.get(column)) in wanted]
        return rows

    async def select(self, table, columns="*", *, eq=None, in_=None, order=None):
        self.calls.append((table, {"columns": columns, "eq": eq, "in_": in_, "order": order}))
        rows = self._rows(table, eq, in_)
        if order:
            column, _, direction = order.partition(".")
            rows = sorted(rows, key=lambda row: row.get(column) or "", reverse=direction == "desc")
        return [dict(row) for row in rows]

    async def select_one(self, table, columns="*", *, eq=None):
        self.calls.append((table, {"columns": columns, "eq": eq}))
        rows = self._rows(table, eq, None)
        return dict(rows[0]) if rows else None

    def tables_queried(self) -> list[str]:
        return [table for table, _ in self.calls]


class InMemoryIdentityBridge:
    """Identity bridge backed by a token -> subject mapping."""

    def __init__(self, users: Mapping[str, Subject] | None = None):
        self.users = dict(users or {})

    async def get_user(self, credential: str) -> Subject:
        subject = self.users.get(credential)
        if subject is None:
            raise AuthError("Invalid Supabase token")
        return subject


# ========================================
# Sample data
# ========================================


@pytest.fixture
def math_tables():
    """A small math plugin dataset."""
    return {
        "users": [
            {"id": 101, "clever_id": "clever-abc"},
            {"id": 102, "clever_id": "clever-empty"},
        ],
        "modules": [
            {"id": 1, "name": "Module 1: Ratios"},
            {"id": 2, "name": "Module 2: Expressions"},
        ],
        "topics": [
            {"id": 10, "name": "Topic A", "module_id": 1},
            {"id": 20, "name": "Topic B", "module_id": 2},
        ],
        "standards": [
            {"id": 1000, "code": "6.RP.A.1", "module_id": 1, "topic_id": 10},
            {"id": 1001, "code": "6.EE.A.2", "module_id": 2, "topic_id": 20},
            {"id": 1002, "code": "6.NS.B.3", "module_id": 99, "topic_id": None},
        ],
        "question_pool": [
            {"id": 500, "ny_standards_codes": ["NY-6.RP.1", "NY-6.RP.2"], "module_id": 1, "topic_id": 10},
            {"id": 501, "ny_standards_codes": ["NY-6.EE.2"], "module_id": 2, "topic_id": 20},
            {"id": 502, "ny_standards_codes": [], "module_id": 2, "topic_id": 20},
        ],
        "practice_history": [
            {
                "id": 1,
                "user_id": 101,
                "correct": True,
                "response_time_ms": 500,
                "created_at": "2024-03-01T10:00:00Z",
                "module_id": None,
                "topic_id": None,
                "question_type": "saved",
                "question_id": 500,
                "reference_question_id": None,
            },
            {
                "id": 2,
                "user_id": 101,
                "correct": False,
                "response_time_ms": 700,
                "created_at": "2024-03-02T09:30:00+00:00",
                "module_id": 1,
                "topic_id": 10,
                "question_type": "on_the_fly",
                "question_id": None,
                "reference_question_id": 500,
            },
            {
                "id": 3,
                "user_id": 101,
                "correct": True,
                "response_time_ms": None,
                "created_at": "2024-03-03T08:00:00Z",
                "module_id": 2,
                "topic_id": 20,
                "question_type": "saved",
                "question_id": 501,
                "reference_question_id": None,
            },
            {
                "id": 4,
                "user_id": 101,
                "correct": True,
                "response_time_ms": 300,
                "created_at": "2024-03-04T08:00:00Z",
                "module_id": 2,
                "topic_id": 20,
                "question_type": "saved",
                "question_id": 999,
                "reference_question_id": None,
            },
        ],
    }


@pytest.fixture
def math_gateway(math_tables):
    """In-memory math plugin gateway."""
    return InMemoryQueryGateway(math_tables)


@pytest.fixture
def identity_bridge():
    """In-memory dashboard identity bridge."""
    return InMemoryIdentityBridge(
        {"dashboard-session-token": Subject(id="user-123", email="teacher@example.com")}
    )
