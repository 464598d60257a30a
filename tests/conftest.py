"""
Pytest configuration and fixtures for bulk import tests

This module provides shared fixtures for unit and integration tests.
"""
import pytest

from bulk_import.core.models import FieldSchema
from bulk_import.core.rules import RuleEngine
from bulk_import.entities import USERS_SCHEMA, build_user_rules


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that exercise one component"
    )
    config.addinivalue_line(
        "markers", "integration: Tests that drive the full pipeline end to end"
    )


# =======================
# SCHEMA AND RULE FIXTURES
# =======================

@pytest.fixture
def users_schema() -> FieldSchema:
    return USERS_SCHEMA


@pytest.fixture
def user_rules() -> list[dict]:
    return build_user_rules()


@pytest.fixture
def user_engine(users_schema, user_rules) -> RuleEngine:
    """Rule engine configured for user imports"""
    return RuleEngine(user_rules, schema=users_schema)


@pytest.fixture
def small_schema() -> FieldSchema:
    """Minimal schema for tests that do not care about user fields"""
    return FieldSchema(
        entity="alumnos",
        required_fields=["email", "user_type"],
        optional_fields=["full_name", "allowed_groups"],
    )


# =======================
# FILE FIXTURES
# =======================

@pytest.fixture
def users_csv() -> bytes:
    """A user file with one valid, one warned and one rejected row"""
    return (
        "email;user_type;center_id;full_name\n"
        "alice@colegio.es;ORIENTADOR;CTR_001;Alice Martín\n"
        "bob@colegio.es;ORIENTADOR;;Bob Ruiz\n"
        ";ORIENTADOR;CTR_002;Sin Email\n"
    ).encode("utf-8")


class CreateRecorder:
    """Async create operation that records calls and fails on chosen positions"""

    def __init__(self, fail_on: set[int] | None = None):
        self.fail_on = fail_on or set()
        self.calls: list[dict] = []

    async def __call__(self, record: dict) -> None:
        self.calls.append(record)
        if len(self.calls) in self.fail_on:
            raise RuntimeError(f"backend rejected call {len(self.calls)}")


@pytest.fixture
def create_recorder():
    """Factory for CreateRecorder instances"""
    return CreateRecorder
