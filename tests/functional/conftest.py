"""Functional test bootstrap.

Points the application at a file-backed SQLite database under ``tmp/`` before
anything imports ``survey_admin``, applies the SQLite migrations once per
session and empties every table before each test. Tests drive the API through
FastAPI's ``TestClient``.
"""

from __future__ import annotations

import os
import pathlib
from typing import Any, Callable, Dict, Iterator, Optional

import pytest

_ROOT = pathlib.Path(__file__).resolve().parents[2]
_DB_FILE = _ROOT / "tmp" / "functional_tests.db"
_DB_FILE.parent.mkdir(parents=True, exist_ok=True)
if _DB_FILE.exists():
    _DB_FILE.unlink()

# File-backed so every pooled connection sees the same data
os.environ["TEST_DATABASE_URL"] = f"sqlite:///{_DB_FILE}"
os.environ["DATABASE_URL"] = os.environ["TEST_DATABASE_URL"]
# Migrations are applied explicitly below, not at app startup
os.environ["AUTO_APPLY_MIGRATIONS"] = "0"
os.environ["APP_ENV"] = "test"

# Child tables first so deletes never trip a foreign key
_TABLES = (
    "survey_questions",
    "annual_surveys",
    "sustainability_questions",
    "clients",
    "vendors",
    "client_partners",
)


def _engine():
    from survey_admin.db.base import get_engine

    return get_engine(os.environ["TEST_DATABASE_URL"])


@pytest.fixture(scope="session", autouse=True)
def functional_sqlite_bootstrap() -> Iterator[None]:
    """Session-level bootstrap: apply migrations once for the shared DB."""
    from survey_admin.db.migrations_runner import apply_migrations

    apply_migrations(_engine(), migrations_dir=str(_ROOT / "sqlite_migrations"))
    yield


@pytest.fixture(autouse=True)
def clean_tables() -> Iterator[None]:
    from sqlalchemy import text as sql_text

    with _engine().begin() as conn:
        for table in _TABLES:
            conn.execute(sql_text(f"DELETE FROM {table}"))
    yield


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from survey_admin.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def make_question(client) -> Callable[..., int]:
    """Create a library question through the API and return its id."""

    def _make(
        category: str = "Energy",
        text: str = "Do you track energy use?",
        *,
        question_order: Optional[int] = None,
        question_type: str = "Yes/No",
        max_points: int = 5,
    ) -> int:
        body: Dict[str, Any] = {
            "category": category,
            "question_text": text,
            "question_type": question_type,
            "answer_type": "boolean",
            "max_points": max_points,
        }
        if question_order is not None:
            body["question_order"] = question_order
        resp = client.post("/api/questions", json=body)
        assert resp.status_code == 201, resp.text
        return int(resp.json()["id"])

    return _make


@pytest.fixture
def category_ids(make_question) -> Callable[[str, int], list]:
    """Create ``count`` questions in ``category`` and return their ids in order."""

    def _make(category: str, count: int) -> list:
        return [make_question(category, f"{category} question {n + 1}") for n in range(count)]

    return _make
