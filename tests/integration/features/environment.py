"""Behave environment hooks for question library integration scenarios.

Two modes:

- Live: ``TEST_BASE_URL`` points at a running API and ``TEST_DATABASE_URL``
  at its database. Steps talk HTTP through ``httpx``.
- In-process (default): a file-backed SQLite database under ``tmp/`` gets the
  SQLite migrations and the app is driven through FastAPI's ``TestClient``.

Every scenario starts from empty tables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import httpx
from sqlalchemy import create_engine, text as sql_text

_ROOT = Path(__file__).resolve().parents[3]
_TABLES = (
    "survey_questions",
    "annual_surveys",
    "sustainability_questions",
    "clients",
    "vendors",
    "client_partners",
)


def _boot_in_process(context: Any) -> None:
    db_file = _ROOT / "tmp" / "integration_tests.db"
    db_file.parent.mkdir(parents=True, exist_ok=True)
    if db_file.exists():
        db_file.unlink()
    os.environ["TEST_DATABASE_URL"] = f"sqlite:///{db_file}"
    os.environ["DATABASE_URL"] = os.environ["TEST_DATABASE_URL"]
    os.environ["AUTO_APPLY_MIGRATIONS"] = "1"
    os.environ.setdefault("APP_ENV", "test")

    from fastapi.testclient import TestClient

    from survey_admin.db.base import get_engine
    from survey_admin.main import create_app

    context.client = TestClient(create_app())
    # Entering the client runs startup, which applies the migrations
    context.client.__enter__()
    context.engine = get_engine(os.environ["TEST_DATABASE_URL"])


def before_all(context: Any) -> None:
    base_url = os.getenv("TEST_BASE_URL", "").strip().rstrip("/")
    if base_url:
        db_url = os.getenv("TEST_DATABASE_URL", "").strip()
        assert db_url, "Environment variable TEST_DATABASE_URL is required when TEST_BASE_URL is set"
        context.client = httpx.Client(base_url=base_url, timeout=10.0)
        context.engine = create_engine(db_url, future=True)
        context.live = True
        print(f"[env] live mode against {base_url}")
        return
    _boot_in_process(context)
    context.live = False


def before_scenario(context: Any, scenario: Any) -> None:
    with context.engine.begin() as conn:
        for table in _TABLES:
            conn.execute(sql_text(f"DELETE FROM {table}"))
    context.questions = {}
    context.response = None


def after_all(context: Any) -> None:
    client = getattr(context, "client", None)
    if client is None:
        return
    if context.live:
        client.close()
        context.engine.dispose()
    else:
        client.__exit__(None, None, None)
