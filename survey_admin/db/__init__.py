"""Database bootstrap: engine construction and the SQL migrations runner."""

from survey_admin.db.base import get_engine, get_sessionmaker, reset_engine, session_scope
from survey_admin.db.migrations_runner import apply_migrations

__all__ = [
    "get_engine",
    "get_sessionmaker",
    "reset_engine",
    "session_scope",
    "apply_migrations",
]
