"""Lightweight SQL migrations runner.

Applies ``*.sql`` files in lexical order from a migrations directory and
records each applied filename in a ``schema_migrations`` table of the target
database, so a fresh database (for example a per-run SQLite file) always gets
the full schema. ``migrations/`` holds the PostgreSQL scripts and
``sqlite_migrations/`` their SQLite equivalents.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)

_JOURNAL_DDL = (
    "CREATE TABLE IF NOT EXISTS schema_migrations ("
    "filename VARCHAR(255) PRIMARY KEY, applied_at VARCHAR(32) NOT NULL)"
)


def default_migrations_dir(engine: Engine) -> Path:
    root = Path(__file__).resolve().parents[2]
    name = "sqlite_migrations" if engine.dialect.name == "sqlite" else "migrations"
    return root / name


def _iter_sql_files(root: Path) -> Iterable[Path]:
    for p in sorted(root.glob("*.sql")):
        if "rollback" in p.name.lower():
            continue
        yield p


def _exec_script(conn: Connection, sql: str) -> None:
    """Execute a multi-statement script.

    pysqlite refuses several statements per ``execute()``, so SQLite scripts
    are split on ``;``. Other dialects receive the script as-is.
    """
    if conn.dialect.name == "sqlite":
        for stmt in sql.split(";"):
            lines = [ln for ln in stmt.splitlines() if not ln.strip().startswith("--")]
            s = "\n".join(lines).strip()
            if not s or s.upper() in {"BEGIN", "COMMIT", "END"}:
                continue
            conn.exec_driver_sql(s)
        return
    conn.exec_driver_sql(sql)


def applied_migrations(engine: Engine) -> set[str]:
    with engine.begin() as conn:
        conn.execute(sql_text(_JOURNAL_DDL))
        rows = conn.execute(sql_text("SELECT filename FROM schema_migrations")).fetchall()
    return {str(r[0]) for r in rows}


def apply_migrations(engine: Engine, migrations_dir: str | os.PathLike[str] | None = None) -> list[str]:
    """Apply pending migrations and return the filenames applied in this run."""
    root = Path(migrations_dir) if migrations_dir is not None else default_migrations_dir(engine)
    if not root.exists():
        logger.warning("migrations.dir_missing path=%s", root)
        return []

    done = applied_migrations(engine)
    newly_applied: list[str] = []
    for sql_path in _iter_sql_files(root):
        fname = sql_path.name
        if fname in done:
            continue
        sql = sql_path.read_text(encoding="utf-8")
        if not sql.strip():
            continue
        try:
            with engine.begin() as conn:
                _exec_script(conn, sql)
                conn.execute(
                    sql_text("INSERT INTO schema_migrations (filename, applied_at) VALUES (:f, :at)"),
                    {
                        "f": fname,
                        "at": datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z"),
                    },
                )
        except Exception:
            logger.error("migrations.apply_failed file=%s", fname, exc_info=True)
            raise
        logger.info("migrations.applied file=%s", fname)
        newly_applied.append(fname)
    return newly_applied


__all__ = ["apply_migrations", "applied_migrations", "default_migrations_dir"]
