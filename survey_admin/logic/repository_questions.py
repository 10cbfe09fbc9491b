"""Question library data access.

Encapsulates the SQL for ``sustainability_questions`` so route handlers stay
free of persistence details. Writes run in their own transaction; failures are
logged at ERROR with ``exc_info`` and re-raised.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import text as sql_text

from survey_admin.db.base import get_engine

logger = logging.getLogger(__name__)

QUESTION_COLUMNS = (
    "id, category, question_order, question_text, question_type, answer_type, "
    "effort_rating, impact_rating, max_points, created_at, updated_at"
)

# Mutable columns accepted by create/full update, in statement order
WRITABLE_FIELDS = (
    "category",
    "question_order",
    "question_text",
    "question_type",
    "answer_type",
    "effort_rating",
    "impact_rating",
    "max_points",
)


def _row_to_dict(row: Any) -> Dict[str, Any]:
    return dict(row._mapping)


def _filters(search: str = "", category: str = "", question_type: str = "") -> Tuple[str, Dict[str, Any]]:
    clauses: List[str] = []
    params: Dict[str, Any] = {}
    if search:
        clauses.append("question_text LIKE :search")
        params["search"] = f"%{search}%"
    if category:
        clauses.append("category = :category")
        params["category"] = category
    if question_type:
        clauses.append("question_type = :qtype")
        params["qtype"] = question_type
    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    return where, params


def list_questions(
    *,
    page: int = 1,
    limit: int = 100,
    search: str = "",
    category: str = "",
    question_type: str = "",
) -> Tuple[List[Dict[str, Any]], int]:
    """Return one page of questions ordered by category then order, plus the total count."""
    where, params = _filters(search, category, question_type)
    offset = (max(page, 1) - 1) * limit
    eng = get_engine()
    with eng.connect() as conn:
        total = conn.execute(
            sql_text(f"SELECT COUNT(*) FROM sustainability_questions {where}"),
            params,
        ).scalar_one()
        rows = conn.execute(
            sql_text(
                f"SELECT {QUESTION_COLUMNS} FROM sustainability_questions {where} "
                "ORDER BY category, question_order, id LIMIT :limit OFFSET :offset"
            ),
            {**params, "limit": int(limit), "offset": int(offset)},
        ).fetchall()
    return [_row_to_dict(r) for r in rows], int(total)


def list_all_questions() -> List[Dict[str, Any]]:
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(
                f"SELECT {QUESTION_COLUMNS} FROM sustainability_questions "
                "ORDER BY category, question_order, id"
            )
        ).fetchall()
    return [_row_to_dict(r) for r in rows]


def get_question(question_id: int) -> Optional[Dict[str, Any]]:
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text(f"SELECT {QUESTION_COLUMNS} FROM sustainability_questions WHERE id = :qid"),
            {"qid": int(question_id)},
        ).fetchone()
    return _row_to_dict(row) if row else None


def create_question(fields: Dict[str, Any]) -> int:
    """Insert a question row and return its id.

    ``fields`` must carry every name in ``WRITABLE_FIELDS``; the caller resolves
    ``question_order`` (append-to-end when the client omitted it).
    """
    eng = get_engine()
    try:
        with eng.begin() as conn:
            new_id = conn.execute(
                sql_text(
                    """
                    INSERT INTO sustainability_questions (
                        category, question_order, question_text, question_type,
                        answer_type, effort_rating, impact_rating, max_points
                    )
                    VALUES (:category, :question_order, :question_text, :question_type,
                            :answer_type, :effort_rating, :impact_rating, :max_points)
                    RETURNING id
                    """
                ),
                {name: fields.get(name) for name in WRITABLE_FIELDS},
            ).scalar_one()
    except Exception:
        logger.error("create_question insert failed category=%s", fields.get("category"), exc_info=True)
        raise
    return int(new_id)


def update_question(question_id: int, fields: Dict[str, Any]) -> bool:
    """Full update of every writable column. Returns False when no row matched."""
    eng = get_engine()
    try:
        with eng.begin() as conn:
            result = conn.execute(
                sql_text(
                    """
                    UPDATE sustainability_questions SET
                        category = :category,
                        question_order = :question_order,
                        question_text = :question_text,
                        question_type = :question_type,
                        answer_type = :answer_type,
                        effort_rating = :effort_rating,
                        impact_rating = :impact_rating,
                        max_points = :max_points,
                        updated_at = CURRENT_TIMESTAMP
                    WHERE id = :qid
                    """
                ),
                {**{name: fields.get(name) for name in WRITABLE_FIELDS}, "qid": int(question_id)},
            )
    except Exception:
        logger.error("update_question failed qid=%s", question_id, exc_info=True)
        raise
    return result.rowcount > 0


def update_question_order(question_id: int, question_order: int) -> bool:
    """Set only ``question_order``; safe to repeat with the same arguments."""
    eng = get_engine()
    try:
        with eng.begin() as conn:
            result = conn.execute(
                sql_text(
                    "UPDATE sustainability_questions SET question_order = :ord, "
                    "updated_at = CURRENT_TIMESTAMP WHERE id = :qid"
                ),
                {"ord": int(question_order), "qid": int(question_id)},
            )
    except Exception:
        logger.error(
            "update_question_order failed qid=%s order=%s", question_id, question_order, exc_info=True
        )
        raise
    return result.rowcount > 0


def delete_question(question_id: int) -> bool:
    eng = get_engine()
    try:
        with eng.begin() as conn:
            result = conn.execute(
                sql_text("DELETE FROM sustainability_questions WHERE id = :qid"),
                {"qid": int(question_id)},
            )
    except Exception:
        logger.error("delete_question failed qid=%s", question_id, exc_info=True)
        raise
    return result.rowcount > 0


def list_categories() -> List[str]:
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text("SELECT DISTINCT category FROM sustainability_questions ORDER BY category")
        ).fetchall()
    return [str(r[0]) for r in rows]


def question_stats() -> Dict[str, Any]:
    eng = get_engine()
    with eng.connect() as conn:
        total = conn.execute(sql_text("SELECT COUNT(*) FROM sustainability_questions")).scalar_one()
        by_category = conn.execute(
            sql_text(
                "SELECT category, COUNT(*) AS count FROM sustainability_questions "
                "GROUP BY category ORDER BY category"
            )
        ).fetchall()
        by_type = conn.execute(
            sql_text(
                "SELECT question_type, COUNT(*) AS count FROM sustainability_questions "
                "GROUP BY question_type ORDER BY question_type"
            )
        ).fetchall()
    return {
        "total": int(total),
        "byCategory": [{"category": str(r[0]), "count": int(r[1])} for r in by_category],
        "byType": [{"question_type": str(r[0]), "count": int(r[1])} for r in by_type],
    }


__all__ = [
    "WRITABLE_FIELDS",
    "list_questions",
    "list_all_questions",
    "get_question",
    "create_question",
    "update_question",
    "update_question_order",
    "delete_question",
    "list_categories",
    "question_stats",
]
