"""Annual survey data access.

An annual survey snapshots an ordered list of library questions into
``survey_questions``; answers are recorded against those snapshot rows.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import bindparam, text as sql_text
from sqlalchemy.exc import IntegrityError

from survey_admin.db.base import get_engine, session_scope

logger = logging.getLogger(__name__)


class UnknownReferenceError(ValueError):
    """A survey names a partner, client or vendor that does not exist."""


SURVEY_FILTERS = {
    "year": "asv.survey_year = :year",
    "status": "asv.status = :status",
    "client_id": "asv.client_id = :client_id",
    "vendor_id": "asv.vendor_id = :vendor_id",
    "partner_id": "asv.client_partner_id = :partner_id",
}

# Columns a PUT may overwrite; a None value leaves the stored one untouched
UPDATABLE_FIELDS = (
    "survey_name",
    "description",
    "status",
    "start_date",
    "end_date",
    "completion_percentage",
    "actual_points_earned",
)


def list_surveys(filters: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Return surveys with party names and question/answer counts.

    ``filters`` keys are those of ``SURVEY_FILTERS``; ``None`` values are ignored.
    """
    clauses = [SURVEY_FILTERS[k] for k, v in filters.items() if v is not None and k in SURVEY_FILTERS]
    params = {k: v for k, v in filters.items() if v is not None and k in SURVEY_FILTERS}
    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(
                f"""
                SELECT asv.*,
                       cp.name AS partner_name,
                       c.name AS client_name,
                       v.name AS vendor_name,
                       (SELECT COUNT(*) FROM survey_questions sq
                         WHERE sq.annual_survey_id = asv.id) AS question_count,
                       (SELECT COUNT(*) FROM survey_questions sq
                         WHERE sq.annual_survey_id = asv.id AND sq.answer_value IS NOT NULL) AS answered_count
                FROM annual_surveys asv
                JOIN client_partners cp ON asv.client_partner_id = cp.id
                JOIN clients c ON asv.client_id = c.id
                JOIN vendors v ON asv.vendor_id = v.id
                {where}
                ORDER BY asv.survey_year DESC, asv.created_at DESC, asv.id DESC
                """
            ),
            params,
        ).fetchall()
    return [dict(r._mapping) for r in rows]


def get_survey(survey_id: int) -> Optional[Dict[str, Any]]:
    """Return a survey with its ordered ``questions`` (joined to library text)."""
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text(
                """
                SELECT asv.*,
                       cp.name AS partner_name,
                       c.name AS client_name, c.industry AS client_industry,
                       v.name AS vendor_name, v.industry AS vendor_industry
                FROM annual_surveys asv
                JOIN client_partners cp ON asv.client_partner_id = cp.id
                JOIN clients c ON asv.client_id = c.id
                JOIN vendors v ON asv.vendor_id = v.id
                WHERE asv.id = :sid
                """
            ),
            {"sid": int(survey_id)},
        ).fetchone()
        if row is None:
            return None
        questions = conn.execute(
            sql_text(
                """
                SELECT sq.*, q.category, q.question_text, q.question_type, q.answer_type, q.max_points
                FROM survey_questions sq
                JOIN sustainability_questions q ON sq.question_id = q.id
                WHERE sq.annual_survey_id = :sid
                ORDER BY sq.question_order
                """
            ),
            {"sid": int(survey_id)},
        ).fetchall()
    survey = dict(row._mapping)
    survey["questions"] = [dict(q._mapping) for q in questions]
    return survey


def create_survey(
    fields: Dict[str, Any],
    *,
    include_all_questions: bool = True,
    question_ids: Sequence[int] = (),
) -> Dict[str, int]:
    """Create a survey and snapshot its questions in one transaction.

    Questions are taken in library order (category, question_order) and
    numbered 1..N. Returns ``{"id", "questions_added", "total_possible_points"}``.

    Raises:
        UnknownReferenceError: a partner, client or vendor id does not exist.
    """
    try:
        return _create_survey(fields, include_all_questions, question_ids)
    except IntegrityError as exc:
        raise UnknownReferenceError(str(exc.orig)) from exc


def _create_survey(
    fields: Dict[str, Any], include_all_questions: bool, question_ids: Sequence[int]
) -> Dict[str, int]:
    with session_scope() as session:
        survey_id = session.execute(
            sql_text(
                """
                INSERT INTO annual_surveys
                    (client_partner_id, client_id, vendor_id, survey_year, survey_name,
                     description, start_date, end_date)
                VALUES (:client_partner_id, :client_id, :vendor_id, :survey_year, :survey_name,
                        :description, :start_date, :end_date)
                RETURNING id
                """
            ),
            {
                "client_partner_id": int(fields["client_partner_id"]),
                "client_id": int(fields["client_id"]),
                "vendor_id": int(fields["vendor_id"]),
                "survey_year": int(fields["survey_year"]),
                "survey_name": fields["survey_name"],
                "description": fields.get("description"),
                "start_date": fields.get("start_date"),
                "end_date": fields.get("end_date"),
            },
        ).scalar_one()

        if include_all_questions:
            selected = session.execute(
                sql_text("SELECT id, max_points FROM sustainability_questions ORDER BY category, question_order, id")
            ).fetchall()
        elif question_ids:
            selected = session.execute(
                sql_text(
                    "SELECT id, max_points FROM sustainability_questions WHERE id IN :ids "
                    "ORDER BY category, question_order, id"
                ).bindparams(bindparam("ids", expanding=True)),
                {"ids": [int(q) for q in question_ids]},
            ).fetchall()
        else:
            selected = []

        total_points = 0
        for idx, row in enumerate(selected):
            total_points += int(row[1] or 0)
            session.execute(
                sql_text(
                    "INSERT INTO survey_questions (annual_survey_id, question_id, question_order) "
                    "VALUES (:sid, :qid, :ord)"
                ),
                {"sid": int(survey_id), "qid": int(row[0]), "ord": idx + 1},
            )
        session.execute(
            sql_text("UPDATE annual_surveys SET total_possible_points = :pts WHERE id = :sid"),
            {"pts": total_points, "sid": int(survey_id)},
        )
    logger.info(
        "surveys.created id=%s questions=%s total_points=%s", survey_id, len(selected), total_points
    )
    return {"id": int(survey_id), "questions_added": len(selected), "total_possible_points": total_points}


def update_survey(survey_id: int, fields: Dict[str, Any]) -> bool:
    """Partial update: ``None`` values keep the stored column (COALESCE)."""
    assignments = ",\n".join(f"{name} = COALESCE(:{name}, {name})" for name in UPDATABLE_FIELDS)
    eng = get_engine()
    try:
        with eng.begin() as conn:
            result = conn.execute(
                sql_text(
                    f"UPDATE annual_surveys SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = :sid"
                ),
                {**{name: fields.get(name) for name in UPDATABLE_FIELDS}, "sid": int(survey_id)},
            )
    except Exception:
        logger.error("update_survey failed id=%s", survey_id, exc_info=True)
        raise
    return result.rowcount > 0


def record_answer(
    survey_question_id: int,
    *,
    answer_value: Optional[str],
    points_earned: Optional[int] = None,
    notes: Optional[str] = None,
) -> bool:
    """Store an answer on a survey question row and stamp ``answered_at``."""
    eng = get_engine()
    try:
        with eng.begin() as conn:
            result = conn.execute(
                sql_text(
                    """
                    UPDATE survey_questions SET
                        answer_value = :answer_value,
                        points_earned = COALESCE(:points_earned, points_earned),
                        notes = COALESCE(:notes, notes),
                        answered_at = CURRENT_TIMESTAMP,
                        updated_at = CURRENT_TIMESTAMP
                    WHERE id = :sqid
                    """
                ),
                {
                    "answer_value": answer_value,
                    "points_earned": points_earned,
                    "notes": notes,
                    "sqid": int(survey_question_id),
                },
            )
    except Exception:
        logger.error("record_answer failed survey_question_id=%s", survey_question_id, exc_info=True)
        raise
    return result.rowcount > 0


__all__ = [
    "UnknownReferenceError",
    "SURVEY_FILTERS",
    "UPDATABLE_FIELDS",
    "list_surveys",
    "get_survey",
    "create_survey",
    "update_survey",
    "record_answer",
]
