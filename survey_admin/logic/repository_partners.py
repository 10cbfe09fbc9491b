"""Client partner data access."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from sqlalchemy import text as sql_text

from survey_admin.db.base import get_engine

logger = logging.getLogger(__name__)


def list_partners() -> List[Dict[str, Any]]:
    """Return every partner with its ``client_count``, ordered by name."""
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(
                """
                SELECT cp.id, cp.name, cp.description, cp.contact_email, cp.contact_phone,
                       cp.created_at, cp.updated_at, COUNT(c.id) AS client_count
                FROM client_partners cp
                LEFT JOIN clients c ON cp.id = c.client_partner_id
                GROUP BY cp.id, cp.name, cp.description, cp.contact_email, cp.contact_phone,
                         cp.created_at, cp.updated_at
                ORDER BY cp.name
                """
            )
        ).fetchall()
    return [dict(r._mapping) for r in rows]


def partner_exists(partner_id: int) -> bool:
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text("SELECT 1 FROM client_partners WHERE id = :pid"),
            {"pid": int(partner_id)},
        ).fetchone()
    return row is not None


def create_partner(fields: Dict[str, Any]) -> int:
    eng = get_engine()
    try:
        with eng.begin() as conn:
            new_id = conn.execute(
                sql_text(
                    "INSERT INTO client_partners (name, description, contact_email, contact_phone) "
                    "VALUES (:name, :description, :contact_email, :contact_phone) RETURNING id"
                ),
                {
                    "name": fields.get("name"),
                    "description": fields.get("description"),
                    "contact_email": fields.get("contact_email"),
                    "contact_phone": fields.get("contact_phone"),
                },
            ).scalar_one()
    except Exception:
        logger.error("create_partner failed name=%s", fields.get("name"), exc_info=True)
        raise
    return int(new_id)


def update_partner(partner_id: int, fields: Dict[str, Any]) -> bool:
    eng = get_engine()
    try:
        with eng.begin() as conn:
            result = conn.execute(
                sql_text(
                    """
                    UPDATE client_partners SET
                        name = :name,
                        description = :description,
                        contact_email = :contact_email,
                        contact_phone = :contact_phone,
                        updated_at = CURRENT_TIMESTAMP
                    WHERE id = :pid
                    """
                ),
                {
                    "name": fields.get("name"),
                    "description": fields.get("description"),
                    "contact_email": fields.get("contact_email"),
                    "contact_phone": fields.get("contact_phone"),
                    "pid": int(partner_id),
                },
            )
    except Exception:
        logger.error("update_partner failed id=%s", partner_id, exc_info=True)
        raise
    return result.rowcount > 0


def delete_partner(partner_id: int) -> bool:
    """Delete a partner; its clients and surveys go with it (ON DELETE CASCADE)."""
    eng = get_engine()
    try:
        with eng.begin() as conn:
            result = conn.execute(
                sql_text("DELETE FROM client_partners WHERE id = :pid"),
                {"pid": int(partner_id)},
            )
    except Exception:
        logger.error("delete_partner failed id=%s", partner_id, exc_info=True)
        raise
    return result.rowcount > 0


__all__ = ["list_partners", "partner_exists", "create_partner", "update_partner", "delete_partner"]
