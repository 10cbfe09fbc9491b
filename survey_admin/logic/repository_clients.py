"""Client data access.

Clients belong to exactly one client partner.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import text as sql_text

from survey_admin.db.base import get_engine

logger = logging.getLogger(__name__)

_CLIENT_FIELDS = ("name", "industry", "size", "contact_email", "contact_phone", "address")


def list_clients(partner_id: Optional[int] = None) -> List[Dict[str, Any]]:
    """Return clients (optionally for one partner) with ``partner_name``, ordered by name."""
    where = "WHERE c.client_partner_id = :pid" if partner_id is not None else ""
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(
                f"""
                SELECT c.*, cp.name AS partner_name
                FROM clients c
                JOIN client_partners cp ON c.client_partner_id = cp.id
                {where}
                ORDER BY c.name
                """
            ),
            {"pid": int(partner_id)} if partner_id is not None else {},
        ).fetchall()
    return [dict(r._mapping) for r in rows]


def create_client(fields: Dict[str, Any]) -> int:
    eng = get_engine()
    params = {name: fields.get(name) for name in _CLIENT_FIELDS}
    params["size"] = params["size"] or "Medium"
    params["client_partner_id"] = int(fields["client_partner_id"])
    try:
        with eng.begin() as conn:
            new_id = conn.execute(
                sql_text(
                    """
                    INSERT INTO clients (client_partner_id, name, industry, size, contact_email, contact_phone, address)
                    VALUES (:client_partner_id, :name, :industry, :size, :contact_email, :contact_phone, :address)
                    RETURNING id
                    """
                ),
                params,
            ).scalar_one()
    except Exception:
        logger.error(
            "create_client failed partner=%s name=%s", fields.get("client_partner_id"), fields.get("name"), exc_info=True
        )
        raise
    return int(new_id)


def update_client(client_id: int, fields: Dict[str, Any]) -> bool:
    eng = get_engine()
    params = {name: fields.get(name) for name in _CLIENT_FIELDS}
    params["size"] = params["size"] or "Medium"
    params["cid"] = int(client_id)
    try:
        with eng.begin() as conn:
            result = conn.execute(
                sql_text(
                    """
                    UPDATE clients SET
                        name = :name,
                        industry = :industry,
                        size = :size,
                        contact_email = :contact_email,
                        contact_phone = :contact_phone,
                        address = :address,
                        updated_at = CURRENT_TIMESTAMP
                    WHERE id = :cid
                    """
                ),
                params,
            )
    except Exception:
        logger.error("update_client failed id=%s", client_id, exc_info=True)
        raise
    return result.rowcount > 0


def delete_client(client_id: int) -> bool:
    eng = get_engine()
    try:
        with eng.begin() as conn:
            result = conn.execute(sql_text("DELETE FROM clients WHERE id = :cid"), {"cid": int(client_id)})
    except Exception:
        logger.error("delete_client failed id=%s", client_id, exc_info=True)
        raise
    return result.rowcount > 0


__all__ = ["list_clients", "create_client", "update_client", "delete_client"]
