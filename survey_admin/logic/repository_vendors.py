"""Vendor data access."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from sqlalchemy import text as sql_text

from survey_admin.db.base import get_engine

logger = logging.getLogger(__name__)

_VENDOR_FIELDS = ("name", "industry", "vendor_type", "contact_email", "contact_phone", "address")


def list_vendors() -> List[Dict[str, Any]]:
    """Return vendors with the number of annual surveys issued to each."""
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(
                """
                SELECT v.id, v.name, v.industry, v.vendor_type, v.contact_email, v.contact_phone,
                       v.address, v.created_at, v.updated_at, COUNT(asv.id) AS survey_count
                FROM vendors v
                LEFT JOIN annual_surveys asv ON v.id = asv.vendor_id
                GROUP BY v.id, v.name, v.industry, v.vendor_type, v.contact_email, v.contact_phone,
                         v.address, v.created_at, v.updated_at
                ORDER BY v.name
                """
            )
        ).fetchall()
    return [dict(r._mapping) for r in rows]


def create_vendor(fields: Dict[str, Any]) -> int:
    eng = get_engine()
    try:
        with eng.begin() as conn:
            new_id = conn.execute(
                sql_text(
                    """
                    INSERT INTO vendors (name, industry, vendor_type, contact_email, contact_phone, address)
                    VALUES (:name, :industry, :vendor_type, :contact_email, :contact_phone, :address)
                    RETURNING id
                    """
                ),
                {name: fields.get(name) for name in _VENDOR_FIELDS},
            ).scalar_one()
    except Exception:
        logger.error("create_vendor failed name=%s", fields.get("name"), exc_info=True)
        raise
    return int(new_id)


def update_vendor(vendor_id: int, fields: Dict[str, Any]) -> bool:
    eng = get_engine()
    try:
        with eng.begin() as conn:
            result = conn.execute(
                sql_text(
                    """
                    UPDATE vendors SET
                        name = :name,
                        industry = :industry,
                        vendor_type = :vendor_type,
                        contact_email = :contact_email,
                        contact_phone = :contact_phone,
                        address = :address,
                        updated_at = CURRENT_TIMESTAMP
                    WHERE id = :vid
                    """
                ),
                {**{name: fields.get(name) for name in _VENDOR_FIELDS}, "vid": int(vendor_id)},
            )
    except Exception:
        logger.error("update_vendor failed id=%s", vendor_id, exc_info=True)
        raise
    return result.rowcount > 0


def delete_vendor(vendor_id: int) -> bool:
    eng = get_engine()
    try:
        with eng.begin() as conn:
            result = conn.execute(sql_text("DELETE FROM vendors WHERE id = :vid"), {"vid": int(vendor_id)})
    except Exception:
        logger.error("delete_vendor failed id=%s", vendor_id, exc_info=True)
        raise
    return result.rowcount > 0


__all__ = ["list_vendors", "create_vendor", "update_vendor", "delete_vendor"]
