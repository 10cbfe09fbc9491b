"""Sustainability survey administration service.

Exposes the FastAPI application factory. Business logic lives in
``survey_admin/logic/`` and route handlers in ``survey_admin/routes/``.
"""

from __future__ import annotations

from survey_admin.main import create_app

__all__ = ["create_app"]
