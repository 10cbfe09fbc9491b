"""APIRouter registration for the survey administration API."""

from __future__ import annotations

from fastapi import APIRouter

from survey_admin.routes.clients import router as clients_router
from survey_admin.routes.partners import router as partners_router
from survey_admin.routes.questions import router as questions_router
from survey_admin.routes.surveys import router as surveys_router
from survey_admin.routes.vendors import router as vendors_router

api_router = APIRouter()
api_router.include_router(questions_router)
api_router.include_router(partners_router)
api_router.include_router(clients_router)
api_router.include_router(vendors_router)
api_router.include_router(surveys_router)

__all__ = ["api_router"]
