"""Annual survey and answer endpoints."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter
from survey_admin.http.problem import missing_field, not_found, problem_response
from survey_admin.logic import repository_surveys as repo
from survey_admin.models.survey import AnswerBody, SurveyCreate, SurveyUpdate

router = APIRouter()
logger = logging.getLogger(__name__)

_REQUIRED_SURVEY_FIELDS = ("client_partner_id", "client_id", "vendor_id", "survey_year", "survey_name")


def _iso_dates(fields: Dict[str, Any]) -> Dict[str, Any]:
    for key in ("start_date", "end_date"):
        if fields.get(key) is not None:
            fields[key] = fields[key].isoformat()
    return fields


@router.get("/annual-surveys", summary="List annual surveys", operation_id="listAnnualSurveys", tags=["Surveys"])
def list_surveys(
    year: Optional[int] = None,
    status: Optional[str] = None,
    client_id: Optional[int] = None,
    vendor_id: Optional[int] = None,
    partner_id: Optional[int] = None,
):
    surveys = repo.list_surveys(
        {"year": year, "status": status, "client_id": client_id, "vendor_id": vendor_id, "partner_id": partner_id}
    )
    return {"success": True, "annual_surveys": surveys}


@router.get(
    "/annual-surveys/{survey_id}",
    summary="Get an annual survey with its questions",
    operation_id="getAnnualSurvey",
    tags=["Surveys"],
)
def get_survey(survey_id: int):
    survey = repo.get_survey(survey_id)
    if survey is None:
        return not_found("Annual survey not found")
    return {"success": True, "annual_survey": survey}


@router.post(
    "/annual-surveys",
    status_code=201,
    summary="Create an annual survey from the question library",
    operation_id="createAnnualSurvey",
    tags=["Surveys"],
)
def create_survey(body: SurveyCreate):
    for name in _REQUIRED_SURVEY_FIELDS:
        value = getattr(body, name)
        if value is None or (isinstance(value, str) and not value.strip()):
            return missing_field(name)
    fields = _iso_dates(body.model_dump(exclude={"include_all_questions", "question_ids"}))
    try:
        created = repo.create_survey(
            fields,
            include_all_questions=body.include_all_questions,
            question_ids=body.question_ids,
        )
    except repo.UnknownReferenceError:
        logger.warning(
            "surveys.create_rejected partner=%s client=%s vendor=%s",
            body.client_partner_id,
            body.client_id,
            body.vendor_id,
        )
        return problem_response(
            409,
            "Conflict",
            "client_partner_id, client_id and vendor_id must reference existing records",
            code="unknown_reference",
        )
    return {
        "success": True,
        "id": created["id"],
        "message": "Annual survey created successfully",
        "questions_added": created["questions_added"],
        "total_possible_points": created["total_possible_points"],
    }


@router.put(
    "/annual-surveys/{survey_id}",
    summary="Partially update an annual survey",
    operation_id="updateAnnualSurvey",
    tags=["Surveys"],
)
def update_survey(survey_id: int, body: SurveyUpdate):
    if not repo.update_survey(survey_id, _iso_dates(body.model_dump())):
        return not_found("Annual survey not found")
    return {"success": True, "message": "Annual survey updated successfully"}


@router.put(
    "/survey-questions/{survey_question_id}/answer",
    summary="Record an answer on a survey question",
    operation_id="answerSurveyQuestion",
    tags=["Surveys"],
)
def answer_survey_question(survey_question_id: int, body: AnswerBody):
    updated = repo.record_answer(
        survey_question_id,
        answer_value=body.answer_value,
        points_earned=body.points_earned,
        notes=body.notes,
    )
    if not updated:
        return not_found("Survey question not found")
    return {"success": True, "message": "Survey question answer updated successfully"}
