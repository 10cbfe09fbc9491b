"""Question library endpoints, including drag-and-drop reordering."""

from __future__ import annotations

import logging
import math
from typing import List, Optional

from fastapi import APIRouter, Query, Request

from survey_admin.http.problem import missing_field, not_found
from survey_admin.logic import repository_questions as repo
from survey_admin.logic.errors import CrossGroupError, NotFoundError
from survey_admin.logic.library_view import build_library_view
from survey_admin.logic.order_sequences import next_question_order, reorder_questions
from survey_admin.logic.reorder import AfterItem, StartOfGroup, Target
from survey_admin.models.question import QuestionBody
from survey_admin.models.reorder import OrderEntry, ReorderRequest, ReorderResponse, StartTarget

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/questions",
    summary="List library questions (filtered, paginated)",
    operation_id="listQuestions",
    tags=["Questions"],
)
def list_questions(
    request: Request,
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    search: str = "",
    category: str = "",
    type: str = "",
):
    limit = limit or request.app.state.config.library.page_size
    questions, total = repo.list_questions(
        page=page, limit=limit, search=search, category=category, question_type=type
    )
    return {
        "success": True,
        "questions": questions,
        "total": total,
        "page": page,
        "totalPages": math.ceil(total / limit) if total else 0,
    }


@router.post(
    "/questions/reorder",
    summary="Move a question within its category",
    operation_id="reorderQuestion",
    tags=["Questions"],
    response_model=ReorderResponse,
)
def reorder_question(body: ReorderRequest) -> ReorderResponse:
    moved = repo.get_question(body.moved_id)
    if moved is None:
        raise NotFoundError(body.moved_id)
    category = str(moved["category"])

    target: Target
    if isinstance(body.target, StartTarget):
        if body.target.category is not None and body.target.category != category:
            raise CrossGroupError(category, body.target.category)
        target = StartOfGroup()
    else:
        dropped_on = repo.get_question(body.target.item_id)
        if dropped_on is None:
            raise NotFoundError(body.target.item_id)
        target = AfterItem(item_id=int(dropped_on["id"]), category=str(dropped_on["category"]))

    outcome = reorder_questions(category, body.moved_id, target)
    return ReorderResponse(
        category=outcome.category,
        questions=[OrderEntry(id=item.id, question_order=item.position) for item in outcome.sequence],
        changes=[OrderEntry(id=qid, question_order=pos) for qid, pos in outcome.changes],
        recovered=outcome.recovered,
        failed_ids=list(outcome.failed_ids),
        unresolved_ids=list(outcome.unresolved_ids),
    )


@router.get(
    "/questions/{question_id}",
    summary="Get a library question",
    operation_id="getQuestion",
    tags=["Questions"],
)
def get_question(question_id: int):
    question = repo.get_question(question_id)
    if question is None:
        return not_found("Question not found")
    return {"success": True, "question": question}


@router.post(
    "/questions",
    status_code=201,
    summary="Create a library question",
    operation_id="createQuestion",
    tags=["Questions"],
)
def create_question(body: QuestionBody):
    missing = body.missing_required()
    if missing:
        return missing_field(missing)
    fields = body.model_dump()
    if fields["question_order"] is None:
        fields["question_order"] = next_question_order(str(body.category))
    new_id = repo.create_question(fields)
    logger.info(
        "questions.created id=%s category=%s order=%s", new_id, body.category, fields["question_order"]
    )
    return {
        "success": True,
        "id": new_id,
        "question_order": fields["question_order"],
        "message": "Question created successfully",
    }


@router.put(
    "/questions/{question_id}",
    summary="Update a library question (full, or order only)",
    operation_id="updateQuestion",
    tags=["Questions"],
)
def update_question(question_id: int, body: QuestionBody):
    if body.is_order_only():
        if body.question_order is None:
            return missing_field("question_order")
        updated = repo.update_question_order(question_id, body.question_order)
    else:
        missing = body.missing_required(include_order=True)
        if missing:
            return missing_field(missing)
        updated = repo.update_question(question_id, body.model_dump())
    if not updated:
        return not_found("Question not found")
    return {"success": True, "message": "Question updated successfully"}


@router.delete(
    "/questions/{question_id}",
    summary="Delete a library question",
    operation_id="deleteQuestion",
    tags=["Questions"],
)
def delete_question(question_id: int):
    if not repo.delete_question(question_id):
        return not_found("Question not found")
    logger.info("questions.deleted id=%s", question_id)
    return {"success": True, "message": "Question deleted successfully"}


@router.get(
    "/categories",
    summary="List question categories",
    operation_id="listCategories",
    tags=["Questions"],
)
def list_categories():
    return {"success": True, "categories": repo.list_categories()}


@router.get(
    "/stats",
    summary="Question library statistics",
    operation_id="getStats",
    tags=["Questions"],
)
def get_stats():
    return {"success": True, "stats": repo.question_stats()}


@router.get(
    "/library",
    summary="Question library editor view grouped by category",
    operation_id="getLibraryView",
    tags=["Questions"],
)
def get_library_view(expanded: List[str] = Query(default=[])):
    return {"success": True, **build_library_view(repo.list_all_questions(), expanded)}
