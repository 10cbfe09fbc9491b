"""Problem+JSON utilities and global exception handlers.

Every error response of the service is an RFC 7807 body served as
``application/problem+json``.
"""

from __future__ import annotations

from typing import Any, Optional
import logging
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from survey_admin.logic.errors import ReorderError

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


def problem_response(
    status: int,
    title: str,
    detail: Optional[str] = None,
    *,
    code: Optional[str] = None,
    **extra: Any,
) -> JSONResponse:
    body: dict[str, Any] = {"title": title, "status": int(status)}
    if detail is not None:
        body["detail"] = detail
    if code is not None:
        body["code"] = code
    body.update(extra)
    return JSONResponse(body, status_code=int(status), media_type=PROBLEM_MEDIA_TYPE)


def not_found(detail: str) -> JSONResponse:
    return problem_response(404, "Not Found", detail)


def missing_field(field: str) -> JSONResponse:
    return problem_response(400, "Bad Request", f"Field '{field}' is required", code="missing_field", field=field)


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: D401
    if isinstance(exc.detail, dict):
        detail = dict(exc.detail)
        detail.setdefault("status", int(exc.status_code))
    else:
        detail = {"title": "Error", "status": int(exc.status_code), "detail": str(exc.detail)}
    headers = {str(k): str(v) for k, v in (exc.headers or {}).items()}
    return JSONResponse(
        detail,
        status_code=int(exc.status_code),
        media_type=PROBLEM_MEDIA_TYPE,
        headers=headers or None,
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
    errors = []
    for err in exc.errors():
        errors.append({
            "path": "$." + ".".join(str(p) for p in err.get("loc", ())[1:]),
            "code": err.get("type"),
            "message": err.get("msg"),
        })
    problem = {
        "title": "Invalid Request",
        "status": 422,
        "detail": "Request validation failed",
        "errors": errors,
    }
    return JSONResponse(problem, status_code=422, media_type=PROBLEM_MEDIA_TYPE)


async def handle_reorder_error(request: Request, exc: ReorderError) -> JSONResponse:  # noqa: D401
    logger.warning("reorder.rejected code=%s path=%s detail=%s", exc.code, request.url.path, exc)
    return JSONResponse(exc.to_problem(), status_code=exc.status, media_type=PROBLEM_MEDIA_TYPE)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error path=%s", request.url.path, exc_info=exc)
    return JSONResponse({"title": "Internal Server Error", "status": 500}, status_code=500, media_type=PROBLEM_MEDIA_TYPE)


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "problem_response",
    "not_found",
    "missing_field",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_reorder_error",
    "handle_unexpected_error",
]
