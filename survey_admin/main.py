from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text as sql_text
from starlette.exceptions import HTTPException as StarletteHTTPException

from survey_admin.config import AppConfig, load_config
from survey_admin.db.base import get_engine
from survey_admin.db.migrations_runner import apply_migrations
from survey_admin.http.problem import (
    handle_http_exception,
    handle_reorder_error,
    handle_request_validation_error,
    handle_unexpected_error,
)
from survey_admin.http.request_id import RequestIdMiddleware
from survey_admin.logging_setup import configure_logging
from survey_admin.logic.errors import ReorderError
from survey_admin.routes import api_router

logger = logging.getLogger(__name__)


def _health_check() -> Callable[[], dict]:
    def check() -> dict:
        try:
            with get_engine().connect() as conn:
                conn.execute(sql_text("SELECT 1"))
            return {"status": "healthy", "db": True}
        except Exception as e:
            logger.error("Health DB check failed", exc_info=True)
            return {"status": "degraded", "db": False, "reason": str(e)}

    return check


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    configure_logging()
    cfg = config or load_config()

    app = FastAPI(title="Sustainability Survey Admin")
    app.state.config = cfg

    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(ReorderError, handle_reorder_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    app.add_middleware(RequestIdMiddleware)

    # Bind the engine to the configured DSN before any repository call
    engine = get_engine(cfg.database.dsn)

    @app.on_event("startup")
    def _apply_migrations() -> None:
        if not cfg.database.auto_apply_migrations:
            logger.info("AUTO_APPLY_MIGRATIONS disabled; skipping migrations at startup")
            return
        try:
            applied = apply_migrations(engine)
        except Exception:
            logger.error("Failed to apply migrations at startup", exc_info=True)
            raise
        logger.info("startup.migrations applied=%s", applied)

    app.include_router(api_router, prefix="/api")

    health_check = _health_check()

    @app.get("/healthz", tags=["Health"])
    def healthz():
        return health_check()

    logger.info(
        "app.created environment=%s dialect=%s page_size=%s",
        cfg.server.environment,
        engine.dialect.name,
        cfg.library.page_size,
    )
    return app


# Intentionally do not instantiate the app at import time to prevent side effects.
