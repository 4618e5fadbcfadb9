from __future__ import annotations

import logging
from typing import Callable

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text as sql_text
from sqlalchemy.exc import SQLAlchemyError

from surveytool.config import AppConfig, load_config
from surveytool.db.base import configure_engine, get_engine
from surveytool.db.migrations_runner import apply_migrations
from surveytool.http.problem import (
    handle_domain_validation_error,
    handle_http_exception,
    handle_request_validation_error,
    handle_unexpected_error,
)
from surveytool.http.request_id import RequestIdMiddleware
from surveytool.logging_setup import configure_logging
from surveytool.logic.errors import DomainValidationError
from surveytool.logic.seed import seed_demo_data
from surveytool.routes import api_router

logger = logging.getLogger(__name__)


def _health_check() -> Callable[[], dict]:
    def check() -> dict:
        try:
            with get_engine().connect() as conn:
                conn.execute(sql_text("SELECT 1"))
            return {"status": "ok", "db": True}
        except SQLAlchemyError as e:
            logger.error("Health DB check failed", exc_info=True)
            return {"status": "degraded", "db": False, "reason": str(e)}

    return check


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build the FastAPI application.

    Startup applies migrations (unless disabled) and optionally seeds demo
    surveys into an empty database.
    """
    config = config or load_config()
    configure_logging(config.logging.level)
    configure_engine(config.database.dsn)

    app = FastAPI(
        title="Survey Tool API",
        version="1.0.0",
        description="REST API for building surveys with conditional questions, responses, and scoring.",
    )
    app.add_exception_handler(DomainValidationError, handle_domain_validation_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    app.add_middleware(RequestIdMiddleware)

    @app.on_event("startup")
    def _prepare_database() -> None:
        engine = get_engine()
        if config.app.auto_apply_migrations:
            try:
                applied = apply_migrations(engine)
            except Exception:
                logger.error("Failed to apply migrations at startup", exc_info=True)
                raise
            logger.info("startup_migrations applied=%s", applied)
        else:
            logger.info("AUTO_APPLY_MIGRATIONS disabled; skipping migrations at startup")
        if config.app.seed_demo_data:
            seed_demo_data()

    app.include_router(api_router, prefix="/api")

    health_check = _health_check()

    @app.get("/health", tags=["Health"])
    def health():
        return health_check()

    return app
