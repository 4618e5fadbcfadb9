"""Problem+JSON utilities and global exception handlers.

Defines the RFC7807 media type and handler callables that produce
application/problem+json responses. Domain validation failures map to 400
with the message repeated under `errors[""]`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from surveytool.logic.errors import DomainValidationError

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


def not_found_problem(detail: str) -> HTTPException:
    """Build a 404 HTTPException whose detail is a problem body."""
    return HTTPException(status_code=404, detail={"title": "Not Found", "status": 404, "detail": detail})


def validation_problem(message: str) -> Dict[str, Any]:
    return {
        "title": "One or more validation errors occurred.",
        "status": 400,
        "detail": message,
        "errors": {"": [message]},
    }


async def handle_domain_validation_error(request: Request, exc: DomainValidationError) -> JSONResponse:
    logger.info(
        "domain_validation_failed method=%s path=%s message=%s",
        request.method,
        request.url.path,
        exc,
    )
    return JSONResponse(validation_problem(str(exc)), status_code=400, media_type=PROBLEM_MEDIA_TYPE)


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    status_code = int(exc.status_code or 500)
    if isinstance(exc.detail, dict):
        body = exc.detail
    else:
        body = {"title": "Error", "status": status_code, "detail": str(exc.detail or "")}
    headers = dict(exc.headers) if isinstance(getattr(exc, "headers", None), dict) else None
    return JSONResponse(body, status_code=status_code, media_type=PROBLEM_MEDIA_TYPE, headers=headers)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problem = {
        "title": "Invalid Request",
        "status": 422,
        "detail": "Request validation failed",
        # Error context may hold exception objects that are not JSON serializable
        "errors": [
            {"loc": list(e.get("loc", ())), "msg": str(e.get("msg", "")), "type": str(e.get("type", ""))}
            for e in exc.errors()
        ],
    }
    return JSONResponse(problem, status_code=422, media_type=PROBLEM_MEDIA_TYPE)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unexpected_error method=%s path=%s", request.method, request.url.path, exc_info=exc)
    return JSONResponse({"title": "Internal Server Error", "status": 500}, status_code=500, media_type=PROBLEM_MEDIA_TYPE)


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "not_found_problem",
    "validation_problem",
    "handle_domain_validation_error",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_unexpected_error",
]
