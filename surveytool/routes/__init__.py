"""APIRouter registration for the survey tool."""

from __future__ import annotations

from fastapi import APIRouter

from surveytool.routes.questions import router as questions_router
from surveytool.routes.responses import router as responses_router
from surveytool.routes.surveys import router as surveys_router

api_router = APIRouter()
api_router.include_router(surveys_router)
api_router.include_router(questions_router)
api_router.include_router(responses_router)

__all__ = ["api_router"]
