"""Response submission, read-back and visibility preview endpoints.

Handlers only translate payloads; validation and scoring live in
`surveytool.logic.submission` and data access in the repository.
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends

from surveytool.http.problem import not_found_problem
from surveytool.logic.repository_responses import get_survey_repository
from surveytool.logic.submission import submit_response
from surveytool.logic.survey_repository import SurveyRepository
from surveytool.logic.visibility_rules import compute_visible_set
from surveytool.models.submission import (
    ResponseDetailsOut,
    ResponseSummaryOut,
    SubmitResponseModel,
    SubmitResponseResult,
    VisibilityPreviewOut,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/surveys/{survey_id}/responses",
    summary="Submit a response to a survey",
    description="Validates visibility and types, computes the score, persists, and returns the response ID and score.",
    operation_id="Responses_Submit",
    tags=["Responses"],
    response_model=SubmitResponseResult,
)
def submit(survey_id: int, payload: SubmitResponseModel, repo: SurveyRepository = Depends(get_survey_repository)):
    result = submit_response(repo, survey_id, [i.to_domain() for i in payload.items])
    return SubmitResponseResult(response_id=result.response_id, score=result.score)


@router.post(
    "/surveys/{survey_id}/visibility",
    summary="Preview visible questions for a partial answer set",
    operation_id="Responses_PreviewVisibility",
    tags=["Responses"],
    response_model=VisibilityPreviewOut,
)
def preview_visibility(
    survey_id: int,
    payload: SubmitResponseModel,
    repo: SurveyRepository = Depends(get_survey_repository),
):
    graph = repo.fetch_graph(survey_id)
    if graph is None:
        raise not_found_problem(f"Survey {survey_id} not found.")
    # Last item wins for repeated question ids; preview does not validate.
    index = {i.question_id: i.to_domain() for i in payload.items}
    visible = compute_visible_set(graph, index)
    return VisibilityPreviewOut(survey_id=survey_id, visible_question_ids=sorted(visible))


@router.get(
    "/responses/{response_id}",
    summary="Get a response by ID",
    operation_id="Responses_GetById",
    tags=["Responses"],
    response_model=ResponseDetailsOut,
)
def get_response(response_id: int, repo: SurveyRepository = Depends(get_survey_repository)):
    stored = repo.fetch_response(response_id)
    if stored is None:
        raise not_found_problem(f"Response {response_id} not found.")
    return ResponseDetailsOut.from_domain(stored)


@router.get(
    "/surveys/{survey_id}/responses",
    summary="List responses for a survey",
    operation_id="Responses_ListForSurvey",
    tags=["Responses"],
    response_model=List[ResponseSummaryOut],
)
def list_responses(survey_id: int, repo: SurveyRepository = Depends(get_survey_repository)):
    return [ResponseSummaryOut.from_domain(r) for r in repo.list_responses(survey_id)]


__all__ = ["router"]
