"""Survey CRUD and aggregate score endpoints."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, Response

from surveytool.http.problem import not_found_problem
from surveytool.logic import authoring
from surveytool.logic.repository_responses import get_survey_repository
from surveytool.logic.scoring import summarize_scores
from surveytool.logic.survey_repository import SurveyRepository
from surveytool.models.surveys import CreatedModel, CreateSurveyModel, SurveyOut, UpdateSurveyModel
from surveytool.models.submission import ScoreSummaryOut

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/surveys",
    summary="List all surveys",
    operation_id="Surveys_List",
    tags=["Surveys"],
    response_model=List[SurveyOut],
)
def list_surveys():
    return [SurveyOut.from_domain(g) for g in authoring.list_surveys()]


@router.get(
    "/surveys/{survey_id}",
    summary="Get a survey with its questions and options",
    operation_id="Surveys_Get",
    tags=["Surveys"],
    response_model=SurveyOut,
)
def get_survey(survey_id: int):
    graph = authoring.get_survey(survey_id)
    if graph is None:
        raise not_found_problem(f"Survey {survey_id} not found.")
    return SurveyOut.from_domain(graph)


@router.post(
    "/surveys",
    summary="Create a survey",
    operation_id="Surveys_Create",
    tags=["Surveys"],
    status_code=201,
    response_model=CreatedModel,
)
def create_survey(payload: CreateSurveyModel, response: Response):
    survey_id = authoring.create_survey(payload.title, payload.description)
    response.headers["Location"] = f"/api/surveys/{survey_id}"
    return CreatedModel(id=survey_id)


@router.put(
    "/surveys/{survey_id}",
    summary="Update a survey",
    operation_id="Surveys_Update",
    tags=["Surveys"],
    status_code=204,
)
def update_survey(survey_id: int, payload: UpdateSurveyModel):
    if not authoring.update_survey(survey_id, payload.title, payload.description):
        raise not_found_problem(f"Survey {survey_id} not found.")
    return Response(status_code=204)


@router.delete(
    "/surveys/{survey_id}",
    summary="Delete a survey and its dependent data",
    operation_id="Surveys_Delete",
    tags=["Surveys"],
    status_code=204,
)
def delete_survey(survey_id: int):
    if not authoring.delete_survey(survey_id):
        raise not_found_problem(f"Survey {survey_id} not found.")
    return Response(status_code=204)


@router.get(
    "/surveys/{survey_id}/score",
    summary="Get aggregate score for a survey",
    operation_id="Surveys_Score",
    tags=["Surveys"],
    response_model=ScoreSummaryOut,
)
def get_survey_score(survey_id: int, repo: SurveyRepository = Depends(get_survey_repository)):
    if not repo.survey_exists(survey_id):
        raise not_found_problem(f"Survey {survey_id} not found.")
    total, count = repo.score_totals(survey_id)
    return ScoreSummaryOut.from_domain(survey_id, summarize_scores(total, count))


__all__ = ["router"]
