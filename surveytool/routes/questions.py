"""Question and option authoring endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Response

from surveytool.http.problem import not_found_problem
from surveytool.logic import authoring
from surveytool.models.surveys import CreatedModel, CreateOptionModel, QuestionWriteModel, UpdateOptionModel

router = APIRouter()


@router.post(
    "/surveys/{survey_id}/questions",
    summary="Add a question to a survey",
    operation_id="Questions_Create",
    tags=["Questions"],
    status_code=201,
    response_model=CreatedModel,
)
def create_question(survey_id: int, payload: QuestionWriteModel, response: Response):
    question_id = authoring.add_question(
        survey_id,
        payload.text,
        payload.type,
        payload.parent_question_id,
        payload.show_when_any_option_selected,
    )
    response.headers["Location"] = f"/api/questions/{question_id}"
    return CreatedModel(id=question_id)


@router.put(
    "/questions/{question_id}",
    summary="Update a question",
    operation_id="Questions_Update",
    tags=["Questions"],
    status_code=204,
)
def update_question(question_id: int, payload: QuestionWriteModel):
    ok = authoring.update_question(
        question_id,
        payload.text,
        payload.type,
        payload.parent_question_id,
        payload.show_when_any_option_selected,
    )
    if not ok:
        raise not_found_problem(f"Question {question_id} not found.")
    return Response(status_code=204)


@router.delete(
    "/questions/{question_id}",
    summary="Delete a question",
    operation_id="Questions_Delete",
    tags=["Questions"],
    status_code=204,
)
def delete_question(question_id: int, cascade: bool = False):
    if not authoring.delete_question(question_id, cascade=cascade):
        raise not_found_problem(f"Question {question_id} not found.")
    return Response(status_code=204)


@router.post(
    "/questions/{question_id}/options",
    summary="Add an answer option to a question",
    operation_id="Options_Create",
    tags=["Options"],
    status_code=201,
    response_model=CreatedModel,
)
def create_option(question_id: int, payload: CreateOptionModel, response: Response):
    option_id = authoring.add_option(question_id, payload.text, payload.weight)
    response.headers["Location"] = f"/api/options/{option_id}"
    return CreatedModel(id=option_id)


@router.put(
    "/options/{option_id}",
    summary="Update an answer option",
    operation_id="Options_Update",
    tags=["Options"],
    status_code=204,
)
def update_option(option_id: int, payload: UpdateOptionModel):
    if not authoring.update_option(option_id, payload.text, payload.weight):
        raise not_found_problem(f"Option {option_id} not found.")
    return Response(status_code=204)


@router.delete(
    "/options/{option_id}",
    summary="Delete an answer option",
    operation_id="Options_Delete",
    tags=["Options"],
    status_code=204,
)
def delete_option(option_id: int):
    if not authoring.delete_option(option_id):
        raise not_found_problem(f"Option {option_id} not found.")
    return Response(status_code=204)


__all__ = ["router"]
