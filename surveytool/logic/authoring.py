"""Survey authoring service: surveys, questions and options.

Applies the structural rules for conditional questions before delegating to
the repository helpers:
- a parent must exist and belong to the same survey,
- a question cannot be its own parent,
- a parent assignment must not close a loop anywhere up the chain,
- a question with children is only deleted with cascade.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from surveytool.logic import repository_questions as questions_repo
from surveytool.logic import repository_surveys as surveys_repo
from surveytool.logic.errors import DomainValidationError
from surveytool.models.graph import SurveyGraph

logger = logging.getLogger(__name__)


def create_survey(title: str, description: Optional[str]) -> int:
    survey_id = surveys_repo.insert_survey(title, description)
    logger.info("survey_created survey_id=%s", survey_id)
    return survey_id


def get_survey(survey_id: int) -> Optional[SurveyGraph]:
    return surveys_repo.fetch_survey_graph(survey_id)


def list_surveys() -> List[SurveyGraph]:
    graphs = [surveys_repo.fetch_survey_graph(sid) for sid in surveys_repo.list_survey_ids()]
    return [g for g in graphs if g is not None]


def update_survey(survey_id: int, title: str, description: Optional[str]) -> bool:
    return surveys_repo.update_survey_row(survey_id, title, description)


def delete_survey(survey_id: int) -> bool:
    deleted = surveys_repo.delete_survey_cascade(survey_id)
    if deleted:
        logger.info("survey_deleted survey_id=%s", survey_id)
    return deleted


def _validate_parent(survey_id: int, question_id: Optional[int], parent_question_id: Optional[int]) -> None:
    if parent_question_id is None:
        return
    if question_id is not None and parent_question_id == question_id:
        raise DomainValidationError("A question cannot be its own parent.")
    parent = questions_repo.get_question_row(parent_question_id)
    if parent is None:
        raise DomainValidationError(f"Parent question {parent_question_id} not found.")
    if int(parent["survey_id"]) != survey_id:
        raise DomainValidationError("Parent question must belong to the same survey.")
    if question_id is None:
        return
    # Walk up from the proposed parent; meeting question_id means a loop.
    seen = {parent_question_id}
    current = parent.get("parent_question_id")
    while current is not None:
        if current == question_id:
            raise DomainValidationError(
                f"Parent assignment would create a cycle between questions {question_id} and {parent_question_id}."
            )
        if current in seen:
            break
        seen.add(current)
        row = questions_repo.get_question_row(current)
        current = row.get("parent_question_id") if row is not None else None


def add_question(
    survey_id: int,
    text: str,
    qtype: str,
    parent_question_id: Optional[int] = None,
    trigger_option_ids: Optional[Iterable[int]] = None,
) -> int:
    if not surveys_repo.survey_exists(survey_id):
        raise DomainValidationError(f"Survey {survey_id} not found.")
    _validate_parent(survey_id, None, parent_question_id)
    question_id = questions_repo.insert_question(survey_id, text, qtype, parent_question_id, trigger_option_ids)
    logger.info("question_created survey_id=%s question_id=%s", survey_id, question_id)
    return question_id


def update_question(
    question_id: int,
    text: str,
    qtype: str,
    parent_question_id: Optional[int] = None,
    trigger_option_ids: Optional[Iterable[int]] = None,
) -> bool:
    row = questions_repo.get_question_row(question_id)
    if row is None:
        return False
    _validate_parent(int(row["survey_id"]), question_id, parent_question_id)
    return questions_repo.update_question_row(question_id, text, qtype, parent_question_id, trigger_option_ids)


def _collect_descendants(question_id: int, out: List[int], visited: set[int]) -> None:
    # Post-order so children are deleted before their parents.
    for child_id in questions_repo.list_child_question_ids(question_id):
        if child_id in visited:
            continue
        visited.add(child_id)
        _collect_descendants(child_id, out, visited)
        out.append(child_id)


def delete_question(question_id: int, cascade: bool = False) -> bool:
    if questions_repo.get_question_row(question_id) is None:
        return False
    children = questions_repo.list_child_question_ids(question_id)
    if children and not cascade:
        raise DomainValidationError(
            "Question has child questions. Delete with cascade=true or reparent them first."
        )
    doomed: List[int] = []
    if cascade:
        _collect_descendants(question_id, doomed, {question_id})
    doomed.append(question_id)
    questions_repo.delete_questions(doomed)
    logger.info("question_deleted question_id=%s cascade=%s removed=%s", question_id, cascade, len(doomed))
    return True


def add_option(question_id: int, text: str, weight: int) -> int:
    if questions_repo.get_question_row(question_id) is None:
        raise DomainValidationError(f"Question {question_id} not found.")
    return questions_repo.insert_option(question_id, text, weight)


def update_option(option_id: int, text: str, weight: int) -> bool:
    return questions_repo.update_option_row(option_id, text, weight)


def delete_option(option_id: int) -> bool:
    return questions_repo.delete_option_row(option_id)


__all__ = [
    "create_survey",
    "get_survey",
    "list_surveys",
    "update_survey",
    "delete_survey",
    "add_question",
    "update_question",
    "delete_question",
    "add_option",
    "update_option",
    "delete_option",
]
