"""Submission engine: visibility, per-type validation, scoring and persistence.

The whole submission is validated against one graph snapshot before anything
is written. Normalized items are buffered in memory and handed to the
repository in a single `persist_response` call, so a rejected submission
leaves no trace.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
from typing import Iterable, Optional
import logging

from surveytool.logic.errors import DomainValidationError
from surveytool.logic.survey_repository import SurveyRepository
from surveytool.logic.validation import validate_answer
from surveytool.logic.visibility_rules import VisibilityResolver
from surveytool.models.answers import AnswerSubmission, ResponseItem, StoredResponse, SubmissionResult
from surveytool.models.graph import SurveyGraph

logger = logging.getLogger(__name__)


def evaluate_submission(
    graph: SurveyGraph,
    items: Iterable[AnswerSubmission],
    now: Optional[datetime] = None,
) -> StoredResponse:
    """Validate and score a submission against a graph without persisting it."""
    items = list(items)

    counts = Counter(i.question_id for i in items)
    for item in items:
        if counts[item.question_id] > 1:
            raise DomainValidationError(f"Duplicate question {item.question_id} in submission.")

    index = {i.question_id: i for i in items}
    resolver = VisibilityResolver(graph, index)

    score = 0
    normalized: list[ResponseItem] = []
    for item in items:
        question = graph.question(item.question_id)
        if question is None:
            raise DomainValidationError(
                f"Question {item.question_id} does not belong to survey {graph.survey_id}."
            )
        if not resolver.is_visible(question):
            raise DomainValidationError(f"Question {question.id} is not visible under current answers.")
        validated = validate_answer(question, item)
        normalized.append(validated.item)
        score += validated.score

    return StoredResponse(
        survey_id=graph.survey_id,
        created_at=now or datetime.now(timezone.utc),
        score=score,
        items=tuple(normalized),
    )


def submit_response(
    repository: SurveyRepository,
    survey_id: int,
    items: Iterable[AnswerSubmission],
    now: Optional[datetime] = None,
) -> SubmissionResult:
    """Validate, score and persist a submission; return its id and score.

    Raises DomainValidationError for an unknown survey or any rule violation.
    Repository failures propagate unchanged.
    """
    items = list(items)
    graph = repository.fetch_graph(survey_id)
    if graph is None:
        logger.info("submission_rejected survey_id=%s reason=survey_not_found", survey_id)
        raise DomainValidationError(f"Survey {survey_id} not found.")

    try:
        response = evaluate_submission(graph, items, now=now)
    except DomainValidationError as exc:
        logger.info("submission_rejected survey_id=%s reason=%s", survey_id, exc)
        raise

    response_id = repository.persist_response(response)
    logger.info(
        "submission_accepted survey_id=%s response_id=%s score=%s items=%s",
        survey_id,
        response_id,
        response.score,
        len(response.items),
    )
    return SubmissionResult(response_id=response_id, score=response.score)


__all__ = ["evaluate_submission", "submit_response"]
