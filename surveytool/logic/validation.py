"""Type-aware validation for submitted answers.

Each submitted item is checked against its question's type and option set and
normalized into a `ResponseItem` together with its score contribution.
"""

from __future__ import annotations

from dataclasses import dataclass

from surveytool.logic.errors import DomainValidationError
from surveytool.models.answers import AnswerSubmission, FreeTextAnswer, ResponseItem, SelectedOptions
from surveytool.models.graph import Question
from surveytool.models.question_type import QuestionType


@dataclass(frozen=True)
class ValidatedAnswer:
    item: ResponseItem
    score: int


def _validate_free_text(question: Question, item: AnswerSubmission) -> ValidatedAnswer:
    if item.selected_option_ids:
        raise DomainValidationError(f"Question {question.id} is freetext; options are not allowed.")
    return ValidatedAnswer(ResponseItem(question.id, FreeTextAnswer(item.free_text)), 0)


def _validate_single_choice(question: Question, item: AnswerSubmission) -> ValidatedAnswer:
    ids = tuple(item.selected_option_ids or ())
    if len(ids) != 1:
        raise DomainValidationError(f"Question {question.id} requires exactly one option.")
    opt = question.option_by_id(ids[0])
    if opt is None:
        raise DomainValidationError(f"Invalid option for question {question.id}.")
    return ValidatedAnswer(ResponseItem(question.id, SelectedOptions(ids)), opt.weight)


def _validate_multiple_choice(question: Question, item: AnswerSubmission) -> ValidatedAnswer:
    ids = tuple(item.selected_option_ids or ())
    if not ids:
        raise DomainValidationError(f"Question {question.id} requires at least one option.")
    seen: set[int] = set()
    for oid in ids:
        if oid in seen:
            raise DomainValidationError(f"Question {question.id} has duplicate option id {oid}.")
        seen.add(oid)
    matched = [o for o in question.options if o.id in seen]
    if len(matched) != len(ids):
        raise DomainValidationError(f"One or more selected options are invalid for question {question.id}.")
    return ValidatedAnswer(ResponseItem(question.id, SelectedOptions(ids)), sum(o.weight for o in matched))


_VALIDATORS = {
    QuestionType.FREE_TEXT: _validate_free_text,
    QuestionType.SINGLE_CHOICE: _validate_single_choice,
    QuestionType.MULTIPLE_CHOICE: _validate_multiple_choice,
}


def validate_answer(question: Question, item: AnswerSubmission) -> ValidatedAnswer:
    """Validate one submitted item against its question.

    Raises DomainValidationError when the answer shape does not match the
    question type or references options the question does not own.
    """
    validator = _VALIDATORS.get(question.type)
    if validator is None:
        raise DomainValidationError(f"Unsupported question type for question {question.id}.")
    return validator(question, item)


__all__ = ["ValidatedAnswer", "validate_answer"]
